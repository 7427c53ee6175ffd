# sentimentbr/tests/test_80_cli.py
import csv

import pytest
from fastapi import APIRouter, WebSocket

import run
from sentimentbr.core.config import get_settings
from sentimentbr.reports.csv_export import export_to_dir
from sentimentbr.storage.models import SentimentRecord
from sentimentbr.tests.utils.data_factory import record_row


@pytest.fixture
def env_data_dir(tmp_path, monkeypatch):
    data = tmp_path / "data"
    monkeypatch.setenv("DATA_DIR", str(data))
    get_settings.cache_clear()
    yield data
    get_settings.cache_clear()


def test_export_to_dir_empty_writes_nothing(tmp_path):
    assert export_to_dir([], tmp_path / "out") is None
    assert not (tmp_path / "out").exists()


def test_export_to_dir(tmp_path):
    recs = [SentimentRecord.model_validate(record_row(i)) for i in (1, 2)]
    path = export_to_dir(recs, tmp_path / "out")
    assert path.name.startswith("analises_sentimento_") and path.suffix == ".csv"
    rows = list(csv.reader(path.open(encoding="utf-8")))
    assert len(rows) == 3


def test_cli_export_reads_configured_store(env_data_dir):
    env_data_dir.mkdir(parents=True)
    (env_data_dir / "sentiment_data.json").write_text(
        '[{"id": 1, "text": "texto exportado pela CLI", "sentiment": "neutral", '
        '"confidence": 55, "createdAt": "2025-01-02T10:00:00+00:00"}]',
        encoding="utf-8",
    )
    assert run.main(["export"]) == 0
    exported = list(env_data_dir.glob("analises_sentimento_*.csv"))
    assert len(exported) == 1
    assert "texto exportado pela CLI" in exported[0].read_text(encoding="utf-8")


def test_cli_routes(capsys):
    assert run.main(["routes"]) == 0
    out = capsys.readouterr().out
    assert "/api/analyze" in out and "/ws" in out


class _IncludedWrapper:
    """Included router held behind an object without a ``path``."""

    def __init__(self, router):
        self.router = router


def test_walk_routes_opens_included_router_wrappers():
    inner = APIRouter(prefix="/api")

    @inner.get("/ping")
    def ping():
        return {}

    @inner.websocket("/feed")
    async def feed(ws: WebSocket):
        pass

    paths = [r.path for r in run._walk_routes([_IncludedWrapper(inner), object()])]
    assert paths == ["/api/ping", "/api/feed"]
