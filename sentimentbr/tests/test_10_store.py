# sentimentbr/tests/test_10_store.py
import asyncio
import json
import time
from datetime import datetime, timedelta

import pytest

from sentimentbr.storage.models import Period, SentimentFilter, SentimentLabel
from sentimentbr.storage.store import JsonSentimentStore, period_cutoff
from sentimentbr.tests.utils.data_factory import record_row


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "sentiment_data.json"


@pytest.mark.asyncio
async def test_append_assigns_ids_and_persists(store_path):
    store = JsonSentimentStore(store_path)
    a = await store.append("Adorei o atendimento!", SentimentLabel.POSITIVE, 91)
    b = await store.append("Não gostei nada disso.", "negative", 77)
    assert (a.id, b.id) == (1, 2)
    assert a.created_at.tzinfo is not None

    on_disk = json.loads(store_path.read_text(encoding="utf-8"))
    assert [r["id"] for r in on_disk] == [1, 2]
    assert set(on_disk[0]) == {"id", "text", "sentiment", "confidence", "createdAt"}

    reloaded = JsonSentimentStore(store_path)
    assert [r.id for r in reloaded.list()] == [2, 1]
    c = await reloaded.append("Mais um texto qualquer", "neutral", 50)
    assert c.id == 3


@pytest.mark.asyncio
async def test_ids_continue_after_highest_stored(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps([record_row(4), record_row(9)]), encoding="utf-8")
    store = JsonSentimentStore(store_path)
    rec = await store.append("Texto novo para teste", "neutral", 40)
    assert rec.id == 10


@pytest.mark.parametrize("content", ["{not json", '{"id": 1}', '[{"id": "x"}]'])
def test_malformed_file_starts_empty(store_path, content, caplog):
    store_path.parent.mkdir(parents=True)
    store_path.write_text(content, encoding="utf-8")
    store = JsonSentimentStore(store_path)
    assert store.list() == []
    assert store.stats().total == 0
    assert "could not load" in caplog.text


def test_missing_file_and_directory_are_fine(store_path):
    store = JsonSentimentStore(store_path)
    assert len(store) == 0
    assert store_path.parent.is_dir()


def test_naive_timestamps_are_read_as_local(store_path):
    row = record_row(1)
    row["createdAt"] = "2024-05-01T10:00:00"
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps([row]), encoding="utf-8")
    rec = JsonSentimentStore(store_path).get(1)
    assert rec.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_failed_save_keeps_record_in_memory(store_path, monkeypatch, caplog):
    store = JsonSentimentStore(store_path)

    def boom(content):
        raise OSError("disk full")

    monkeypatch.setattr(store, "_write_atomic", boom)
    rec = await store.append("Texto que não vai para o disco", "neutral", 60)
    assert store.get(rec.id) == rec
    assert not store_path.exists()
    assert "could not save" in caplog.text


@pytest.mark.asyncio
async def test_save_leaves_no_temp_files(store_path):
    store = JsonSentimentStore(store_path)
    for i in range(3):
        await store.append(f"texto de teste {i:02d}", "positive", 70)
    assert sorted(p.name for p in store_path.parent.iterdir()) == [store_path.name]


@pytest.mark.asyncio
async def test_overlapping_appends_write_in_order(store_path, monkeypatch):
    store = JsonSentimentStore(store_path)
    write = store._write_atomic

    def slow_first_snapshot(content):
        if len(json.loads(content)) == 1:
            time.sleep(0.2)
        write(content)

    monkeypatch.setattr(store, "_write_atomic", slow_first_snapshot)
    await asyncio.gather(
        store.append("Primeira análise concorrente", "positive", 80),
        store.append("Segunda análise concorrente", "negative", 65),
    )

    on_disk = json.loads(store_path.read_text(encoding="utf-8"))
    assert [r["id"] for r in on_disk] == [1, 2]
    reloaded = JsonSentimentStore(store_path)
    rec = await reloaded.append("Depois de reiniciar o serviço", "neutral", 50)
    assert rec.id == 3


@pytest.mark.asyncio
async def test_stats_match_list(store_path):
    store = JsonSentimentStore(store_path)
    for label in ["positive", "positive", "negative", "neutral", "positive"]:
        await store.append("um texto qualquer aqui", label, 50)
    s = store.stats()
    assert (s.positive, s.negative, s.neutral, s.total) == (3, 1, 1, 5)
    assert s.total == len(store.list())
    assert s.positive + s.negative + s.neutral == s.total


@pytest.mark.asyncio
async def test_filter_all_flags_false_is_empty(store_path):
    store = JsonSentimentStore(store_path)
    await store.append("um texto qualquer aqui", "positive", 50)
    for period in Period:
        flt = SentimentFilter(positive=False, negative=False, neutral=False, period=period)
        assert store.filtered(flt) == []


def test_filter_by_period_and_sentiment(store_path):
    rows = [
        record_row(1, "positive", days_ago=40),
        record_row(2, "negative", days_ago=10),
        record_row(3, "positive", days_ago=3),
        record_row(4, "neutral", days_ago=0),
    ]
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps(rows), encoding="utf-8")
    store = JsonSentimentStore(store_path)

    ids = lambda flt: [r.id for r in store.filtered(flt)]  # noqa: E731
    assert ids(SentimentFilter()) == [4, 3, 2, 1]
    assert ids(SentimentFilter(period=Period.WEEK)) == [4, 3]
    assert ids(SentimentFilter(period=Period.MONTH)) == [4, 3, 2]
    assert ids(SentimentFilter(negative=False, neutral=False)) == [3, 1]

    midnight = datetime.now().astimezone().replace(hour=0, minute=0, second=0, microsecond=0)
    today = store.filtered(SentimentFilter(period=Period.TODAY))
    assert all(r.created_at >= midnight for r in today)


def test_period_cutoffs():
    now = datetime(2025, 3, 31, 15, 30).astimezone()
    assert period_cutoff(Period.ALL, now) is None
    assert period_cutoff(Period.TODAY, now) == now.replace(hour=0, minute=0, second=0, microsecond=0)
    assert period_cutoff(Period.WEEK, now) == now - timedelta(days=7)
    # day clamped to February's length
    month = period_cutoff(Period.MONTH, now)
    assert (month.year, month.month, month.day, month.hour) == (2025, 2, 28, 15)

    jan = datetime(2025, 1, 15, 8, 0).astimezone()
    dec = period_cutoff(Period.MONTH, jan)
    assert (dec.year, dec.month, dec.day) == (2024, 12, 15)
