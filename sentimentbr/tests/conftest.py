# sentimentbr/tests/conftest.py
import json

import pytest
from fastapi.testclient import TestClient

from sentimentbr.app import create_app
from sentimentbr.core.config import Settings
from sentimentbr.tests.utils.mocks import KeywordProvider

PROVIDER_ENV = ("AI_PROVIDER", "GEMINI_API_KEY", "OPENAI_API_KEY", "DATA_DIR", "DATA_FILE")


@pytest.fixture(autouse=True)
def _offline_env(monkeypatch, tmp_path):
    """No real provider keys in tests (nor a stray .env in cwd): nothing can reach the network."""
    monkeypatch.chdir(tmp_path)
    for name in PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path):
    return Settings(DATA_DIR=tmp_path / "data", _env_file=None)


@pytest.fixture
def make_client(settings):
    """Build an app around ``classifier`` and enter its lifespan (store/notifier live on app.state)."""
    opened = []

    def _make(classifier=None, raise_server_exceptions=True):
        app = create_app(settings, classifier=classifier or KeywordProvider())
        c = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        c.__enter__()
        opened.append(c)
        return c

    yield _make
    for c in opened:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def seed_file(settings):
    """Write records straight to the JSON file before the app starts."""

    def _seed(rows):
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
        settings.data_path.write_text(json.dumps(rows, ensure_ascii=False), encoding="utf-8")
        return settings.data_path

    return _seed

