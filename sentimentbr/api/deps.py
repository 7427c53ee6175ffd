# sentimentbr/api/deps.py
from starlette.requests import HTTPConnection

from sentimentbr.realtime.notifier import Notifier
from sentimentbr.sentiment.llm_router import SentimentClassifier
from sentimentbr.storage.store import JsonSentimentStore


def get_store(conn: HTTPConnection) -> JsonSentimentStore:
    """FastAPI dependency: the store built in the app lifespan (works for HTTP and websocket routes)."""
    return conn.app.state.store


def get_notifier(conn: HTTPConnection) -> Notifier:
    return conn.app.state.notifier


def get_classifier(conn: HTTPConnection) -> SentimentClassifier:
    return conn.app.state.classifier
