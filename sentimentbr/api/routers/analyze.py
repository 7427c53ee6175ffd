# sentimentbr/api/routers/analyze.py
from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status

from sentimentbr.api.deps import get_classifier, get_notifier, get_store
from sentimentbr.api.schemas.sentiment import AnalyzeRequest
from sentimentbr.realtime.notifier import Notifier
from sentimentbr.sentiment.llm_router import SentimentClassifier
from sentimentbr.storage.models import SentimentRecord
from sentimentbr.storage.store import JsonSentimentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])


async def analyze_and_store(text: str, classifier: SentimentClassifier, store: JsonSentimentStore) -> SentimentRecord:
    """classify -> append. Raises ClassificationError when no provider answered."""
    result = await classifier.classify(text)
    record = await store.append(text, result.sentiment, result.confidence)
    logger.info(f"✅ analysis #{record.id} stored: {record.sentiment.value} ({record.confidence}%)")
    return record


@router.post("/analyze", response_model=SentimentRecord, status_code=status.HTTP_201_CREATED)
async def analyze(
    req: AnalyzeRequest,
    background: BackgroundTasks,
    classifier: SentimentClassifier = Depends(get_classifier),
    store: JsonSentimentStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
):
    record = await analyze_and_store(req.text, classifier, store)
    # runs after the response is sent
    background.add_task(notifier.notify_new_analysis)
    return record
