# sentimentbr/api/routers/spring.py
"""Entry point for external backends (e.g. a Spring Boot app) that want texts analysed and stored here."""
from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse

from sentimentbr.api.deps import get_classifier, get_notifier, get_store
from sentimentbr.api.routers.analyze import analyze_and_store
from sentimentbr.api.schemas.sentiment import MIN_SPRING_TEXT_LENGTH, SpringSentimentRequest, SpringSentimentResponse
from sentimentbr.core.errors import ClassificationError
from sentimentbr.realtime.notifier import Notifier
from sentimentbr.sentiment.llm_router import SentimentClassifier
from sentimentbr.storage.store import JsonSentimentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["spring"])


@router.post(
    "/spring-sentiment",
    response_model=SpringSentimentResponse,
    openapi_extra={"requestBody": {
        "content": {"application/json": {"schema": SpringSentimentRequest.model_json_schema()}},
    }},
)
async def spring_sentiment(
    request: Request,
    background: BackgroundTasks,
    classifier: SentimentClassifier = Depends(get_classifier),
    store: JsonSentimentStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
):
    # malformed or non-object JSON gets the same 400 as a short text
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    req = SpringSentimentRequest.model_validate(payload) if isinstance(payload, dict) else SpringSentimentRequest()

    text = req.text
    if not isinstance(text, str) or len(text.strip()) < MIN_SPRING_TEXT_LENGTH:
        return JSONResponse(status_code=400, content={
            "message": "Texto inválido ou muito curto",
            "error": f"O texto deve ter pelo menos {MIN_SPRING_TEXT_LENGTH} caracteres",
            "status": "error",
        })

    preview = text[:50] + ("..." if len(text) > 50 else "")
    logger.info(f"[spring] analysing: {preview!r}")
    try:
        record = await analyze_and_store(text, classifier, store)
    except ClassificationError as e:
        return JSONResponse(status_code=500, content={
            "message": "Erro ao processar a análise de sentimento",
            "error": str(e),
            "status": "error",
        })

    background.add_task(notifier.notify_new_analysis)
    return SpringSentimentResponse(
        id=record.id,
        text=record.text,
        sentiment=record.sentiment,
        confidence_score=record.confidence,
        timestamp=record.created_at,
    )
