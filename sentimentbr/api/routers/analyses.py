# sentimentbr/api/routers/analyses.py
from __future__ import annotations

import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from sentimentbr.api.deps import get_store
from sentimentbr.storage.models import Period, SentimentFilter, SentimentRecord, SentimentStats
from sentimentbr.storage.store import JsonSentimentStore

router = APIRouter(prefix="/api", tags=["analyses"])

_FALSY = {"false", "0", "no", "off"}
_RECORD_ID = re.compile(r"-?[0-9]+")


def _flag(value: Optional[str]) -> bool:
    """Absent or anything but an explicit false value keeps the sentiment included."""
    return value is None or value.strip().lower() not in _FALSY


@router.get("/analyses", response_model=List[SentimentRecord])
def list_analyses(
    positive: Optional[str] = Query(None),
    negative: Optional[str] = Query(None),
    neutral: Optional[str] = Query(None),
    period: str = Query("all", description="all | today | week | month"),
    store: JsonSentimentStore = Depends(get_store),
):
    try:
        p = Period(period)
    except ValueError:
        raise HTTPException(400, "Período inválido") from None
    flt = SentimentFilter(positive=_flag(positive), negative=_flag(negative), neutral=_flag(neutral), period=p)
    return store.filtered(flt)


@router.get("/analyses/{analysis_id}", response_model=SentimentRecord)
def get_analysis(analysis_id: str, store: JsonSentimentStore = Depends(get_store)):
    if not _RECORD_ID.fullmatch(analysis_id):
        raise HTTPException(400, "ID inválido")
    rec = store.get(int(analysis_id))
    if rec is None:
        raise HTTPException(404, "Análise não encontrada")
    return rec


@router.get("/stats", response_model=SentimentStats)
def get_stats(store: JsonSentimentStore = Depends(get_store)):
    return store.stats()
