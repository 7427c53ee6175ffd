# sentimentbr/api/routers/export.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response, StreamingResponse
from starlette.concurrency import run_in_threadpool

from sentimentbr.api.deps import get_store
from sentimentbr.reports.csv_export import export_filename, iter_csv
from sentimentbr.reports.pdf_report import render_pdf
from sentimentbr.storage.store import JsonSentimentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])

NOTHING_TO_EXPORT = "Nenhuma análise encontrada para exportar"


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f"attachment; filename={filename}"}


@router.get("/csv")
def export_csv(store: JsonSentimentStore = Depends(get_store)):
    records = store.list()
    if not records:
        raise HTTPException(404, NOTHING_TO_EXPORT)
    logger.info(f"📤 CSV export: {len(records)} analyses")
    return StreamingResponse(
        iter_csv(records),
        media_type="text/csv; charset=utf-8",
        headers=_attachment(export_filename("csv")),
    )


@router.get("/pdf")
async def export_pdf(store: JsonSentimentStore = Depends(get_store)):
    records = store.list()
    if not records:
        raise HTTPException(404, NOTHING_TO_EXPORT)
    logger.info(f"📤 PDF export: {len(records)} analyses")
    content = await run_in_threadpool(render_pdf, records)
    return Response(content, media_type="application/pdf", headers=_attachment(export_filename("pdf")))
