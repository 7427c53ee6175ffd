# sentimentbr/reports/csv_export.py
from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Iterator, Optional

from sentimentbr.storage.models import SentimentRecord

logger = logging.getLogger(__name__)

CSV_HEADER = ["ID", "Texto", "Sentimento", "Confiança (%)", "Data"]
DATE_FORMAT = "%d/%m/%Y %H:%M:%S"


def export_filename(ext: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"analises_sentimento_{today.isoformat()}.{ext}"


def format_timestamp(ts: datetime) -> str:
    return ts.astimezone().strftime(DATE_FORMAT)


def iter_csv(records: Iterable[SentimentRecord]) -> Iterator[str]:
    """Yield the CSV one line at a time (header first); embedded quotes in text are doubled."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    def flush() -> str:
        line = buf.getvalue()
        buf.seek(0)
        buf.truncate(0)
        return line

    writer.writerow(CSV_HEADER)
    yield flush()
    for r in records:
        writer.writerow([r.id, r.text, r.sentiment.value, r.confidence, format_timestamp(r.created_at)])
        yield flush()


def render_csv(records: Iterable[SentimentRecord]) -> str:
    return "".join(iter_csv(records))


def export_to_dir(records: Iterable[SentimentRecord], out_dir: Path) -> Optional[Path]:
    """Write the CSV export into ``out_dir``; returns the file path, or None when there is nothing to export."""
    records = list(records)
    if not records:
        logger.info("no analyses to export")
        return None
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename("csv")
    path.write_text(render_csv(records), encoding="utf-8")
    logger.info(f"✅ exported {len(records)} analyses to {path}")
    return path
