# sentimentbr/storage/store.py
from __future__ import annotations

import asyncio
import calendar
import json
import logging
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

from .models import Period, SentimentFilter, SentimentLabel, SentimentRecord, SentimentStats

logger = logging.getLogger(__name__)


def _now() -> datetime:
    # local wall clock, timezone-aware
    return datetime.now().astimezone()


def _one_month_before(now: datetime) -> datetime:
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def period_cutoff(period: Period, now: Optional[datetime] = None) -> Optional[datetime]:
    """Earliest createdAt admitted by ``period``; None means no lower bound."""
    now = now or _now()
    if period == Period.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == Period.WEEK:
        return now - timedelta(days=7)
    if period == Period.MONTH:
        return _one_month_before(now)
    return None


def _newest_first(records: List[SentimentRecord]) -> List[SentimentRecord]:
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


class JsonSentimentStore:
    """
    In-memory list of analyses mirrored to a single JSON file.

    The whole list is rewritten on every append (temp file + rename).
    Load/save failures are logged and never raised: a failed save keeps the
    record in memory.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._records: List[SentimentRecord] = []
        self._next_id = 1
        self._write_lock = asyncio.Lock()
        self._load()

    # ---------------------------
    # file mirror
    # ---------------------------
    def _load(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                logger.info(f"📁 data file will be created at {self.path}")
                return
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("top-level JSON value is not a list")
            records = [SentimentRecord.model_validate(item) for item in raw]
        except (OSError, ValueError) as e:
            # JSONDecodeError and pydantic ValidationError are both ValueErrors
            logger.error(f"❌ could not load {self.path}, starting empty: {e}")
            self._records = []
            self._next_id = 1
            return

        self._records = records
        if records:
            self._next_id = max(r.id for r in records) + 1
        logger.info(f"📦 loaded {len(records)} analyses from {self.path}")

    def _dump(self) -> str:
        payload = [r.model_dump(mode="json", by_alias=True) for r in self._records]
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def _write_atomic(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def _save(self) -> None:
        # one writer at a time; the snapshot is taken once the lock is held
        async with self._write_lock:
            content = self._dump()
            try:
                await asyncio.to_thread(self._write_atomic, content)
            except OSError as e:
                logger.error(f"❌ could not save {self.path}: {e}")

    # ---------------------------
    # API
    # ---------------------------
    async def append(self, text: str, sentiment: SentimentLabel | str, confidence: int) -> SentimentRecord:
        record = SentimentRecord(
            id=self._next_id,
            text=text,
            sentiment=SentimentLabel(sentiment),
            confidence=confidence,
            created_at=_now(),
        )
        self._next_id += 1
        self._records.append(record)
        await self._save()
        return record

    def list(self) -> List[SentimentRecord]:
        return _newest_first(self._records)

    def get(self, record_id: int) -> Optional[SentimentRecord]:
        return next((r for r in self._records if r.id == record_id), None)

    def stats(self) -> SentimentStats:
        stats = SentimentStats(total=len(self._records))
        for r in self._records:
            if r.sentiment == SentimentLabel.POSITIVE:
                stats.positive += 1
            elif r.sentiment == SentimentLabel.NEGATIVE:
                stats.negative += 1
            else:
                stats.neutral += 1
        return stats

    def filtered(self, flt: SentimentFilter, now: Optional[datetime] = None) -> List[SentimentRecord]:
        cutoff = period_cutoff(flt.period, now)
        hits = [
            r for r in self._records
            if flt.includes(r.sentiment) and (cutoff is None or r.created_at >= cutoff)
        ]
        return _newest_first(hits)

    def __len__(self) -> int:
        return len(self._records)
