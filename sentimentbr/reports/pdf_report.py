# sentimentbr/reports/pdf_report.py
"""
Tabular PDF report of all analyses, drawn with matplotlib's PDF backend.

Every page is an A4 figure laid out in points (origin bottom-left). The
first page carries the title block and the summary counts; the table
header is repeated on each page.
"""
from __future__ import annotations

import io
import textwrap
from datetime import datetime
from typing import List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")

from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from matplotlib.lines import Line2D  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

from sentimentbr.storage.models import SentimentLabel, SentimentRecord  # noqa: E402

TITLE = "EcoBit - Análise de Sentimentos"
SUBTITLE = "Relatório de Análises"

PAGE_W, PAGE_H = 595.0, 842.0  # A4 in points
MARGIN_X = 40.0
TABLE_W = PAGE_W - 2 * MARGIN_X
ROW_H = 34.0
HEADER_H = 30.0
FIRST_TABLE_TOP = PAGE_H - 200.0
NEXT_TABLE_TOP = PAGE_H - 70.0
TABLE_BOTTOM = 90.0

HEADER_BG = "#2E7D32"
TITLE_COLOR = "#1f8a58"
ROW_COLORS = ("#f5f5f5", "#ffffff")
SENTIMENT_STYLE = {
    SentimentLabel.POSITIVE: ("Positivo", "#389e6d"),
    SentimentLabel.NEGATIVE: ("Negativo", "#e53935"),
    SentimentLabel.NEUTRAL: ("Neutro", "#757575"),
}

# (title, fraction of table width, horizontal alignment)
COLUMNS = [
    ("ID", 0.08, "left"),
    ("Texto", 0.47, "left"),
    ("Sentimento", 0.15, "center"),
    ("Confiança", 0.12, "center"),
    ("Data", 0.18, "right"),
]

MAX_TEXT = 80
WRAP_AT = 48


def truncate(text: str, limit: int = MAX_TEXT) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _cell_x(index: int, align: str) -> float:
    left = MARGIN_X + sum(w for _, w, _ in COLUMNS[:index]) * TABLE_W
    width = COLUMNS[index][1] * TABLE_W
    pad = 6.0
    if align == "center":
        return left + width / 2
    if align == "right":
        return left + width - pad
    return left + pad


def _rows_per_page(top: float) -> int:
    return max(1, int((top - HEADER_H - TABLE_BOTTOM) // ROW_H))


def paginate(records: Sequence[SentimentRecord]) -> List[Sequence[SentimentRecord]]:
    pages: List[Sequence[SentimentRecord]] = []
    first = _rows_per_page(FIRST_TABLE_TOP)
    pages.append(records[:first])
    rest = records[first:]
    per_page = _rows_per_page(NEXT_TABLE_TOP)
    for i in range(0, len(rest), per_page):
        pages.append(rest[i:i + per_page])
    return pages


class _Page:
    def __init__(self):
        self.fig = Figure(figsize=(PAGE_W / 72, PAGE_H / 72))
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        self.ax.set_xlim(0, PAGE_W)
        self.ax.set_ylim(0, PAGE_H)
        self.ax.axis("off")

    def text(self, x, y, s, **kw):
        kw.setdefault("fontsize", 10)
        kw.setdefault("va", "center")
        kw.setdefault("family", "DejaVu Sans")
        kw.setdefault("parse_math", False)  # user text may contain "$"
        self.ax.text(x, y, s, **kw)

    def band(self, y_top: float, height: float, color: str):
        self.ax.add_patch(Rectangle((MARGIN_X, y_top - height), TABLE_W, height,
                                    facecolor=color, edgecolor="none"))


def _draw_title_block(page: _Page, generated_at: datetime, counts: dict, total: int) -> None:
    page.text(PAGE_W / 2, PAGE_H - 60, TITLE, fontsize=22, weight="bold", color=TITLE_COLOR, ha="center")
    page.text(PAGE_W / 2, PAGE_H - 88, SUBTITLE, fontsize=13, color="#666666", ha="center")
    page.text(MARGIN_X, PAGE_H - 118, f"Data: {generated_at:%d/%m/%Y}", color="#666666")
    page.text(PAGE_W - MARGIN_X, PAGE_H - 118, f"Hora: {generated_at:%H:%M:%S}", color="#666666", ha="right")
    page.text(MARGIN_X, PAGE_H - 134, f"Total de registros: {total}", color="#666666")
    page.text(
        PAGE_W / 2, PAGE_H - 165,
        f"Total de análises: {total} | Positivas: {counts[SentimentLabel.POSITIVE]} | "
        f"Negativas: {counts[SentimentLabel.NEGATIVE]} | Neutras: {counts[SentimentLabel.NEUTRAL]}",
        fontsize=11, color="#333333", ha="center",
    )


def _draw_table(page: _Page, top: float, rows: Sequence[SentimentRecord]) -> None:
    page.band(top, HEADER_H, HEADER_BG)
    for i, (title, _, align) in enumerate(COLUMNS):
        page.text(_cell_x(i, align), top - HEADER_H / 2, title,
                  fontsize=11, weight="bold", color="white", ha=align)

    y = top - HEADER_H
    for n, r in enumerate(rows):
        page.band(y, ROW_H, ROW_COLORS[n % 2])
        mid = y - ROW_H / 2
        label, color = SENTIMENT_STYLE[r.sentiment]
        body = "\n".join(textwrap.wrap(truncate(r.text), WRAP_AT)[:2])
        cells = [
            (str(r.id), "#000000"),
            (body, "#000000"),
            (label, color),
            (f"{r.confidence}%", "#000000"),
            (f"{r.created_at.astimezone():%d/%m/%Y}", "#000000"),
        ]
        for i, (value, fg) in enumerate(cells):
            align = COLUMNS[i][2]
            page.text(_cell_x(i, align), mid, value, fontsize=9, color=fg, ha=align, linespacing=1.3)
        y -= ROW_H


def _draw_footer(page: _Page, generated_at: datetime, number: int, count: int) -> None:
    page.ax.add_line(Line2D([MARGIN_X, PAGE_W - MARGIN_X], [70, 70], color="#cccccc", linewidth=0.5))
    page.text(PAGE_W / 2, 50, f"{TITLE} | Relatório gerado em {generated_at:%d/%m/%Y %H:%M:%S}",
              fontsize=8, color="#666666", ha="center")
    page.text(PAGE_W - MARGIN_X, 35, f"Página {number} de {count}", fontsize=8, color="#999999", ha="right")


def render_pdf(records: Sequence[SentimentRecord], generated_at: Optional[datetime] = None) -> bytes:
    """Render ``records`` (already in display order) to PDF bytes."""
    generated_at = (generated_at or datetime.now()).astimezone()
    counts = {label: 0 for label in SentimentLabel}
    for r in records:
        counts[r.sentiment] += 1

    pages = paginate(list(records))
    buf = io.BytesIO()
    with PdfPages(buf, metadata={"Title": f"{TITLE} - {SUBTITLE}", "Creator": "sentimentbr"}) as pdf:
        for number, chunk in enumerate(pages, start=1):
            page = _Page()
            if number == 1:
                _draw_title_block(page, generated_at, counts, len(records))
                _draw_table(page, FIRST_TABLE_TOP, chunk)
            else:
                _draw_table(page, NEXT_TABLE_TOP, chunk)
            _draw_footer(page, generated_at, number, len(pages))
            pdf.savefig(page.fig)
    return buf.getvalue()
