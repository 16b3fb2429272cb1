"""Chronology renderers for serial holdings.

Registers renderers for ``(year)``, ``(year)(month)`` and
``(year)(month)(day)`` with the template engine. Values follow the order of
the composite pattern: year first, then month, then day. Each value may be a
range of two dash-separated sub-values ("01-02").

The shape of the output is picked from an explicit case table keyed by how
many sub-values the day, month and year carry. The end of a range that
cannot be parsed is dropped and the start is shown in full; a start that
cannot be parsed falls back to the raw rendering.
"""

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from core.engine.template_engine import fmt_chrono, register_renderer

logger = logging.getLogger(__name__)


# (month count, year count) -> (start format, end sub-value indexes or None)
# End indexes are (month, year).
_MONTH_YEAR_CASES = {
    (1, 1): ("my", None),       # January 2000
    (2, 1): ("m", (1, 0)),      # January - February 2000
    (1, 2): ("my", (0, 1)),     # January 2000 - January 2001
    (2, 2): ("my", (1, 1)),     # January 2000 - February 2001
}

# (day count, month count, year count) -> (start format, end (d, m, y) or None)
_DAY_MONTH_YEAR_CASES = {
    (1, 1, 1): ("dmy", None),          # 1st January 2000
    (1, 1, 2): ("dmy", (0, 0, 1)),     # 1st January 2000 - 1st January 2001
    (1, 2, 1): ("dm", (0, 1, 0)),      # 1st January - 1st February 2000
    (1, 2, 2): ("dmy", (0, 1, 1)),     # 1st January 2000 - 1st February 2001
    (2, 1, 1): ("d", (1, 0, 0)),       # 1st - 2nd January 2000
    (2, 1, 2): ("dmy", (1, 0, 1)),     # 1st January 2000 - 2nd January 2001
    (2, 2, 1): ("dm", (1, 1, 0)),      # 1st January - 2nd February 2000
    (2, 2, 2): ("dmy", (1, 1, 1)),     # 1st January 2000 - 2nd February 2001
}


def split_range(value: str) -> list[str]:
    """Split "01-02" into its first and last sub-values."""
    parts = [p.strip() for p in (value or "").split("-")]
    if len(parts) > 2:
        return [parts[0], parts[-1]]
    return parts


def compose_date(day: str, month: str, year: str) -> Optional[date]:
    """Build a date from parts, always read as day-month-year."""
    text = f"{day}-{month}-{year}"
    for fmt in ("%d-%m-%Y", "%d-%m-%y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    logger.debug("Unparseable chronology date %r", text)
    return None


def _render_range(start: Optional[date], end: Optional[date], start_parts: str, full: str) -> Optional[str]:
    if start is None:
        return None
    if end is None:
        return fmt_chrono(start, full)
    return f"{fmt_chrono(start, start_parts)} - {fmt_chrono(end, full)}"


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_year(values: Sequence[str]) -> Optional[str]:
    if not values:
        return None
    return values[0]


def render_year_month(values: Sequence[str]) -> Optional[str]:
    if len(values) < 2:
        return None
    years = split_range(values[0])
    months = split_range(values[1])

    start_parts, end_index = _MONTH_YEAR_CASES[(len(months), len(years))]
    start = compose_date("01", months[0], years[0])
    end = None
    if end_index is not None:
        m, y = end_index
        end = compose_date("01", months[m], years[y])
    return _render_range(start, end, start_parts, "my")


def render_year_month_day(values: Sequence[str]) -> Optional[str]:
    if len(values) < 3:
        return None
    years = split_range(values[0])
    months = split_range(values[1])
    days = split_range(values[2])

    start_parts, end_index = _DAY_MONTH_YEAR_CASES[(len(days), len(months), len(years))]
    start = compose_date(days[0], months[0], years[0])
    end = None
    if end_index is not None:
        d, m, y = end_index
        end = compose_date(days[d], months[m], years[y])
    return _render_range(start, end, start_parts, "dmy")


# Auto-register on import
register_renderer("(year)", render_year)
register_renderer("(year)(month)", render_year_month)
register_renderer("(year)(month)(day)", render_year_month_day)
