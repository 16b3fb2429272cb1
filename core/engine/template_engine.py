"""Template Engine — formats chronology values into display text.

Prediction patterns describe chronology with composite tokens such as
``(year)(month)``. Each composite pattern registers its own renderer; the
engine dispatches on the lowercased composite string. A generic fallback
emits the raw pattern and value pairs for anything unregistered, and for
any renderer that cannot make sense of its values.

This is useful for:
- Adding a new chronology shape without touching the serial renderer
- Testing each date shape in isolation
"""

from datetime import date
from typing import Callable, Dict, Optional, Sequence


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def fmt_ordinal(day: int) -> str:
    """Format a day of month with its English suffix: 1st, 2nd, 11th."""
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def fmt_chrono(value: date, parts: str) -> str:
    """Format a date from a component string.

    ``parts`` is any ordered subset of "dmy": "my" -> "January 2000",
    "dm" -> "1st January", "dmy" -> "1st January 2000".
    """
    pieces = []
    if "d" in parts:
        pieces.append(fmt_ordinal(value.day))
    if "m" in parts:
        pieces.append(value.strftime("%B"))
    if "y" in parts:
        pieces.append(str(value.year))
    return " ".join(pieces)


# ---------------------------------------------------------------------------
# Generic fallback renderer
# ---------------------------------------------------------------------------

def render_generic(patterns: Sequence[str], values: Sequence[str]) -> str:
    """Raw rendering: ``pattern + " " + value + " "`` for each element."""
    return "".join(f"{p} {v} " for p, v in zip(patterns, values))


# ---------------------------------------------------------------------------
# Renderer type and registry
# ---------------------------------------------------------------------------

# Returns None when the values cannot be rendered for this pattern
ChronologyRenderer = Callable[[Sequence[str]], Optional[str]]

_CHRONOLOGY_RENDERERS: Dict[str, ChronologyRenderer] = {}


def composite_key(patterns: Sequence[str]) -> str:
    return "".join(patterns).strip().lower()


def register_renderer(pattern: str, renderer: ChronologyRenderer) -> None:
    """Register a renderer for a composite chronology pattern.

    Example::

        def render_year(values):
            return values[0]

        register_renderer("(year)", render_year)
    """
    _CHRONOLOGY_RENDERERS[composite_key([pattern])] = renderer


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class TemplateEngine:
    """Renders a run of chronology elements.

    Usage::

        engine = TemplateEngine()
        engine.render(["(year)", "(month)"], ["2000", "01-02"])
        # "January - February 2000"
    """

    @staticmethod
    def render(patterns: Sequence[str], values: Sequence[str]) -> str:
        """Render chronology values against their pattern tokens.

        Args:
            patterns: Pattern text per element, in subfield order.
            values: Subfield values aligned with ``patterns``.

        Returns:
            Display text; the generic rendering when the composite pattern
            is unknown or its renderer declines the values.
        """
        renderer = _CHRONOLOGY_RENDERERS.get(composite_key(patterns))
        if renderer is None:
            return render_generic(patterns, values)
        text = renderer(values)
        if text is None:
            return render_generic(patterns, values)
        return text

    @staticmethod
    def list_patterns() -> list[str]:
        """Return composite patterns with registered renderers."""
        return list(_CHRONOLOGY_RENDERERS.keys())
