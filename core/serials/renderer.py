"""Serial holdings renderer.

Renders MARC 863/866 holdings statements against their 853 prediction
patterns. Per statement:
- Enumeration/chronology subfields (a-f, i-m) are paired with their pattern
  text and split into runs. Chronological elements (pattern holds a token
  such as "(year)") run together; every other element is a run of its own.
  Each run renders on its own and the results are joined in order.
- Remaining subfields are bucketed by code, public notes (z) under "notes".
- A statement whose pattern is missing is shown as a single note taken from
  its first ``a`` subfield.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional

import core.serials.chronology  # noqa: F401  (registers chronology renderers)
from core.engine.template_engine import TemplateEngine, render_generic
from core.models.serials import (
    NOTES_KEY,
    HoldingStatement,
    MarcSubfieldRow,
    PredictionPattern,
    RenderedStatement,
)
from core.serials.assembler import assemble_holdings

logger = logging.getLogger(__name__)

ENUM_CHRONO_CODES = frozenset("abcdefijklm")
NOTE_CODE = "z"

_CHRONO_TOKEN = re.compile(r"\([^()]+\)")


@dataclass(frozen=True)
class PatternElement:
    """An enumeration/chronology subfield paired with its pattern text."""

    code: str
    pattern: str
    value: str

    @property
    def is_chronological(self) -> bool:
        return _CHRONO_TOKEN.search(self.pattern) is not None


def split_runs(elements: Iterable[PatternElement]) -> Iterator[list[PatternElement]]:
    """Yield maximal runs of chronological elements; others stand alone."""
    run: list[PatternElement] = []
    for element in elements:
        if element.is_chronological:
            run.append(element)
            continue
        if run:
            yield run
            run = []
        yield [element]
    if run:
        yield run


def render_run(run: list[PatternElement], engine: Optional[TemplateEngine] = None) -> str:
    patterns = [e.pattern for e in run]
    values = [e.value for e in run]
    if not run[0].is_chronological:
        return render_generic(patterns, values)
    return (engine or TemplateEngine()).render(patterns, values)


def join_runs(pieces: Iterable[str]) -> str:
    """Join rendered runs into normalised text.

    Exactly one space separates runs; the trailing space of raw
    ``pattern value `` renderings is stripped from the end of the result.
    """
    text = "".join(p if p.endswith(" ") else f"{p} " for p in pieces if p)
    return text.strip()


def bucket_other(subfields: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    other: dict[str, list[str]] = {}
    for code, value in subfields:
        key = NOTES_KEY if code == NOTE_CODE else code
        other.setdefault(key, []).append(value)
    return other


class SerialPatternRenderer:
    """Renders holdings statements into display structures.

    Usage::

        renderer = SerialPatternRenderer()
        rendered = renderer.render(patterns, statements)
        rendered[0].enum_chrono  # "v. 12 January 2000"
    """

    def __init__(self, engine: Optional[TemplateEngine] = None):
        self.engine = engine or TemplateEngine()

    def render_statement(
        self,
        patterns: Mapping[str, PredictionPattern],
        statement: HoldingStatement,
    ) -> RenderedStatement:
        pattern = patterns.get(statement.pattern_id) if statement.pattern_id else None
        if pattern is None:
            logger.debug("No prediction pattern %r, rendering statement as a note",
                         statement.pattern_id)
            note = statement.first_value("a")
            return RenderedStatement(other={NOTES_KEY: [note] if note is not None else []})

        elements = []
        others = []
        for subfield in statement.subfields:
            if subfield.code not in ENUM_CHRONO_CODES:
                others.append((subfield.code, subfield.value))
                continue
            text = pattern.element(subfield.code)
            if text is None:
                continue
            elements.append(PatternElement(subfield.code, text, subfield.value))

        enum_chrono = join_runs(render_run(run, self.engine) for run in split_runs(elements))
        return RenderedStatement(enum_chrono=enum_chrono, other=bucket_other(others))

    def render(
        self,
        patterns: Mapping[str, PredictionPattern],
        statements: Iterable[HoldingStatement],
    ) -> list[RenderedStatement]:
        """Render statements in their given order, one output each."""
        return [self.render_statement(patterns, s) for s in statements]

    def render_marc(self, rows: Iterable[MarcSubfieldRow]) -> list[RenderedStatement]:
        """Assemble raw holdings rows, then render them most recent first."""
        patterns, statements = assemble_holdings(rows)
        return self.render(patterns, statements)
