"""Assembles extracted MARC holdings rows into patterns and statements.

Rows arrive one per subfield, tagged with the field sequence they belong
to. Each field carries a subfield ``8`` of the form ``"<rule>.<order>"``;
the rule links an 863/866 statement to the 853 prediction pattern with the
same rule. Fields are ordered most recent first: by rule, then by order,
both descending.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.models.serials import HoldingStatement, MarcSubfieldRow, PredictionPattern, Subfield

logger = logging.getLogger(__name__)

LINK_CODE = "8"
PATTERN_TAG = "853"


def make_sort_key(link: str) -> str:
    """Normalise a ``rule.order`` link to ``rule.00000`` form."""
    rule, _, order = link.strip().partition(".")
    try:
        order_number = int(order)
    except ValueError:
        order_number = 0
    return f"{rule}.{order_number:05d}"


def sort_key_order(sort_key: str) -> tuple[int, str]:
    """Sortable form of a sort key; keys without a numeric rule go last."""
    rule, _, order = sort_key.partition(".")
    rule_number = int(rule) if rule.isdigit() else -1
    return rule_number, order


def rule_of(sort_key: str) -> Optional[str]:
    rule = sort_key.partition(".")[0]
    return rule or None


def group_fields(rows: Iterable[MarcSubfieldRow]) -> dict[int, list[MarcSubfieldRow]]:
    """Group non-blank subfield rows by field sequence, in arrival order."""
    fields: dict[int, list[MarcSubfieldRow]] = {}
    for row in rows:
        if row.data is None or not row.data.strip():
            continue
        fields.setdefault(row.field_sequence, []).append(
            row.model_copy(update={
                "tag": row.tag.strip(),
                "code": row.code.strip(),
                "data": row.data.strip(),
            })
        )
    return fields


def assemble_holdings(
    rows: Iterable[MarcSubfieldRow],
) -> tuple[dict[str, PredictionPattern], list[HoldingStatement]]:
    """Split holdings rows into prediction patterns and sorted statements.

    Returns:
        (patterns keyed by rule, statements most recent first)
    """
    entries = []
    for subfields in group_fields(rows).values():
        tag = subfields[0].tag
        sort_key = ""
        data = []
        for subfield in subfields:
            if subfield.code == LINK_CODE:
                tag = subfield.tag
                sort_key = make_sort_key(subfield.data)
            else:
                data.append(Subfield(code=subfield.code, value=subfield.data))
        entries.append((sort_key, tag, data))

    entries.sort(key=lambda entry: sort_key_order(entry[0]), reverse=True)

    patterns: dict[str, PredictionPattern] = {}
    statements: list[HoldingStatement] = []
    for sort_key, tag, data in entries:
        rule = rule_of(sort_key)
        if tag == PATTERN_TAG:
            if rule is None:
                logger.debug("Skipping prediction pattern without a link subfield")
                continue
            elements: dict[str, str] = {}
            for subfield in data:
                elements.setdefault(subfield.code, subfield.value)
            patterns[rule] = PredictionPattern(pattern_id=rule, elements=elements)
        else:
            statements.append(
                HoldingStatement(pattern_id=rule, subfields=data, sort_key=sort_key, tag=tag)
            )

    return patterns, statements
