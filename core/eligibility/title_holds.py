"""Title level hold decisions.

Whether a request link is offered for a whole title rather than a single
item, under one of four modes:
- disabled: never
- always: always
- availability: only when no visible holding is available
- driver: when item level evaluation allowed at least one request
"""
from __future__ import annotations

from typing import AbstractSet, Iterable

from core.models.holdings import ResolvedHolding
from patterns.domain_config import TitleHoldMode
from patterns.rules_engine import RuleResult


def check_title_hold(
    holdings: Iterable[ResolvedHolding],
    mode: TitleHoldMode,
    hidden_locations: AbstractSet[str] = frozenset(),
) -> RuleResult:
    """Decide whether a title level hold may be offered."""
    holdings = list(holdings)

    if mode == TitleHoldMode.DISABLED:
        passed, message = False, "Title holds are disabled"
    elif mode == TitleHoldMode.ALWAYS:
        passed, message = True, "Title holds are always offered"
    elif mode == TitleHoldMode.AVAILABILITY:
        any_available = any(
            h.available and h.location not in hidden_locations for h in holdings
        )
        passed = not any_available
        message = (
            "No copy is available, title hold offered"
            if passed
            else "A copy is available on the shelf"
        )
    else:
        passed = any(h.request_allowed for h in holdings)
        message = (
            "At least one item may be requested"
            if passed
            else "No item may be requested"
        )

    return RuleResult(
        passed=passed,
        rule_name="title_hold",
        message=message,
        details={"mode": mode.value, "holdings": len(holdings)},
    )
