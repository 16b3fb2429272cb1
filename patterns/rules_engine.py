"""Pure-function rules engine pattern.

Each hold rule is a stateless function of (patron campus, item facts,
policy table) -> RuleResult. Rules never look anything up beyond their
arguments, so an eligibility decision can be replayed rule by rule:
- evaluate_rules() keeps every outcome, not just the first failure
- RuleSetResult.failed names the rules that blocked a request

Example domain: deciding whether a patron may place a hold on an item.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from core.models.holdings import Campus


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class RuleResult:
    """Outcome of a single rule evaluation."""

    passed: bool
    rule_name: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class RuleSetResult:
    """Aggregate outcome of multiple rules."""

    all_passed: bool
    results: list[RuleResult]
    failed: list[RuleResult] = field(default_factory=list)

    def __post_init__(self):
        self.failed = [r for r in self.results if not r.passed]
        self.all_passed = len(self.failed) == 0


# ---------------------------------------------------------------------------
# Hold request rules
# ---------------------------------------------------------------------------

def check_home_campus_known(home_campus: Optional[Campus]) -> RuleResult:
    """A patron whose home campus cannot be determined may not request."""
    passed = home_campus is not None
    return RuleResult(
        passed=passed,
        rule_name="home_campus_known",
        message=(
            f"Patron home campus is {home_campus.value}"
            if passed
            else "Patron home campus could not be determined"
        ),
        details={"home_campus": home_campus.value if home_campus else None},
    )


def check_item_state(state: str, requestable: bool) -> RuleResult:
    """Items whose status blocks requests are never eligible."""
    return RuleResult(
        passed=requestable,
        rule_name="item_state",
        message=(
            f"Item state {state} may be requested"
            if requestable
            else f"Item state {state} cannot be requested"
        ),
        details={"state": state},
    )


def check_campus_pair(
    table_name: str,
    table: Mapping[Campus, frozenset[Campus]],
    patron_campus: Optional[Campus],
    item_campus: Campus,
) -> RuleResult:
    """Look up (patron campus, item campus) in a campus-pair table.

    Pairs that are not listed, and patrons without a campus, are not
    eligible.
    """
    allowed = table.get(item_campus, frozenset())
    passed = patron_campus is not None and patron_campus in allowed
    patron_label = patron_campus.value if patron_campus else "unknown"

    return RuleResult(
        passed=passed,
        rule_name=f"campus_pair:{table_name}",
        message=(
            f"{patron_label} patrons may request {table_name} items at {item_campus.value}"
            if passed
            else f"{patron_label} patrons may not request {table_name} items at {item_campus.value}"
        ),
        details={
            "table": table_name,
            "patron_campus": patron_campus.value if patron_campus else None,
            "item_campus": item_campus.value,
        },
    )


# ---------------------------------------------------------------------------
# Rule composition
# ---------------------------------------------------------------------------

def evaluate_rules(*rules: RuleResult) -> RuleSetResult:
    """Compose multiple rule results into a single aggregate.

    Example::

        result = evaluate_rules(
            check_home_campus_known(patron.home_campus),
            check_campus_pair("available", table, patron.home_campus, item.campus),
        )
        if result.all_passed:
            offer_request_link(item)
    """
    return RuleSetResult(
        all_passed=all(r.passed for r in rules),
        results=list(rules),
    )
