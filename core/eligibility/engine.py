"""
Hold eligibility for patrons against resolved holdings.

Decides per item whether a request may be placed, then moves the items
at the patron's home campus to the top:
1. Externals may never request (order is left untouched)
2. Super users may request anything
3. Everyone else: item state x campus-pair policy table
4. Stable partition: home campus items first, each group in input order

Patron lookups that return zero or several rows leave the holdings
unchanged rather than raising.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from core.models.holdings import Campus, PatronClassification, ResolvedHolding
from patterns.domain_config import EligibilityConfig, PatronTypeConfig
from patterns.item_states import ItemState, classify_item_state, is_requestable, table_for
from patterns.rules_engine import (
    RuleSetResult,
    check_campus_pair,
    check_home_campus_known,
    check_item_state,
    evaluate_rules,
)

logger = logging.getLogger(__name__)


class HoldEligibilityEngine:
    """Evaluates request eligibility under a campus/patron-type policy."""

    def __init__(
        self,
        patrons: Optional[PatronTypeConfig] = None,
        eligibility: Optional[EligibilityConfig] = None,
    ):
        self.patrons = patrons or PatronTypeConfig()
        self.eligibility = eligibility or EligibilityConfig()

    # -- Patrons -------------------------------------------------------------

    def classify(self, patron_type: str) -> PatronClassification:
        """Derive a patron's category and home campus from their type code."""
        home_campus: Optional[Campus] = None
        for campus, types in self.patrons.campus_groups.items():
            if patron_type in types:
                home_campus = campus

        return PatronClassification(
            patron_type=patron_type,
            home_campus=home_campus,
            is_external=patron_type in self.patrons.externals,
            is_super_user=patron_type in self.patrons.super_users,
        )

    # -- Items ---------------------------------------------------------------

    def item_state(self, holding: ResolvedHolding) -> ItemState:
        return classify_item_state(
            on_loan=holding.on_loan,
            status_code=holding.status_code,
            requestable_statuses=self.eligibility.requestable_statuses,
        )

    def explain(self, patron: PatronClassification, holding: ResolvedHolding) -> RuleSetResult:
        """Evaluate every rule for one item, keeping each outcome."""
        state = self.item_state(holding)
        table_name = table_for(state)
        table = getattr(self.eligibility, table_name) if table_name else {}

        return evaluate_rules(
            check_home_campus_known(patron.home_campus),
            check_item_state(state.value, is_requestable(state)),
            check_campus_pair(table_name or "blocked", table, patron.home_campus, holding.campus),
        )

    def is_allowed(self, patron: PatronClassification, holding: ResolvedHolding) -> bool:
        if patron.is_external:
            return False
        if patron.is_super_user:
            return True
        return self.explain(patron, holding).all_passed

    # -- Holdings ------------------------------------------------------------

    @staticmethod
    def partition(
        home_campus: Optional[Campus],
        holdings: Iterable[ResolvedHolding],
    ) -> list[ResolvedHolding]:
        """Home campus items first; relative order kept within each group."""
        holdings = list(holdings)
        if home_campus is None:
            return holdings
        home = [h for h in holdings if h.campus == home_campus]
        rest = [h for h in holdings if h.campus != home_campus]
        return home + rest

    def evaluate(
        self,
        patron: PatronClassification,
        holdings: Iterable[ResolvedHolding],
    ) -> list[ResolvedHolding]:
        """Set ``request_allowed`` on every holding and reorder them."""
        holdings = list(holdings)

        if patron.is_external:
            return [h.model_copy(update={"request_allowed": False}) for h in holdings]

        decided = [
            h.model_copy(update={"request_allowed": self.is_allowed(patron, h)})
            for h in holdings
        ]
        logger.debug(
            "Patron type %s (home %s): %d of %d items requestable",
            patron.patron_type,
            patron.home_campus.value if patron.home_campus else None,
            sum(1 for h in decided if h.request_allowed),
            len(decided),
        )
        return self.partition(patron.home_campus, decided)

    def evaluate_lookup(
        self,
        patron_types: Sequence[str],
        holdings: Iterable[ResolvedHolding],
    ) -> list[ResolvedHolding]:
        """Evaluate from the rows of a patron type lookup.

        Exactly one row is required; otherwise holdings come back unchanged.
        """
        holdings = list(holdings)
        if len(patron_types) != 1:
            logger.info(
                "Cannot classify patron from %d type rows, holdings left unchanged",
                len(patron_types),
            )
            return holdings
        return self.evaluate(self.classify(patron_types[0]), holdings)
