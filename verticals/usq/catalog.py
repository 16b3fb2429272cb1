"""Virtua catalog facade — driver-level operations over supplied rows.

The adapter runs the queries; this module turns their rows into display
ready structures:
- get_status / get_statuses: availability for one or many records
- get_holding: availability plus hold eligibility for a logged-in patron
- get_purchase_history: rendered serial holdings per holdings location
- title_hold: whether a title level request is offered
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from core.availability.resolver import AvailabilityResolver
from core.eligibility.engine import HoldEligibilityEngine
from core.eligibility.title_holds import check_title_hold
from core.integrations.normalizer import DataNormalizer, virtua_normalizer
from core.models.holdings import ResolvedHolding, SerialLocation
from core.models.serials import RenderedStatement
from core.serials.renderer import SerialPatternRenderer
from patterns.domain_config import HoldingsConfig
from patterns.rules_engine import RuleResult
from verticals.usq.config import config as default_config

logger = logging.getLogger(__name__)

ADAPTER = "virtua"

Row = Mapping[str, Any]


class VirtuaCatalog:
    """Interprets Virtua rows with the USQ policy.

    Usage::

        catalog = VirtuaCatalog()
        holdings = catalog.get_holding("vtls000123", item_rows, patron_rows)
        history = catalog.get_purchase_history({"Toowoomba Serials": marc_rows})
    """

    def __init__(
        self,
        config: Optional[HoldingsConfig] = None,
        normalizer: Optional[DataNormalizer] = None,
    ):
        self.config = config or default_config
        self.normalizer = normalizer or virtua_normalizer()
        self.resolver = AvailabilityResolver(self.config.availability)
        self.eligibility = HoldEligibilityEngine(self.config.patrons, self.config.eligibility)
        self.serials = SerialPatternRenderer()

    def _resolve_rows(self, bib_id: str, rows: Iterable[Row]) -> list[ResolvedHolding]:
        records = [self.normalizer.normalize_item(ADAPTER, dict(row), bib_id) for row in rows]
        return self.resolver.resolve_many(records)

    def get_status(
        self,
        bib_id: str,
        rows: Sequence[Row],
        bib_call_number: Optional[str] = None,
        serial_locations: Sequence[SerialLocation] = (),
    ) -> list[ResolvedHolding]:
        """Availability of every item of a record.

        A record without item rows falls back to placeholder holdings built
        from its call number, when the adapter found one.
        """
        if rows:
            return self._resolve_rows(bib_id, rows)
        if bib_call_number is None:
            return []
        return self.resolver.resolve_bib_only(bib_id, bib_call_number, serial_locations)

    def get_statuses(self, rows_by_bib: Mapping[str, Sequence[Row]]) -> dict[str, list[ResolvedHolding]]:
        return {bib_id: self.get_status(bib_id, rows) for bib_id, rows in rows_by_bib.items()}

    def get_holding(
        self,
        bib_id: str,
        rows: Sequence[Row],
        patron_rows: Optional[Sequence[Row]] = None,
    ) -> list[ResolvedHolding]:
        """Availability, plus request eligibility when a patron lookup was run."""
        holdings = self._resolve_rows(bib_id, rows)
        if not holdings or patron_rows is None:
            return holdings
        patron_types = [self.normalizer.patron_type(ADAPTER, dict(row)) for row in patron_rows]
        return self.eligibility.evaluate_lookup(patron_types, holdings)

    def get_purchase_history(
        self,
        marc_rows_by_location: Mapping[str, Iterable[Row]],
    ) -> dict[str, list[RenderedStatement]]:
        """Rendered serial holdings keyed by holdings location name."""
        history = {}
        for location, rows in marc_rows_by_location.items():
            marc_rows = [self.normalizer.normalize_marc_row(ADAPTER, dict(row)) for row in rows]
            history[location] = self.serials.render_marc(marc_rows)
            logger.debug("Rendered %d statements for %s", len(history[location]), location)
        return history

    def title_hold(self, holdings: Iterable[ResolvedHolding]) -> RuleResult:
        return check_title_hold(
            holdings,
            self.config.eligibility.title_hold_mode,
            self.config.eligibility.hidden_locations,
        )
