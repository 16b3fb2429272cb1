"""Availability resolution for catalog items.

Turns an ItemRecord into a ResolvedHolding with exactly one availability
determination:

1. A due date always wins: the item is on loan, so unavailable.
2. Optionally, queued requests make an item unavailable.
3. Otherwise the status code is looked up in the verdict table. No status
   means available; an unknown status falls back to the configured default.

Campus is derived from the first character of the location code.
Resolution is total: unknown codes degrade to defaults and nothing raises.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from core.models.holdings import Campus, ItemRecord, ResolvedHolding, SerialLocation
from patterns.domain_config import AvailabilityConfig, StatusVerdict

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """Resolves availability, campus and status labels for items.

    Usage::

        resolver = AvailabilityResolver()
        holding = resolver.resolve(ItemRecord(bib_id="123", status_code="4700"))
        holding.available  # False (MISSING)
    """

    def __init__(self, config: Optional[AvailabilityConfig] = None):
        self.config = config or AvailabilityConfig()

    def campus_for(self, location_code: Optional[str]) -> Campus:
        """Campus for a location code, by its first character."""
        if not location_code:
            return self.config.default_campus
        return self.config.campus_prefixes.get(location_code[:1], self.config.default_campus)

    def status_available(self, status_code: Optional[str]) -> bool:
        """Verdict for an item that is not on loan."""
        if not status_code:
            return True
        verdict = self.config.status_verdicts.get(status_code)
        if verdict is None:
            logger.debug("Unknown status code %s, defaulting available=%s",
                         status_code, self.config.unknown_status_available)
            return self.config.unknown_status_available
        return verdict == StatusVerdict.AVAILABLE

    def is_available(self, record: ItemRecord) -> bool:
        if record.on_loan:
            return False
        if self.config.requests_block_availability and record.request_count > 0:
            return False
        return self.status_available(record.status_code)

    def status_label(self, record: ItemRecord) -> Optional[str]:
        if record.status:
            return record.status
        if record.status_code:
            return self.config.status_labels.get(record.status_code)
        return None

    def resolve(self, record: ItemRecord) -> ResolvedHolding:
        """Resolve a single item record."""
        data = record.model_dump()
        data.update(
            status=self.status_label(record),
            call_number=record.effective_call_number,
            available=self.is_available(record),
            campus=self.campus_for(record.location_code),
        )
        return ResolvedHolding(**data)

    def resolve_many(self, records: Iterable[ItemRecord]) -> list[ResolvedHolding]:
        return [self.resolve(r) for r in records]

    def resolve_bib_only(
        self,
        bib_id: str,
        call_number: Optional[str],
        serial_locations: Sequence[SerialLocation] = (),
    ) -> list[ResolvedHolding]:
        """Placeholder holdings for a bibliographic record with no items.

        Known call numbers (electronic resources, orders, missing) map to a
        single configured placeholder. Any other call number yields one
        unavailable holding per serial holdings location, or nothing.
        """
        placeholder = self.config.placeholder_call_numbers.get((call_number or "").strip())
        if placeholder is not None:
            return [
                ResolvedHolding(
                    bib_id=bib_id,
                    status=placeholder.status,
                    location=placeholder.location,
                    call_number=call_number,
                    available=placeholder.available,
                    campus=self.config.default_campus,
                )
            ]

        holdings = [
            ResolvedHolding(
                bib_id=bib_id,
                status=self.config.serial_placeholder_status,
                location=loc.name,
                location_code=loc.location_code,
                call_number=call_number,
                available=False,
                campus=self.campus_for(loc.location_code),
            )
            for loc in serial_locations
        ]
        if not holdings:
            logger.debug("No items or serial locations for bib %s", bib_id)
        return holdings
