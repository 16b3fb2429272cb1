"""Call contracts consumed by the catalog integration layer.

Thin module-level entry points over the three components. Each takes its
policy explicitly, falling back to the defaults.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from core.availability.resolver import AvailabilityResolver
from core.eligibility.engine import HoldEligibilityEngine
from core.models.holdings import ItemRecord, PatronClassification, ResolvedHolding
from core.models.serials import HoldingStatement, PredictionPattern, RenderedStatement
from core.serials.renderer import SerialPatternRenderer
from patterns.domain_config import HoldingsConfig


def resolve_availability(
    record: ItemRecord,
    config: Optional[HoldingsConfig] = None,
) -> ResolvedHolding:
    config = config or HoldingsConfig.default()
    return AvailabilityResolver(config.availability).resolve(record)


def evaluate_hold_eligibility(
    patron: PatronClassification,
    holdings: Iterable[ResolvedHolding],
    config: Optional[HoldingsConfig] = None,
) -> list[ResolvedHolding]:
    config = config or HoldingsConfig.default()
    return HoldEligibilityEngine(config.patrons, config.eligibility).evaluate(patron, holdings)


def render_serial_holdings(
    patterns: Mapping[str, PredictionPattern],
    statements: Iterable[HoldingStatement],
) -> list[RenderedStatement]:
    return SerialPatternRenderer().render(patterns, statements)
