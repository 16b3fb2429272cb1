"""Dataclass-based circulation policy configuration.

Every location-specific table the holdings engine consults lives here as a
frozen dataclass. This gives you:
- Type safety (IDE autocompletion, mypy checking)
- Default values (the USQ policy out-of-the-box)
- Immutability (frozen=True plus read-only mappings, so one instance can be
  shared by concurrent readers for the process lifetime)
- Easy overrides (from plain mappings or env vars)

Campus-pair tables map an item's campus to the set of patron home campuses
allowed to request it. Pairs that are not listed are not eligible.
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from core.models.holdings import Campus


class PolicyConfigError(ValueError):
    """Raised when a policy mapping cannot be turned into configuration."""


class StatusVerdict(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class TitleHoldMode(str, Enum):
    DISABLED = "disabled"
    ALWAYS = "always"
    AVAILABILITY = "availability"
    DRIVER = "driver"


CampusPairTable = Mapping[Campus, frozenset[Campus]]


# ---------------------------------------------------------------------------
# USQ policy tables
# ---------------------------------------------------------------------------

_T, _F, _S = Campus.TOOWOOMBA, Campus.FRASER_COAST, Campus.SPRINGFIELD

# 5401 is listed as both Staff Use and On Display upstream; unavailable wins.
_USQ_STATUS_VERDICTS = {
    "5402": StatusVerdict.UNAVAILABLE,  # 24 hour hold
    "4401": StatusVerdict.UNAVAILABLE,  # At Repair
    "5400": StatusVerdict.UNAVAILABLE,  # Being Processed
    "2101": StatusVerdict.UNAVAILABLE,  # Damaged Item
    "7400": StatusVerdict.UNAVAILABLE,  # Fraser Coast only
    "5700": StatusVerdict.UNAVAILABLE,  # IN TRANSIT
    "7700": StatusVerdict.UNAVAILABLE,  # Invoiced
    "3400": StatusVerdict.UNAVAILABLE,  # Invoiced - Re-ordered
    "4600": StatusVerdict.UNAVAILABLE,  # LONG OVERDUE
    "4700": StatusVerdict.UNAVAILABLE,  # MISSING
    "4705": StatusVerdict.UNAVAILABLE,  # ON HOLD
    "5710": StatusVerdict.UNAVAILABLE,  # REQUESTED FOR HOLD
    "5401": StatusVerdict.UNAVAILABLE,  # Staff Use
    "7200": StatusVerdict.AVAILABLE,    # External Loan Only
    "3100": StatusVerdict.AVAILABLE,    # In Library use only
    "2700": StatusVerdict.AVAILABLE,    # Limited Loan
    "2701": StatusVerdict.AVAILABLE,    # Not For Loan
    "2100": StatusVerdict.AVAILABLE,    # Not for loan
}

_USQ_STATUS_LABELS = {
    "5402": "24 Hour Hold",
    "4401": "At Repair",
    "5400": "Being Processed",
    "2101": "Damaged Item",
    "7400": "Fraser Coast only",
    "5700": "IN TRANSIT",
    "7700": "Invoiced",
    "3400": "Invoiced - Re-ordered",
    "4600": "LONG OVERDUE",
    "4700": "MISSING",
    "4705": "ON HOLD",
    "5710": "REQUESTED FOR HOLD",
    "5401": "Staff Use",
    "7200": "External Loan Only",
    "3100": "In Library use only",
    "2700": "Limited Loan",
    "2701": "Not For Loan",
    "2100": "Not for loan",
}


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


def _pairs(table: Mapping[Campus, Iterable[Campus]]) -> CampusPairTable:
    return MappingProxyType({item: frozenset(patrons) for item, patrons in table.items()})


# ---------------------------------------------------------------------------
# Nested config sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlaceholderHolding:
    """Holding shown for a bibliographic record that has no items."""

    status: str | None
    location: str
    available: bool = False


@dataclass(frozen=True)
class AvailabilityConfig:
    """Status verdicts, labels and campus derivation."""

    status_verdicts: Mapping[str, StatusVerdict] = field(
        default_factory=lambda: _frozen(_USQ_STATUS_VERDICTS)
    )
    status_labels: Mapping[str, str] = field(
        default_factory=lambda: _frozen(_USQ_STATUS_LABELS)
    )
    # First character of the location code -> campus
    campus_prefixes: Mapping[str, Campus] = field(
        default_factory=lambda: _frozen({"4": _F, "5": _S})
    )
    default_campus: Campus = Campus.TOOWOOMBA
    unknown_status_available: bool = True
    requests_block_availability: bool = False
    placeholder_call_numbers: Mapping[str, PlaceholderHolding] = field(
        default_factory=lambda: _frozen({
            "ELECTRONIC RESOURCE": PlaceholderHolding(None, "Online", available=True),
            "ON ORDER": PlaceholderHolding("ON ORDER", "Pending..."),
            "ORDER CANCELLED": PlaceholderHolding("ORDER CANCELLED", "None"),
            "MISSING": PlaceholderHolding("MISSING", "Unknown"),
        })
    )
    serial_placeholder_status: str = "Not For Loan"


@dataclass(frozen=True)
class PatronTypeConfig:
    """Patron type codes grouped by category and home campus."""

    externals: frozenset[str] = frozenset({
        "AX", "AD", "BX", "BD", "EX", "ED", "GX", "GD",
        "RX", "SX", "SD", "XS", "CC", "RD",
    })
    super_users: frozenset[str] = frozenset({"LP", "OC"})
    campus_groups: Mapping[Campus, frozenset[str]] = field(
        default_factory=lambda: _frozen({
            _T: frozenset({"AU", "AM", "BU", "BM", "EU", "EM", "GU", "GM", "RI",
                           "SU", "SM", "SC", "RB", "OT", "ST", "FC", "LS"}),
            _S: frozenset({"US", "ES", "PS", "AS", "GS", "TS", "TAS", "EPS",
                           "XVS", "XPS"}),
            _F: frozenset({"UF", "PF", "AF"}),
        })
    )


@dataclass(frozen=True)
class EligibilityConfig:
    """Requestable statuses and the three campus-pair tables."""

    requestable_statuses: frozenset[str] = frozenset({
        "4401",  # At Repair
        "4705",  # ON HOLD
        "5400",  # Being Processed
        "5401",  # On Display
        "5402",  # 24 Hour Hold
        "5700",  # IN TRANSIT
    })
    # Items currently on loan
    on_loan: CampusPairTable = field(
        default_factory=lambda: _pairs({_T: {_T, _S, _F}, _F: set(), _S: {_S}})
    )
    # Items on the shelf with a requestable status
    status: CampusPairTable = field(
        default_factory=lambda: _pairs({_T: {_T, _S, _F}, _F: set(), _S: {_S}})
    )
    # Items on the shelf with no status
    available: CampusPairTable = field(
        default_factory=lambda: _pairs({_T: {_S, _F}, _F: set(), _S: set()})
    )
    title_hold_mode: TitleHoldMode = TitleHoldMode.DISABLED
    hidden_locations: frozenset[str] = frozenset()


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def parse_campus(value: Any) -> Campus:
    """Accept a campus value ("Fraser Coast") or name ("fraser_coast")."""
    if isinstance(value, Campus):
        return value
    text = str(value).strip()
    try:
        return Campus(text)
    except ValueError:
        pass
    try:
        return Campus[text.upper().replace(" ", "_")]
    except KeyError:
        raise PolicyConfigError(f"Unknown campus: {value!r}") from None


def _parse_enum(enum_cls: type[Enum], value: Any, label: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = [m.value for m in enum_cls]
        raise PolicyConfigError(f"Unknown {label} {value!r}. Allowed: {allowed}") from None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _flag(value: Any, label: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool(value)
    raise PolicyConfigError(f"Expected a boolean for {label}, got {value!r}")


def _pair_table(raw: Mapping[str, Iterable[str]]) -> CampusPairTable:
    return _pairs({
        parse_campus(item): {parse_campus(p) for p in patrons}
        for item, patrons in raw.items()
    })


def _availability_from_dict(data: Mapping[str, Any]) -> AvailabilityConfig:
    base = AvailabilityConfig()
    overrides: dict[str, Any] = {}
    if "status_verdicts" in data:
        overrides["status_verdicts"] = _frozen({
            str(code): _parse_enum(StatusVerdict, verdict, "status verdict")
            for code, verdict in data["status_verdicts"].items()
        })
    if "status_labels" in data:
        overrides["status_labels"] = _frozen({str(k): str(v) for k, v in data["status_labels"].items()})
    if "campus_prefixes" in data:
        overrides["campus_prefixes"] = _frozen({
            str(prefix)[:1]: parse_campus(campus)
            for prefix, campus in data["campus_prefixes"].items()
        })
    if "default_campus" in data:
        overrides["default_campus"] = parse_campus(data["default_campus"])
    for flag in ("unknown_status_available", "requests_block_availability"):
        if flag in data:
            overrides[flag] = _flag(data[flag], flag)
    if "placeholder_call_numbers" in data:
        overrides["placeholder_call_numbers"] = _frozen({
            str(call_number): PlaceholderHolding(
                status=entry.get("status"),
                location=entry.get("location", ""),
                available=bool(entry.get("available", False)),
            )
            for call_number, entry in data["placeholder_call_numbers"].items()
        })
    if "serial_placeholder_status" in data:
        overrides["serial_placeholder_status"] = str(data["serial_placeholder_status"])
    return replace(base, **overrides)


def _patrons_from_dict(data: Mapping[str, Any]) -> PatronTypeConfig:
    base = PatronTypeConfig()
    overrides: dict[str, Any] = {}
    if "externals" in data:
        overrides["externals"] = frozenset(data["externals"])
    if "super_users" in data:
        overrides["super_users"] = frozenset(data["super_users"])
    if "campus_groups" in data:
        overrides["campus_groups"] = _frozen({
            parse_campus(campus): frozenset(types)
            for campus, types in data["campus_groups"].items()
        })
    return replace(base, **overrides)


def _eligibility_from_dict(data: Mapping[str, Any]) -> EligibilityConfig:
    base = EligibilityConfig()
    overrides: dict[str, Any] = {}
    if "requestable_statuses" in data:
        overrides["requestable_statuses"] = frozenset(str(s) for s in data["requestable_statuses"])
    for table in ("on_loan", "status", "available"):
        if table in data:
            overrides[table] = _pair_table(data[table])
    if "title_hold_mode" in data:
        overrides["title_hold_mode"] = _parse_enum(TitleHoldMode, data["title_hold_mode"], "title hold mode")
    if "hidden_locations" in data:
        overrides["hidden_locations"] = frozenset(data["hidden_locations"])
    return replace(base, **overrides)


# ---------------------------------------------------------------------------
# Top-level policy config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HoldingsConfig:
    """Complete policy configuration for the holdings engine.

    Usage::

        config = HoldingsConfig.from_dict({
            "availability": {"default_campus": "Springfield"},
            "eligibility": {"available": {"Toowoomba": ["Springfield"]}},
        })
        resolver = AvailabilityResolver(config.availability)
    """

    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    patrons: PatronTypeConfig = field(default_factory=PatronTypeConfig)
    eligibility: EligibilityConfig = field(default_factory=EligibilityConfig)

    @classmethod
    def default(cls) -> "HoldingsConfig":
        """Create config with all defaults."""
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HoldingsConfig":
        """Create config from plain mappings, e.g. a decoded JSON document.

        Sections that are absent keep their defaults. Raises
        PolicyConfigError for unknown campuses, verdicts or modes.
        """
        return cls(
            availability=_availability_from_dict(data.get("availability", {})),
            patrons=_patrons_from_dict(data.get("patrons", {})),
            eligibility=_eligibility_from_dict(data.get("eligibility", {})),
        )

    @classmethod
    def from_env(cls, prefix: str = "ILS_") -> "HoldingsConfig":
        """Create config from environment variables.

        Example: ILS_DEFAULT_CAMPUS=Springfield ILS_TITLE_HOLD_MODE=availability
        """
        config = cls()

        availability: dict[str, Any] = {}
        default_campus = os.getenv(f"{prefix}DEFAULT_CAMPUS")
        if default_campus:
            availability["default_campus"] = parse_campus(default_campus)
        unknown_available = os.getenv(f"{prefix}UNKNOWN_STATUS_AVAILABLE")
        if unknown_available:
            availability["unknown_status_available"] = _parse_bool(unknown_available)
        requests_block = os.getenv(f"{prefix}REQUESTS_BLOCK_AVAILABILITY")
        if requests_block:
            availability["requests_block_availability"] = _parse_bool(requests_block)

        eligibility: dict[str, Any] = {}
        mode = os.getenv(f"{prefix}TITLE_HOLD_MODE")
        if mode:
            eligibility["title_hold_mode"] = _parse_enum(TitleHoldMode, mode, "title hold mode")

        return replace(
            config,
            availability=replace(config.availability, **availability),
            eligibility=replace(config.eligibility, **eligibility),
        )
