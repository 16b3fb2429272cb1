"""Enum-based item state pattern.

Defines the states an item can be in, from the point of view of a hold
request, as a Python enum with an explicit table of which campus-pair
policy governs each state. Classification is independent of any patron,
so the eligibility matrix can be tested one state at a time.

Example domain: a library item that is on loan, flagged with a status, or
sitting on the shelf.
"""

from enum import Enum
from typing import AbstractSet, Optional


# ---------------------------------------------------------------------------
# State definitions
# ---------------------------------------------------------------------------

class ItemState(str, Enum):
    """Mutually exclusive request states of an item."""

    ON_LOAN_REQUESTABLE = "on_loan_requestable"
    STATUS_REQUESTABLE = "status_requestable"
    AVAILABLE = "available"
    NOT_REQUESTABLE = "not_requestable"


# ---------------------------------------------------------------------------
# Policy tables
# ---------------------------------------------------------------------------

# {state: name of the EligibilityConfig campus-pair table}, None = never
_STATE_TABLES: dict[ItemState, Optional[str]] = {
    ItemState.ON_LOAN_REQUESTABLE: "on_loan",
    ItemState.STATUS_REQUESTABLE: "status",
    ItemState.AVAILABLE: "available",
    ItemState.NOT_REQUESTABLE: None,
}


def table_for(state: ItemState) -> Optional[str]:
    """Name of the campus-pair table consulted for ``state``."""
    return _STATE_TABLES[state]


def is_requestable(state: ItemState) -> bool:
    return _STATE_TABLES[state] is not None


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_item_state(
    on_loan: bool,
    status_code: Optional[str],
    requestable_statuses: AbstractSet[str],
) -> ItemState:
    """Place an item in exactly one state.

    - On loan with a requestable status or no status -> ON_LOAN_REQUESTABLE
    - On the shelf with a requestable status -> STATUS_REQUESTABLE
    - On the shelf with no status -> AVAILABLE
    - Anything else carries a status that blocks requests
    """
    has_status = bool(status_code)
    requestable_status = has_status and status_code in requestable_statuses

    if on_loan:
        if requestable_status or not has_status:
            return ItemState.ON_LOAN_REQUESTABLE
        return ItemState.NOT_REQUESTABLE

    if requestable_status:
        return ItemState.STATUS_REQUESTABLE
    if not has_status:
        return ItemState.AVAILABLE
    return ItemState.NOT_REQUESTABLE
