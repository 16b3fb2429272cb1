"""Holdings records exchanged between the catalog adapter and the engine.

Provides:
- Campus: The institution's physical sites
- ItemRecord: One catalog item row, already extracted from the ILS
- ResolvedHolding: An ItemRecord plus its availability, campus and request flag
- PatronClassification: A patron's derived category and home campus
- SerialLocation: A serial holdings location used for bib-only placeholders

All models are frozen. Eligibility evaluation produces copies via
``model_copy(update=...)`` rather than mutating a holding.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Campus(str, Enum):
    TOOWOOMBA = "Toowoomba"
    FRASER_COAST = "Fraser Coast"
    SPRINGFIELD = "Springfield"


# ---------------------------------------------------------------------------
# Item records
# ---------------------------------------------------------------------------

class ItemRecord(BaseModel):
    """A single item row as supplied by the catalog adapter.

    ``due_date`` is kept as raw text when the vendor value cannot be parsed;
    any non-blank value still means the item is on loan.
    """

    model_config = ConfigDict(frozen=True)

    bib_id: str
    item_id: Optional[str] = None
    barcode: Optional[str] = None
    copy_number: Optional[str] = None
    status_code: Optional[str] = None
    status: Optional[str] = None
    due_date: Union[datetime, date, str, None] = Field(None, union_mode="left_to_right")
    location_code: Optional[str] = None
    location: Optional[str] = None
    call_number: Optional[str] = None
    bib_call_number: Optional[str] = None
    item_class: Optional[str] = None
    item_requests: int = Field(0, ge=0)
    title_requests: int = Field(0, ge=0)

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def on_loan(self) -> bool:
        return self.due_date is not None

    @property
    def has_status(self) -> bool:
        return bool(self.status_code)

    @property
    def request_count(self) -> int:
        return self.item_requests + self.title_requests

    @property
    def effective_call_number(self) -> Optional[str]:
        """Item level call number, falling back to the bibliographic one."""
        return self.call_number or self.bib_call_number


class ResolvedHolding(ItemRecord):
    """An item with a single availability determination.

    ``request_allowed`` stays None until hold eligibility is evaluated.
    """

    available: bool
    campus: Campus
    request_allowed: Optional[bool] = None


# ---------------------------------------------------------------------------
# Patrons and locations
# ---------------------------------------------------------------------------

class PatronClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    patron_type: str
    home_campus: Optional[Campus] = None
    is_external: bool = False
    is_super_user: bool = False


class SerialLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    location_code: Optional[str] = None
