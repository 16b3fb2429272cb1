"""Serial holdings models (MARC 853/863/866)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


NOTES_KEY = "notes"


class MarcSubfieldRow(BaseModel):
    """One extracted tag/subfield/code/data tuple of a holdings record."""

    model_config = ConfigDict(frozen=True)

    field_sequence: int
    tag: str
    code: str
    data: Optional[str] = None


class Subfield(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    value: str


class PredictionPattern(BaseModel):
    """A MARC 853 prediction pattern: subfield code -> pattern text."""

    model_config = ConfigDict(frozen=True)

    pattern_id: str
    elements: dict[str, str] = Field(default_factory=dict)

    def element(self, code: str) -> Optional[str]:
        return self.elements.get(code)


class HoldingStatement(BaseModel):
    """A MARC 863/866 statement rendered against the pattern it references.

    ``sort_key`` has the form ``"<rule>.<order>"`` with the order
    zero-padded to five digits.
    """

    model_config = ConfigDict(frozen=True)

    pattern_id: Optional[str] = None
    subfields: list[Subfield] = Field(default_factory=list)
    sort_key: str = ""
    tag: str = "863"

    def first_value(self, code: str) -> Optional[str]:
        for subfield in self.subfields:
            if subfield.code == code:
                return subfield.value
        return None


class RenderedStatement(BaseModel):
    """Display-ready holdings statement.

    ``other`` buckets non enumeration/chronology values by subfield code,
    with public notes (``z``) collected under ``"notes"``.
    """

    enum_chrono: str = ""
    other: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def notes(self) -> list[str]:
        return self.other.get(NOTES_KEY, [])
