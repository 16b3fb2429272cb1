"""
ILS Row Normalizer — Vendor-Agnostic Row Mapping.

Maps vendor-specific catalog rows (as returned by the adapter's queries)
to the engine's canonical records. Supports nested field access,
transform functions, and per-adapter mapping configurations.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional

from core.models.holdings import ItemRecord
from core.models.serials import MarcSubfieldRow


# ---------------------------------------------------------------------------
# Field mapping
# ---------------------------------------------------------------------------

@dataclass
class FieldMapping:
    """Maps a source vendor column to a canonical target field."""
    source_field: str       # Dot-notation path, e.g. "item.DUE_DATE"
    target_field: str       # Canonical field name, e.g. "due_date"
    transform: str | None = None  # Optional transform name
    default: Any = None     # Default if source is missing


@dataclass
class SchemaMapping:
    """Complete mapping config for an adapter + entity type."""
    adapter_name: str
    entity_type: str  # item | marc | patron
    mappings: list[FieldMapping] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Transform functions
# ---------------------------------------------------------------------------

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%d-%b-%y", "%d-%b-%Y", "%d-%m-%Y", "%d/%m/%Y")


def _parse_date(value: Any) -> Any:
    """Dates and datetimes pass through; text is parsed, kept raw if it can't be."""
    if value is None or isinstance(value, (date, datetime)):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return text


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


TRANSFORMS: dict[str, Callable[[Any], Any]] = {
    "uppercase": lambda v: str(v).strip().upper() if v else "",
    "int": lambda v: int(v) if v is not None else 0,
    "strip": lambda v: str(v).strip() if v else "",
    "optional_str": _optional_str,
    "blank_to_none": _optional_str,
    "date_parse": _parse_date,
}


# ---------------------------------------------------------------------------
# DataNormalizer
# ---------------------------------------------------------------------------

class DataNormalizer:
    """Normalizes vendor rows to canonical records using registered mappings."""

    def __init__(self):
        self._mappings: dict[str, SchemaMapping] = {}  # key: {adapter}:{entity_type}

    def register_mapping(self, mapping: SchemaMapping) -> None:
        """Register a schema mapping for an adapter + entity type."""
        key = f"{mapping.adapter_name}:{mapping.entity_type}"
        self._mappings[key] = mapping

    def normalize(
        self,
        adapter_name: str,
        entity_type: str,
        raw_data: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Normalize a raw vendor row to canonical field names.

        Returns a dict with mapped fields. Rows without a registered
        mapping come back unchanged.
        """
        key = f"{adapter_name}:{entity_type}"
        mapping = self._mappings.get(key)
        if not mapping:
            return dict(raw_data)

        result: dict[str, Any] = {}
        for fm in mapping.mappings:
            value = self._get_nested(raw_data, fm.source_field)
            if value is None:
                value = fm.default

            if fm.transform and fm.transform in TRANSFORMS:
                try:
                    value = TRANSFORMS[fm.transform](value)
                except (ValueError, TypeError, KeyError):
                    value = fm.default

            result[fm.target_field] = value

        return result

    def normalize_item(
        self, adapter_name: str, raw_data: dict[str, Any], bib_id: str
    ) -> ItemRecord:
        """Shorthand: normalize and return an ItemRecord."""
        data = self.normalize(adapter_name, "item", raw_data)
        data["bib_id"] = bib_id
        return ItemRecord(**{k: v for k, v in data.items() if k in ItemRecord.model_fields})

    def normalize_marc_row(
        self, adapter_name: str, raw_data: dict[str, Any]
    ) -> MarcSubfieldRow:
        """Shorthand: normalize and return a MarcSubfieldRow."""
        data = self.normalize(adapter_name, "marc", raw_data)
        return MarcSubfieldRow(**{k: v for k, v in data.items() if k in MarcSubfieldRow.model_fields})

    def patron_type(self, adapter_name: str, raw_data: dict[str, Any]) -> str:
        """Shorthand: the patron type code of a patron lookup row."""
        return self.normalize(adapter_name, "patron", raw_data).get("patron_type", "")

    @staticmethod
    def _get_nested(data: dict[str, Any], path: str) -> Any:
        """Access nested dict values via dot notation (e.g. 'item.DUE_DATE')."""
        parts = path.split(".")
        current = data
        for part in parts:
            if isinstance(current, dict):
                current = current.get(part)
            else:
                return None
            if current is None:
                return None
        return current


# ---------------------------------------------------------------------------
# Pre-built mappings (Virtua/Oracle column names)
# ---------------------------------------------------------------------------

VIRTUA_ITEM_MAPPING = SchemaMapping(
    adapter_name="virtua",
    entity_type="item",
    mappings=[
        FieldMapping("ITEM_ID", "item_id", "optional_str"),
        FieldMapping("BARCODE", "barcode", "optional_str"),
        FieldMapping("COPYNO", "copy_number", "optional_str"),
        FieldMapping("DUE_DATE", "due_date", "date_parse"),
        FieldMapping("STATUS", "status", "blank_to_none"),
        FieldMapping("STATUS_CODE", "status_code", "optional_str"),
        FieldMapping("LOCATION", "location", "blank_to_none"),
        FieldMapping("LOCATION_ID", "location_code", "optional_str"),
        FieldMapping("ITEM_CALL_NUM", "call_number", "blank_to_none"),
        FieldMapping("BIB_CALL_NUM", "bib_call_number", "blank_to_none"),
        FieldMapping("ITEM_CLASS", "item_class", "optional_str"),
        FieldMapping("ITEM_REQ", "item_requests", "int", default=0),
        FieldMapping("BIB_REQ", "title_requests", "int", default=0),
    ],
)

VIRTUA_MARC_MAPPING = SchemaMapping(
    adapter_name="virtua",
    entity_type="marc",
    mappings=[
        FieldMapping("FIELD_SEQUENCE", "field_sequence", "int", default=0),
        FieldMapping("FIELD_TAG", "tag", "strip"),
        FieldMapping("SUBFIELD_CODE", "code", "strip"),
        FieldMapping("SUBFIELD_DATA", "data", "optional_str"),
    ],
)

VIRTUA_PATRON_MAPPING = SchemaMapping(
    adapter_name="virtua",
    entity_type="patron",
    mappings=[
        FieldMapping("PATRON_TYPE_ID", "patron_type", "uppercase"),
    ],
)


def virtua_normalizer() -> DataNormalizer:
    """A normalizer with the Virtua mappings registered."""
    normalizer = DataNormalizer()
    for mapping in (VIRTUA_ITEM_MAPPING, VIRTUA_MARC_MAPPING, VIRTUA_PATRON_MAPPING):
        normalizer.register_mapping(mapping)
    return normalizer
