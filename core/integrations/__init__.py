"""
ILS Core Integrations — Catalog Row Mapping.

Provides vendor-agnostic integration infrastructure:
- DataNormalizer: Vendor row → canonical record mapping
- Pre-built Virtua mappings for item, MARC holdings and patron rows
"""
from core.integrations.normalizer import (
    DataNormalizer,
    FieldMapping,
    SchemaMapping,
    TRANSFORMS,
    VIRTUA_ITEM_MAPPING,
    VIRTUA_MARC_MAPPING,
    VIRTUA_PATRON_MAPPING,
    virtua_normalizer,
)

__all__ = [
    # Normalizer
    "DataNormalizer",
    "FieldMapping",
    "SchemaMapping",
    "TRANSFORMS",
    # Virtua
    "VIRTUA_ITEM_MAPPING",
    "VIRTUA_MARC_MAPPING",
    "VIRTUA_PATRON_MAPPING",
    "virtua_normalizer",
]
