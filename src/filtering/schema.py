"""
Attribute schema for washing machines.

The single source of truth for what can be filtered: used by the filter
catalog endpoint, the prompt sent to the language model, the response
normalizer and the rule-based extractor. Built once at import time and
never written to.
"""

from collections import Counter
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional, Tuple

from filtering.accessors import format_attribute_value, resolve_attribute
from filtering.models import (
    AttributeDescriptor,
    FilterEntry,
    FilterKind,
    FilterOperator,
    FilterValueType,
    Product,
)


def _range(attribute: str, display_name: str, min_value: float, max_value: float, unit: str) -> AttributeDescriptor:
    return AttributeDescriptor(
        kind=FilterKind.RANGE,
        attribute=attribute,
        display_name=display_name,
        value_type=FilterValueType.SINGLE,
        min_value=min_value,
        max_value=max_value,
        unit=unit,
    )


def _standard(
    attribute: str,
    display_name: str,
    value_type: FilterValueType,
    entries: Iterable[Tuple[str, str, int]],
) -> AttributeDescriptor:
    return AttributeDescriptor(
        kind=FilterKind.STANDARD,
        attribute=attribute,
        display_name=display_name,
        value_type=value_type,
        operator=FilterOperator.OR,
        entries=tuple(
            FilterEntry(value=value, display_value=label, count=count)
            for value, label, count in entries
        ),
    )


def _flag(attribute: str, display_name: str, count: int) -> AttributeDescriptor:
    return AttributeDescriptor(
        kind=FilterKind.STANDARD,
        attribute=attribute,
        display_name=display_name,
        value_type=FilterValueType.SINGLE,
        operator=FilterOperator.AND,
        entries=(FilterEntry(value="true", display_value="Yes", count=count),),
    )


# ============================================================================
# Descriptor table (rendering order)
# ============================================================================

_DESCRIPTORS: Tuple[AttributeDescriptor, ...] = (
    # Range filters
    _range("price", "Price", 330, 7500, "USD"),
    _range("specifications.capacity", "Capacity", 3.5, 6.2, "cu ft"),
    _range("specifications.noiseLevel", "Noise Level", 45, 72, "dB"),
    _range("specifications.spinSpeed", "Spin Speed", 1000, 1800, "RPM"),

    # Single select
    _standard("priceTier", "Price Tier", FilterValueType.SINGLE, [
        ("BUDGET", "Budget (Under $1000)", 15),
        ("MID_RANGE", "Mid-Range ($1000-$3000)", 20),
        ("PREMIUM", "Premium ($3000-$5000)", 12),
        ("LUXURY", "Luxury ($5000+)", 3),
    ]),

    # Multi select
    _standard("brand", "Brand", FilterValueType.MULTI, [
        ("KITCHENTECH", "KitchenTech", 12),
        ("HOMEPRO", "HomePro", 13),
        ("APPLIANCE_PLUS", "Appliance Plus", 10),
        ("COOKMASTER", "CookMaster", 10),
        ("HOMEMATE", "HomeMate", 5),
    ]),
    _standard("color", "Color", FilterValueType.MULTI, [
        ("WHITE", "White", 22),
        ("BLACK", "Black", 16),
        ("SILVER", "Silver", 12),
    ]),
    _standard("specifications.energyRating", "Energy Rating", FilterValueType.MULTI, [
        ("A_PLUS_PLUS_PLUS", "A+++", 1),
        ("A_PLUS_PLUS", "A++", 12),
        ("A_PLUS", "A+", 18),
        ("A", "A", 14),
        ("B", "B", 5),
    ]),

    # Boolean features
    _flag("features.wifiEnabled", "WiFi Enabled", 24),
    _flag("features.smartDiagnosis", "Smart Diagnosis", 25),
    _flag("features.steamCleaning", "Steam Cleaning", 30),
    _flag("features.allergenCycle", "Allergen Cycle", 28),
    _flag("features.sanitizeCycle", "Sanitize Cycle", 32),
    _flag("features.energyStarCertified", "Energy Star Certified", 35),
    _flag("features.stainlessSteelDrum", "Stainless Steel Drum", 32),
    _flag("features.directDriveMotor", "Direct Drive Motor", 28),
)

_BY_ATTRIBUTE: Mapping[str, AttributeDescriptor] = MappingProxyType(
    {d.attribute: d for d in _DESCRIPTORS}
)

if len(_BY_ATTRIBUTE) != len(_DESCRIPTORS):
    raise RuntimeError("Duplicate attribute in filter schema")

_STANDARD_ATTRIBUTES: FrozenSet[str] = frozenset(
    d.attribute for d in _DESCRIPTORS if d.kind == FilterKind.STANDARD
)
_RANGE_ATTRIBUTES: FrozenSet[str] = frozenset(
    d.attribute for d in _DESCRIPTORS if d.kind == FilterKind.RANGE
)


# ============================================================================
# Lookup
# ============================================================================

def list_descriptors() -> Tuple[AttributeDescriptor, ...]:
    return _DESCRIPTORS


def get_descriptor(attribute: str) -> Optional[AttributeDescriptor]:
    """Descriptor for an attribute path, or None for an unknown attribute."""
    return _BY_ATTRIBUTE.get(attribute)


def standard_attributes() -> FrozenSet[str]:
    return _STANDARD_ATTRIBUTES


def range_attributes() -> FrozenSet[str]:
    return _RANGE_ATTRIBUTES


def is_standard_attribute(attribute: str) -> bool:
    return attribute in _STANDARD_ATTRIBUTES


def build_available_filters(products: Iterable[Product]) -> List[AttributeDescriptor]:
    """
    Descriptors with entry counts taken from the given products.

    Range domains stay as declared; only STANDARD entry counts change.
    """
    products = list(products)
    result = []
    for descriptor in _DESCRIPTORS:
        if descriptor.kind != FilterKind.STANDARD:
            result.append(descriptor)
            continue
        counts = Counter(
            format_attribute_value(resolve_attribute(p, descriptor.attribute))
            for p in products
        )
        entries = tuple(
            entry.model_copy(update={"count": counts.get(entry.value, 0)})
            for entry in descriptor.entries
        )
        result.append(descriptor.model_copy(update={"entries": entries}))
    return result
