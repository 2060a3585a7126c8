"""
Pydantic models for products, the attribute schema, filters and the API.

Wire format is camelCase (minValue, standardFilters, displayPrice...) while
Python attributes stay snake_case; every model accepts both spellings.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Immutable model serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ============================================================================
# Enums
# ============================================================================

class FilterKind(str, Enum):
    RANGE = "RANGE"
    STANDARD = "STANDARD"


class FilterOperator(str, Enum):
    OR = "OR"    # value must be one of the selected values
    AND = "AND"  # single boolean flag must be true


class FilterValueType(str, Enum):
    SINGLE = "SINGLE"
    MULTI = "MULTI"


class Brand(str, Enum):
    KITCHENTECH = "KITCHENTECH"
    HOMEPRO = "HOMEPRO"
    APPLIANCE_PLUS = "APPLIANCE_PLUS"
    COOKMASTER = "COOKMASTER"
    HOMEMATE = "HOMEMATE"


class Color(str, Enum):
    WHITE = "WHITE"
    SILVER = "SILVER"
    BLACK = "BLACK"


class PriceTier(str, Enum):
    BUDGET = "BUDGET"
    MID_RANGE = "MID_RANGE"
    PREMIUM = "PREMIUM"
    LUXURY = "LUXURY"


class EnergyRating(str, Enum):
    A_PLUS_PLUS_PLUS = "A_PLUS_PLUS_PLUS"
    A_PLUS_PLUS = "A_PLUS_PLUS"
    A_PLUS = "A_PLUS"
    A = "A"
    B = "B"


# ============================================================================
# Product
# ============================================================================

class Money(WireModel):
    amount: float
    currency: str = "USD"


class Price(WireModel):
    display_price: Money


class ProductFamily(WireModel):
    id: str = "Washing_Machines"
    name: str = "Washers"


class Specifications(WireModel):
    capacity: float  # cu ft
    energy_rating: EnergyRating
    noise_level: int  # dB
    spin_speed: int  # RPM
    width: int  # inches
    height: int
    depth: int
    weight: int  # pounds


class Features(WireModel):
    wifi_enabled: bool = False
    smart_diagnosis: bool = False
    voice_control: bool = False
    energy_star_certified: bool = False
    water_sense_approved: bool = False
    steam_cleaning: bool = False
    allergen_cycle: bool = False
    quick_wash: bool = False
    sanitize_cycle: bool = False
    stainless_steel_drum: bool = False
    direct_drive_motor: bool = False


class Product(WireModel):
    id: str
    brand: Brand
    color: Color
    price: Price
    product_family: ProductFamily = Field(default_factory=ProductFamily)
    price_tier: PriceTier
    specifications: Specifications
    features: Features = Field(default_factory=Features)
    description: str = ""


# ============================================================================
# Attribute Schema
# ============================================================================

class FilterEntry(WireModel):
    value: str
    display_value: str
    count: int = 0


class AttributeDescriptor(WireModel):
    """One filterable attribute. RANGE carries a numeric domain, STANDARD its legal values."""
    kind: FilterKind = Field(alias="type")
    attribute: str
    display_name: str
    value_type: FilterValueType = FilterValueType.SINGLE
    operator: Optional[FilterOperator] = None

    # RANGE
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    unit: Optional[str] = None

    # STANDARD
    entries: Tuple[FilterEntry, ...] = ()

    @property
    def is_boolean_flag(self) -> bool:
        return self.operator == FilterOperator.AND


# ============================================================================
# Filters
# ============================================================================

class RangeFilter(WireModel):
    attribute: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None


class StandardFilter(WireModel):
    attribute: str
    operator: FilterOperator = FilterOperator.OR
    value_type: FilterValueType = FilterValueType.SINGLE
    values: Tuple[str, ...] = ()


class FilterResponse(WireModel):
    """Structured filters for one query. Never mutated after creation."""
    range_filters: Tuple[RangeFilter, ...] = ()
    standard_filters: Tuple[StandardFilter, ...] = ()
    confidence: Optional[float] = Field(default=None, ge=0, le=1)

    @property
    def is_empty(self) -> bool:
        return not self.range_filters and not self.standard_filters


def _coerce_value_list(v):
    # Models emit "BUDGET" instead of ["BUDGET"] and true instead of "true"
    if v is None:
        return []
    if isinstance(v, (str, bool, int, float)):
        v = [v]
    return [str(item).lower() if isinstance(item, bool) else str(item) for item in v]


class RawFilter(WireModel):
    """A filter as an external model returned it: range and standard fields mixed."""
    attribute: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    operator: Optional[FilterOperator] = None
    value_type: Optional[FilterValueType] = None
    values: Optional[Tuple[str, ...]] = None

    @field_validator("values", mode="before")
    @classmethod
    def coerce_values(cls, v):
        if v is None:
            return None
        return _coerce_value_list(v)

    @field_validator("operator", "value_type", mode="before")
    @classmethod
    def upper_enum(cls, v):
        if isinstance(v, str):
            return v.strip().upper() or None
        return v


class RawFilterResponse(WireModel):
    """Loosely-structured filter response prior to normalization."""
    range_filters: Tuple[RawFilter, ...] = ()
    standard_filters: Tuple[RawFilter, ...] = ()
    confidence: Optional[float] = Field(default=None, ge=0, le=1)

    @field_validator("range_filters", "standard_filters", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @property
    def is_empty(self) -> bool:
        return not self.range_filters and not self.standard_filters


# ============================================================================
# Applied Filter State
# ============================================================================

class RangeBounds(WireModel):
    minimum: Optional[float] = Field(default=None, alias="min")
    maximum: Optional[float] = Field(default=None, alias="max")


class AppliedFilterState(WireModel):
    """
    Session-scoped filter selection.

    Every edit returns a new state; callers swap the whole value.
    """
    range_filters: Dict[str, RangeBounds] = Field(default_factory=dict)
    standard_filters: Dict[str, FrozenSet[str]] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> "AppliedFilterState":
        return cls()

    @classmethod
    def from_response(cls, response: FilterResponse) -> "AppliedFilterState":
        """Build a state from a filter response. Later filters on an attribute win."""
        ranges = {
            rf.attribute: RangeBounds(minimum=rf.min_value, maximum=rf.max_value)
            for rf in response.range_filters
        }
        selections = {
            sf.attribute: frozenset(sf.values)
            for sf in response.standard_filters
        }
        # An empty selection constrains nothing
        selections = {k: v for k, v in selections.items() if v}
        return cls(range_filters=ranges, standard_filters=selections)

    @property
    def active_count(self) -> int:
        """Constraints the filter engine will actually evaluate."""
        ranges = sum(
            1 for bounds in self.range_filters.values()
            if bounds.minimum is not None or bounds.maximum is not None
        )
        return ranges + sum(1 for selected in self.standard_filters.values() if selected)

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0

    def with_range_bound(
        self,
        attribute: str,
        side: Literal["min", "max"],
        value: Optional[float],
    ) -> "AppliedFilterState":
        current = self.range_filters.get(attribute, RangeBounds())
        field = "minimum" if side == "min" else "maximum"
        ranges = dict(self.range_filters)
        ranges[attribute] = current.model_copy(update={field: value})
        return self.model_copy(update={"range_filters": ranges})

    def with_value_toggled(self, attribute: str, value: str) -> "AppliedFilterState":
        selections = dict(self.standard_filters)
        selected = set(selections.get(attribute, frozenset()))
        if value in selected:
            selected.discard(value)
        else:
            selected.add(value)
        if selected:
            selections[attribute] = frozenset(selected)
        else:
            selections.pop(attribute, None)
        return self.model_copy(update={"standard_filters": selections})

    def without_attribute(self, attribute: str) -> "AppliedFilterState":
        ranges = {k: v for k, v in self.range_filters.items() if k != attribute}
        selections = {k: v for k, v in self.standard_filters.items() if k != attribute}
        return AppliedFilterState(range_filters=ranges, standard_filters=selections)

    def cleared(self) -> "AppliedFilterState":
        return AppliedFilterState.empty()


# ============================================================================
# Request / Response Models
# ============================================================================

class SmartFilterRequest(BaseModel):
    """Free-text query to convert into filters."""
    prompt: str = Field(..., description="Natural language query, e.g. 'quiet washer for a big family'")


class SmartFilterResponse(FilterResponse):
    """Filters resolved for a query and which path produced them."""
    source: Literal["ai", "fallback"]


class FilteredProductsResponse(WireModel):
    products: List[Product]
    total: int
    matched: int
    active_filters: int


class SmartFilterApplyResponse(WireModel):
    filters: SmartFilterResponse
    applied_filters: AppliedFilterState
    products: List[Product]
    total: int
    matched: int


class ErrorResponse(BaseModel):
    error: str
    suggestion: Optional[str] = None


AttributeValue = Union[str, float, int, bool, None]
