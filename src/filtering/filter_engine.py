"""
Evaluate an applied filter state against a product collection.

apply_filters() is a stable filter: matching products keep their input
order and inputs are never modified. Evaluation never raises; a value of
the wrong type or a path that cannot be resolved means the constraint does
not reject the product.
"""

from typing import AbstractSet, List, Sequence

from filtering.accessors import resolve_attribute
from filtering.models import AppliedFilterState, AttributeValue, Product, RangeBounds

TRUE_TOKEN = "true"


def _is_number(value: AttributeValue) -> bool:
    # bool is an int subclass but never a range value
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def passes_range(value: AttributeValue, bounds: RangeBounds) -> bool:
    if not _is_number(value):
        return True
    if bounds.minimum is not None and value < bounds.minimum:
        return False
    if bounds.maximum is not None and value > bounds.maximum:
        return False
    return True


def passes_selection(value: AttributeValue, selected: AbstractSet[str]) -> bool:
    if not selected:
        return True
    if isinstance(value, bool):
        # Selecting "true" requires the flag; there is no way to require false
        return value or TRUE_TOKEN not in selected
    if isinstance(value, str):
        return value in selected
    return True


def product_matches(product: Product, state: AppliedFilterState) -> bool:
    for attribute, bounds in state.range_filters.items():
        if not passes_range(resolve_attribute(product, attribute), bounds):
            return False

    for attribute, selected in state.standard_filters.items():
        if not passes_selection(resolve_attribute(product, attribute), selected):
            return False

    return True


def apply_filters(products: Sequence[Product], state: AppliedFilterState) -> List[Product]:
    """Products passing every active constraint, in input order."""
    if state.is_empty:
        return list(products)
    return [product for product in products if product_matches(product, state)]


def count_matches(products: Sequence[Product], state: AppliedFilterState) -> int:
    return sum(1 for product in products if product_matches(product, state))
