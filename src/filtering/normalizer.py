"""
Repair loosely-structured filter responses against the attribute schema.

Language models get the shape mostly right but make the same few mistakes:
bare attribute names ("energyRating" instead of
"specifications.energyRating") and discrete attributes emitted as range
filters. Normalization fixes both and returns a new FilterResponse.
Attributes the schema does not know are passed through; the filter engine
ignores paths it cannot resolve.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Union

from core.logging import get_logger
from filtering.models import (
    FilterOperator,
    FilterResponse,
    FilterValueType,
    RangeFilter,
    RawFilter,
    RawFilterResponse,
    StandardFilter,
)
from filtering.schema import is_standard_attribute, list_descriptors

logger = get_logger(__name__)


def _build_path_fixes() -> Mapping[str, str]:
    # Bare leaf name -> full nested path, for every nested schema attribute
    fixes: Dict[str, str] = {}
    for descriptor in list_descriptors():
        if "." in descriptor.attribute:
            leaf = descriptor.attribute.rsplit(".", 1)[1]
            fixes[leaf] = descriptor.attribute
    return MappingProxyType(fixes)


ATTRIBUTE_PATH_FIXES: Mapping[str, str] = _build_path_fixes()


def fix_attribute_path(attribute: str) -> str:
    """Rewrite a commonly-wrong short attribute name to its schema path."""
    return ATTRIBUTE_PATH_FIXES.get(attribute, attribute)


def _to_raw(response: Union[RawFilterResponse, FilterResponse, Mapping[str, Any]]) -> RawFilterResponse:
    if isinstance(response, RawFilterResponse):
        return response
    if isinstance(response, FilterResponse):
        response = response.model_dump(by_alias=True)
    return RawFilterResponse.model_validate(response)


def _as_standard(raw: RawFilter, attribute: str) -> StandardFilter:
    return StandardFilter(
        attribute=attribute,
        operator=raw.operator or FilterOperator.OR,
        value_type=raw.value_type or FilterValueType.SINGLE,
        values=raw.values or (),
    )


def normalize_filter_response(
    response: Union[RawFilterResponse, FilterResponse, Mapping[str, Any]],
) -> FilterResponse:
    """
    Fix attribute paths and move discrete attributes out of the range list.

    Idempotent: normalizing an already-normalized response returns an
    equal response.
    """
    raw = _to_raw(response)

    range_filters: List[RangeFilter] = []
    standard_filters: List[StandardFilter] = []
    reclassified: List[StandardFilter] = []

    for rf in raw.range_filters:
        attribute = fix_attribute_path(rf.attribute)
        if attribute != rf.attribute:
            logger.debug("Corrected attribute path", original=rf.attribute, corrected=attribute)

        if is_standard_attribute(attribute):
            # min/max framing is meaningless for a discrete attribute
            reclassified.append(_as_standard(rf, attribute))
            logger.info(
                "Reclassified range filter as standard filter",
                attribute=attribute,
                values=list(rf.values or ()),
            )
        else:
            range_filters.append(
                RangeFilter(attribute=attribute, min_value=rf.min_value, max_value=rf.max_value)
            )

    for sf in raw.standard_filters:
        attribute = fix_attribute_path(sf.attribute)
        if attribute != sf.attribute:
            logger.debug("Corrected attribute path", original=sf.attribute, corrected=attribute)
        standard_filters.append(_as_standard(sf, attribute))

    return FilterResponse(
        range_filters=tuple(range_filters),
        standard_filters=tuple(standard_filters) + tuple(reclassified),
        confidence=raw.confidence,
    )
