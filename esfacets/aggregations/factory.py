"""Build aggregations from a type tag and plain options."""

from __future__ import annotations

from typing import Any

from ..collaborators import Collaborators
from ..dsl import DSL
from ..exceptions import ConfigurationError
from .base import Aggregation, AggregationType
from .custom_date_range import CustomDateRangeAggregation
from .post_date import PostDateAggregation
from .post_meta import PostMetaAggregation
from .post_type import PostTypeAggregation
from .relative_date import RelativeDateAggregation
from .taxonomy import CAPAuthorAggregation, TaxonomyAggregation
from .term import TermAggregation

AGGREGATION_CLASSES: dict[AggregationType, type[Aggregation]] = {
    AggregationType.TERM: TermAggregation,
    AggregationType.TAXONOMY: TaxonomyAggregation,
    AggregationType.CAP_AUTHOR: CAPAuthorAggregation,
    AggregationType.POST_TYPE: PostTypeAggregation,
    AggregationType.POST_META: PostMetaAggregation,
    AggregationType.POST_DATE: PostDateAggregation,
    AggregationType.CUSTOM_DATE_RANGE: CustomDateRangeAggregation,
    AggregationType.RELATIVE_DATE: RelativeDateAggregation,
}


def parse_type(value: str | AggregationType) -> AggregationType:
    try:
        return AggregationType(str(getattr(value, "value", value)).lower())
    except ValueError:
        raise ConfigurationError(f"unknown aggregation type {value!r}", "type")


def create_aggregation(
    type_: str | AggregationType,
    dsl: DSL,
    collaborators: Collaborators | None = None,
    **options: Any,
) -> Aggregation:
    """Create an aggregation of the given type.

    Host services are taken from ``collaborators`` for the variants that
    need them. Options set to None are treated as unset.

    Args:
        type_: Aggregation type tag
        dsl: DSL builder of the active adapter
        collaborators: Host lookup services and site timezone
        **options: Constructor options for the variant

    Returns:
        Configured aggregation

    Raises:
        ConfigurationError: If the type is unknown or options are invalid
    """
    agg_type = parse_type(type_)
    collaborators = collaborators or Collaborators()
    options = {key: value for key, value in options.items() if value is not None}

    if agg_type in (AggregationType.TAXONOMY, AggregationType.CAP_AUTHOR):
        options["resolver"] = collaborators.terms
    elif agg_type == AggregationType.POST_TYPE:
        options["resolver"] = collaborators.post_types
    elif agg_type == AggregationType.RELATIVE_DATE:
        options.setdefault("timezone_", collaborators.timezone)

    cls = AGGREGATION_CLASSES[agg_type]
    try:
        return cls(dsl, **options)
    except TypeError as e:
        raise ConfigurationError(str(e), agg_type.value) from e
