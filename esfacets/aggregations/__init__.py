"""Aggregations: configured facets that filter results and parse buckets."""

from .base import (
    Aggregation,
    AggregationType,
    BuildsFilter,
    BuildsRequest,
    Logic,
    ParsesBuckets,
    SortOrder,
    humanize,
)
from .bucket import Bucket, RawBucket
from .custom_date_range import CustomDateRangeAggregation, parse_w3c
from .factory import AGGREGATION_CLASSES, create_aggregation
from .post_date import PostDateAggregation
from .post_meta import PostMetaAggregation
from .post_type import PostTypeAggregation
from .registry import AggregationRegistry
from .relative_date import RelativeDateAggregation
from .taxonomy import CAPAuthorAggregation, TaxonomyAggregation
from .term import TermAggregation, terms_filter

__all__ = [
    "AGGREGATION_CLASSES",
    "Aggregation",
    "AggregationRegistry",
    "AggregationType",
    "Bucket",
    "BuildsFilter",
    "BuildsRequest",
    "CAPAuthorAggregation",
    "CustomDateRangeAggregation",
    "Logic",
    "ParsesBuckets",
    "PostDateAggregation",
    "PostMetaAggregation",
    "PostTypeAggregation",
    "RawBucket",
    "RelativeDateAggregation",
    "SortOrder",
    "TaxonomyAggregation",
    "TermAggregation",
    "create_aggregation",
    "humanize",
    "parse_w3c",
    "terms_filter",
]
