"""Search refinement engine for Elasticsearch-backed content sites.

Compiles facet selections into query DSL for the active backend adapter and
parses aggregation responses into selectable buckets.
"""

from .adapters import Adapter, Feature, get_adapter
from .aggregations import (
    Aggregation,
    AggregationRegistry,
    AggregationType,
    Bucket,
    Logic,
    SortOrder,
    create_aggregation,
)
from .collaborators import (
    Collaborators,
    PostType,
    PostTypeResolver,
    StaticPostTypeResolver,
    StaticTermResolver,
    Term,
    TermResolver,
)
from .config import Settings, load_settings
from .context import CompiledAggregation, SearchContext
from .dsl import DSL
from .exceptions import (
    ConfigurationError,
    FacetError,
    InvalidFeatureError,
    UnsupportedFeatureError,
)
from .fields import FieldMap
from .request import RefinementParams

__version__ = "1.0.0"

__all__ = [
    "Adapter",
    "Aggregation",
    "AggregationRegistry",
    "AggregationType",
    "Bucket",
    "Collaborators",
    "CompiledAggregation",
    "ConfigurationError",
    "DSL",
    "FacetError",
    "Feature",
    "FieldMap",
    "InvalidFeatureError",
    "Logic",
    "PostType",
    "PostTypeResolver",
    "RefinementParams",
    "SearchContext",
    "Settings",
    "SortOrder",
    "StaticPostTypeResolver",
    "StaticTermResolver",
    "Term",
    "TermResolver",
    "UnsupportedFeatureError",
    "create_aggregation",
    "get_adapter",
    "load_settings",
]
