"""Post meta aggregation."""

from __future__ import annotations

from typing import Any

from ..dsl import DSL
from ..exceptions import ConfigurationError
from ..fields import META_DATA_TYPES
from .base import AggregationType, humanize
from .term import TermAggregation

# Legacy type names still present in the field maps.
META_TYPE_ALIASES = ("analyzed", "binary", "signed", "unsigned")


class PostMetaAggregation(TermAggregation):
    """Term aggregation over one meta key, typed through the field map."""

    type = AggregationType.POST_META

    def __init__(self, dsl: DSL, meta_key: str, data_type: str = "", **kwargs: Any):
        """Initialize post meta aggregation.

        Args:
            dsl: DSL builder
            meta_key: Meta key to aggregate on
            data_type: Declared type (boolean, long, double, date, datetime,
                time); empty for the raw keyword value
            **kwargs: Options passed to ``Aggregation``
        """
        if not meta_key:
            raise ConfigurationError("must not be empty", "meta_key")
        if data_type and data_type not in META_DATA_TYPES + META_TYPE_ALIASES:
            raise ConfigurationError(f"unknown meta type {data_type!r}", "data_type")

        self.meta_key = meta_key
        self.data_type = data_type
        kwargs.setdefault("label", humanize(meta_key))
        kwargs.setdefault("query_var", f"post_meta_{meta_key}")
        super().__init__(
            dsl, term_field=dsl.map_meta_field(meta_key, data_type), **kwargs
        )
