"""Post type aggregation."""

from __future__ import annotations

import logging
from typing import Any

from ..collaborators import PostTypeResolver
from ..dsl import DSL
from ..exceptions import ConfigurationError
from .base import Aggregation, AggregationType, Logic, RawBuckets
from .bucket import Bucket, normalize_key
from .term import terms_filter

logger = logging.getLogger(__name__)


class PostTypeAggregation(Aggregation):
    """Aggregation over post type slugs.

    A document has exactly one post type, so selections default to OR.
    Buckets for unknown post types, or types excluded from search, are
    dropped.
    """

    type = AggregationType.POST_TYPE
    default_logic = Logic.OR

    def __init__(self, dsl: DSL, resolver: PostTypeResolver | None, **kwargs: Any):
        if resolver is None:
            raise ConfigurationError(
                "post type aggregation needs a post type resolver", "resolver"
            )
        self.resolver = resolver
        kwargs.setdefault("label", "Content Type")
        kwargs.setdefault("query_var", "post_type")
        super().__init__(dsl, term_field=dsl.map_field("post_type"), **kwargs)

    def request(self) -> dict[str, Any]:
        return self.dsl.aggregate_terms(self.query_var, self.term_field, self.count)

    def filter(self) -> list[dict[str, Any]]:
        return terms_filter(self.dsl, self.term_field, self.query_values, self.logic)

    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        buckets = []
        for raw in self.coerce_buckets(raw_buckets):
            key = normalize_key(raw.key)
            post_type = self.resolver.resolve_post_type(key)
            if post_type is None or not post_type.searchable:
                logger.debug(f"Dropping bucket {key!r}: not a searchable post type")
                continue
            buckets.append(
                Bucket(
                    key=key,
                    count=raw.doc_count,
                    label=post_type.singular_name,
                    selected=self.is_selected(key),
                )
            )
        self.set_buckets(buckets)
