"""Generic term aggregation and the term filter shared by term-like variants."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..dsl import DSL
from ..exceptions import ConfigurationError
from .base import Aggregation, AggregationType, Logic, RawBuckets
from .bucket import Bucket, normalize_key


def terms_filter(
    dsl: DSL, field: str, values: Sequence[str], logic: Logic
) -> list[dict[str, Any]]:
    """Build filter clauses for selected term values.

    With OR logic a single ``terms`` clause covers every value. With AND
    logic each value gets its own ``term`` clause, so a document has to
    match all of them.

    Args:
        dsl: DSL builder
        field: Field to filter on
        values: Selected values
        logic: How the values combine

    Returns:
        List of DSL fragments, empty when nothing is selected
    """
    if not values:
        return []
    if logic == Logic.OR:
        return [dsl.terms(field, list(values))]
    return [dsl.terms(field, value) for value in values]


class TermAggregation(Aggregation):
    """Aggregation over an arbitrary keyword field, labeled by raw key."""

    type = AggregationType.TERM
    default_logic = Logic.AND

    def __init__(self, dsl: DSL, *, query_var: str, term_field: str, **kwargs: Any):
        if not term_field:
            raise ConfigurationError("must not be empty", "term_field")
        super().__init__(dsl, query_var=query_var, term_field=term_field, **kwargs)

    def request(self) -> dict[str, Any]:
        return self.dsl.aggregate_terms(self.query_var, self.term_field, self.count)

    def filter(self) -> list[dict[str, Any]]:
        return terms_filter(self.dsl, self.term_field, self.query_values, self.logic)

    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        buckets = []
        for raw in self.coerce_buckets(raw_buckets):
            key = normalize_key(raw.key)
            buckets.append(
                Bucket(
                    key=key,
                    count=raw.doc_count,
                    label=raw.key_as_string or key,
                    selected=self.is_selected(key),
                )
            )
        self.set_buckets(buckets)
