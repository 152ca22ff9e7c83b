"""Taxonomy and author aggregations, labeled through the host's term lookup."""

from __future__ import annotations

import logging
from typing import Any

from ..collaborators import Term, TermResolver
from ..dsl import DSL
from ..exceptions import ConfigurationError
from .base import (
    SORT_FIELDS,
    Aggregation,
    AggregationType,
    Logic,
    RawBuckets,
    SortOrder,
    humanize,
)
from .bucket import Bucket, normalize_key
from .term import terms_filter

logger = logging.getLogger(__name__)


class TaxonomyAggregation(Aggregation):
    """Aggregation over the term slugs of one taxonomy.

    Bucket keys are term slugs. A slug that no longer resolves to a term is
    dropped so the UI never offers a refinement that links nowhere.
    """

    type = AggregationType.TAXONOMY
    default_logic = Logic.AND

    def __init__(
        self,
        dsl: DSL,
        taxonomy: str,
        resolver: TermResolver | None,
        **kwargs: Any,
    ):
        """Initialize taxonomy aggregation.

        Args:
            dsl: DSL builder
            taxonomy: Taxonomy name, e.g. ``category``
            resolver: Host lookup for term names
            **kwargs: Options passed to ``Aggregation``
        """
        if not taxonomy:
            raise ConfigurationError("must not be empty", "taxonomy")
        if resolver is None:
            raise ConfigurationError(
                f"aggregation for {taxonomy!r} needs a term resolver", "resolver"
            )
        self.taxonomy = taxonomy
        self.resolver = resolver
        kwargs.setdefault("label", humanize(taxonomy))
        super().__init__(
            dsl,
            query_var=f"taxonomy_{taxonomy}",
            term_field=dsl.map_tax_field(taxonomy, "term_slug"),
            **kwargs,
        )

    def request(self) -> dict[str, Any]:
        return self.dsl.aggregate_terms(self.query_var, self.term_field, self.count)

    def filter(self) -> list[dict[str, Any]]:
        return terms_filter(self.dsl, self.term_field, self.query_values, self.logic)

    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        buckets = []
        for raw in self.coerce_buckets(raw_buckets):
            key = normalize_key(raw.key)
            term = self.resolve(key)
            if term is None:
                logger.debug(f"Dropping bucket {key!r}: no {self.taxonomy} term")
                continue
            buckets.append(
                Bucket(
                    key=key,
                    count=raw.doc_count,
                    label=term.name,
                    selected=self.is_selected(key),
                )
            )
        self.set_buckets(buckets)

    def resolve(self, key: str) -> Term | None:
        """Look up the term behind a bucket key."""
        return self.resolver.resolve_term(self.taxonomy, key)


CAP_SLUG_PREFIX = "cap-"

AUTHOR_SORT_FIELDS = ("display_name", "first_name", "last_name")


class CAPAuthorAggregation(TaxonomyAggregation):
    """Authors stored as terms of the Co-Authors Plus ``author`` taxonomy.

    Bucket keys carry a ``cap-`` prefix that author slugs do not have.
    Besides the common orderings, buckets can be sorted by ``display_name``,
    ``first_name`` or ``last_name``. Sorting by one name falls back to the
    other on ties. A missing first or last name is taken from the first or
    last word of the display name.
    """

    type = AggregationType.CAP_AUTHOR
    sort_fields = SORT_FIELDS + AUTHOR_SORT_FIELDS

    def __init__(self, dsl: DSL, resolver: TermResolver | None, **kwargs: Any):
        kwargs.setdefault("label", "Author")
        self.authors: dict[str, Term] = {}
        super().__init__(dsl, "author", resolver, **kwargs)

    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        self.authors = {}
        super().parse_buckets(raw_buckets)

    def resolve(self, key: str) -> Term | None:
        term = self.resolver.resolve_term(
            self.taxonomy, key.removeprefix(CAP_SLUG_PREFIX)
        )
        if term is not None:
            self.authors[key] = term
        return term

    def author_field(self, key: str, field: str) -> str:
        """Get a name field of the author behind a bucket key."""
        term = self.authors.get(key)
        display_name = term.name if term else ""
        parts = display_name.split(" ")
        if field == "first_name":
            return (term and term.first_name) or parts[0]
        if field == "last_name":
            return (term and term.last_name) or parts[-1]
        return display_name

    def sort_buckets(self, buckets: list[Bucket]) -> list[Bucket]:
        if self.order_by not in AUTHOR_SORT_FIELDS:
            return super().sort_buckets(buckets)

        fields = [self.order_by]
        if self.order_by == "first_name":
            fields.append("last_name")
        elif self.order_by == "last_name":
            fields.append("first_name")

        return sorted(
            buckets,
            key=lambda b: tuple(
                self.author_field(b.key, field).casefold() for field in fields
            ),
            reverse=self.order == SortOrder.DESC,
        )
