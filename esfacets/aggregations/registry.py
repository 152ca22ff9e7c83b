"""Per-request collection of configured aggregations."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from ..request import RefinementParams
from .base import Aggregation

logger = logging.getLogger(__name__)


class AggregationRegistry:
    """Aggregations keyed by query var, in configuration order.

    Configuration order is also the order in which request DSL and filters
    are emitted.
    """

    def __init__(self) -> None:
        self._aggregations: dict[str, Aggregation] = {}

    def __len__(self) -> int:
        return len(self._aggregations)

    def __iter__(self) -> Iterator[Aggregation]:
        return iter(list(self._aggregations.values()))

    def __contains__(self, query_var: object) -> bool:
        return query_var in self._aggregations

    def add(self, aggregation: Aggregation) -> Aggregation:
        """Register an aggregation, replacing any with the same query var."""
        if aggregation.query_var in self._aggregations:
            logger.debug(f"Replacing aggregation {aggregation.query_var!r}")
        self._aggregations[aggregation.query_var] = aggregation
        return aggregation

    def get_by_query_var(self, query_var: str) -> Aggregation | None:
        return self._aggregations.get(query_var)

    def get_by_label(self, label: str) -> Aggregation | None:
        """Find the first aggregation with the given label."""
        for aggregation in self._aggregations.values():
            if aggregation.label == label:
                return aggregation
        return None

    def all(self) -> list[Aggregation]:
        return list(self._aggregations.values())

    def bind(self, params: RefinementParams) -> None:
        """Read every aggregation's selected values from the request."""
        for aggregation in self._aggregations.values():
            aggregation.bind(params)

    def requests(self) -> dict[str, Any]:
        """Merge the aggregation DSL of every registered aggregation."""
        aggs: dict[str, Any] = {}
        for aggregation in self._aggregations.values():
            aggs.update(aggregation.request())
        return aggs

    def filters(self) -> list[dict[str, Any]]:
        """Collect the filter clauses of every registered aggregation."""
        clauses: list[dict[str, Any]] = []
        for aggregation in self._aggregations.values():
            clauses.extend(aggregation.filter())
        return clauses

    def parse(self, response_aggregations: Mapping[str, Any] | None) -> None:
        """Route response buckets to the matching aggregations.

        Response aggregations without a registered query var are ignored.
        A missing or malformed bucket list parses as empty.

        Args:
            response_aggregations: The ``aggregations`` object of a response
        """
        if not isinstance(response_aggregations, Mapping):
            if response_aggregations is not None:
                logger.warning("Ignoring response aggregations that are not a mapping")
            return

        for name, body in response_aggregations.items():
            aggregation = self._aggregations.get(name)
            if aggregation is None:
                logger.debug(f"Ignoring unregistered response aggregation {name!r}")
                continue

            raw_buckets = body.get("buckets") if isinstance(body, Mapping) else None
            if raw_buckets is None:
                raw_buckets = []
            elif not isinstance(raw_buckets, list):
                logger.warning(f"Malformed bucket list for {name!r}")
                raw_buckets = []
            aggregation.parse_buckets(raw_buckets)
