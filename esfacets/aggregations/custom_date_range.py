"""Custom date range: a pure filter driven by user-supplied dates."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..dsl import DSL, format_date
from ..request import RefinementParams
from .base import Aggregation, AggregationType, Logic, RawBuckets

logger = logging.getLogger(__name__)

# PHP's DATE_W3C, e.g. 2022-01-31T23:59:59+00:00
W3C_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def parse_w3c(value: str) -> datetime | None:
    """Parse a W3C/ISO-8601 timestamp with offset.

    URL decoding turns the ``+`` of a timezone offset into a space, so any
    space is read as ``+`` before parsing.

    Args:
        value: Timestamp string

    Returns:
        Timezone-aware datetime, or None if the value is empty or invalid
    """
    if not value:
        return None
    try:
        return datetime.strptime(value.strip().replace(" ", "+"), W3C_FORMAT)
    except ValueError:
        logger.debug(f"Ignoring unparsable date {value!r}")
        return None


class CustomDateRangeAggregation(Aggregation):
    """Restricts results to a ``from``/``to`` post date window.

    The two dates come either as the two values of the query var or as the
    companion ``<query_var>_from`` and ``<query_var>_to`` parameters. Nothing
    is requested from the backend and there are no buckets to parse.
    """

    type = AggregationType.CUSTOM_DATE_RANGE
    default_logic = Logic.AND

    def __init__(self, dsl: DSL, **kwargs: Any):
        kwargs.setdefault("label", "Custom Date Range")
        kwargs.setdefault("query_var", "custom_date_range")
        super().__init__(dsl, **kwargs)

    def bind(self, params: RefinementParams) -> None:
        values = [value for value in params.values(self.query_var) if value]
        if not values:
            values = [
                params.value(f"{self.query_var}_from"),
                params.value(f"{self.query_var}_to"),
            ]
            if not all(values):
                values = []
        self.query_values = values

    def date_range(self) -> tuple[datetime, datetime] | None:
        """Get the selected window, or None if it is missing or invalid."""
        if len(self.query_values) != 2:
            return None
        start, end = (parse_w3c(value) for value in self.query_values)
        if start is None or end is None:
            return None
        return start, end

    def request(self) -> dict[str, Any]:
        return {}

    def filter(self) -> list[dict[str, Any]]:
        window = self.date_range()
        if window is None:
            return []
        start, end = window
        return [
            self.dsl.range(
                "post_date",
                {"gte": format_date(start), "lte": format_date(end)},
            )
        ]

    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        pass
