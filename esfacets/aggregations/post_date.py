"""Post date histogram aggregation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from dateutil.relativedelta import relativedelta

from ..dsl import DSL, format_date
from .base import Aggregation, AggregationType, Logic, RawBuckets
from .bucket import Bucket, normalize_key

logger = logging.getLogger(__name__)

INTERVAL_STEPS = {
    "year": relativedelta(years=1),
    "quarter": relativedelta(months=3),
    "month": relativedelta(months=1),
    "week": relativedelta(weeks=1),
    "day": relativedelta(days=1),
    "hour": relativedelta(hours=1),
    "minute": relativedelta(minutes=1),
}

LABEL_FORMATS = {
    "year": "%Y",
    "quarter": "%Y-%m",
    "month": "%Y-%m",
    "week": "%Y-%m-%d",
    "day": "%Y-%m-%d",
}


def parse_epoch_millis(value: str) -> datetime | None:
    """Parse a histogram bucket key (epoch milliseconds) as a UTC datetime."""
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


class PostDateAggregation(Aggregation):
    """Date histogram over the post date, most recent period first.

    Bucket keys are the epoch-millisecond start of each period. Selecting
    a bucket restricts results to that period; several selected periods
    are combined with OR since periods never overlap.
    """

    type = AggregationType.POST_DATE
    default_logic = Logic.OR

    def __init__(self, dsl: DSL, interval: str = "year", **kwargs: Any):
        self.interval = interval
        kwargs.setdefault("label", "Date")
        kwargs.setdefault("query_var", "post_date")
        kwargs.setdefault("order_by", None)
        super().__init__(dsl, **kwargs)

    def request(self) -> dict[str, Any]:
        return self.dsl.aggregate_date_histogram(
            self.query_var, "post_date", self.interval
        )

    def filter(self) -> list[dict[str, Any]]:
        step = INTERVAL_STEPS.get(self.interval)
        if step is None:
            logger.debug(f"No period filter for interval {self.interval!r}")
            return []

        ranges = []
        for value in self.query_values:
            start = parse_epoch_millis(value)
            if start is None:
                logger.debug(f"Ignoring invalid {self.query_var} value {value!r}")
                continue
            try:
                end = start + step
            except (ValueError, OverflowError):
                logger.debug(f"Ignoring out of range {self.query_var} value {value!r}")
                continue
            ranges.append(
                self.dsl.range(
                    "post_date", {"gte": format_date(start), "lt": format_date(end)}
                )
            )

        if len(ranges) > 1:
            return [{"bool": {"should": ranges, "minimum_should_match": 1}}]
        return ranges

    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        buckets = []
        for raw in self.coerce_buckets(raw_buckets):
            key = normalize_key(raw.key)
            buckets.append(
                Bucket(
                    key=key,
                    count=raw.doc_count,
                    label=raw.key_as_string or self._format_label(key),
                    selected=self.is_selected(key),
                )
            )
        self.set_buckets(buckets)

    def _format_label(self, key: str) -> str:
        start = parse_epoch_millis(key)
        if start is None:
            return key
        fmt = LABEL_FORMATS.get(self.interval)
        return start.strftime(fmt) if fmt else start.isoformat()
