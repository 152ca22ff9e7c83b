"""Relative date aggregation: counts for the past N days."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

from ..dsl import DSL
from ..exceptions import ConfigurationError
from ..request import RefinementParams
from .base import Aggregation, AggregationType, Logic, RawBuckets
from .bucket import Bucket, normalize_key
from .custom_date_range import parse_w3c

DEFAULT_OFFSETS = (7, 30, 365)
CUSTOM_KEY = "custom"


class RelativeDateAggregation(Aggregation):
    """Date ranges computed from day offsets rather than enumerated by the
    backend.

    Every range ends at the start of tomorrow in the site timezone. When
    ``custom`` is selected and explicit ``<query_var>_from`` and
    ``<query_var>_to`` dates are supplied, one more range is requested.

    ``filter()`` is not implemented yet and always returns no clauses.
    """

    type = AggregationType.RELATIVE_DATE
    default_logic = Logic.OR

    def __init__(
        self,
        dsl: DSL,
        offsets: Sequence[int] = DEFAULT_OFFSETS,
        timezone_: tzinfo = timezone.utc,
        clock: Callable[[tzinfo], datetime] | None = None,
        **kwargs: Any,
    ):
        """Initialize relative date aggregation.

        Args:
            dsl: DSL builder
            offsets: Day offsets, one range each
            timezone_: Site timezone that "tomorrow" is computed in
            clock: Returns the current time in a timezone (default: now)
            **kwargs: Options passed to ``Aggregation``
        """
        if not offsets or any(int(offset) < 1 for offset in offsets):
            raise ConfigurationError("must be positive day counts", "offsets")
        self.offsets = [int(offset) for offset in offsets]
        self.timezone = timezone_
        self.clock = clock or datetime.now
        self.custom_from = ""
        self.custom_to = ""
        kwargs.setdefault("label", "Relative Date")
        kwargs.setdefault("query_var", "relative_date")
        kwargs.setdefault("order_by", None)
        super().__init__(dsl, **kwargs)

    def bind(self, params: RefinementParams) -> None:
        super().bind(params)
        self.custom_from = params.value(f"{self.query_var}_from")
        self.custom_to = params.value(f"{self.query_var}_to")

    def tomorrow(self) -> datetime:
        """Midnight at the start of tomorrow in the site timezone."""
        today = self.clock(self.timezone).date()
        return self._midnight(today + timedelta(days=1))

    def relative_range(self, offset: int) -> dict[str, str]:
        """Get the ``from``/``to`` range covering the past ``offset`` days."""
        end = self.tomorrow()
        start = self._midnight(end.date() - timedelta(days=offset + 1))
        return self.dsl.build_range(start, end)

    def custom_range(self) -> dict[str, str] | None:
        if CUSTOM_KEY not in self.query_values:
            return None
        start = parse_w3c(self.custom_from)
        end = parse_w3c(self.custom_to)
        if start is None or end is None:
            return None
        return self.dsl.build_range(start, end)

    def request(self) -> dict[str, Any]:
        ranges = [
            {"key": str(offset), **self.relative_range(offset)}
            for offset in self.offsets
        ]
        custom = self.custom_range()
        if custom is not None:
            ranges.append({"key": CUSTOM_KEY, **custom})
        return self.dsl.aggregate_date_range("post_date", ranges, name=self.query_var)

    def filter(self) -> list[dict[str, Any]]:
        return []

    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        buckets = []
        for raw in self.coerce_buckets(raw_buckets):
            key = normalize_key(raw.key)
            buckets.append(
                Bucket(
                    key=key,
                    count=raw.doc_count,
                    label=self._label(key),
                    selected=self.is_selected(key),
                )
            )
        self.set_buckets(buckets)

    def _label(self, key: str) -> str:
        if key == CUSTOM_KEY:
            return "Custom range"
        return f"Past {key} days"

    def _midnight(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.timezone)
