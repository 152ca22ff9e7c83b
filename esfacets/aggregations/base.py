"""Aggregation base class and the capabilities every variant provides.

An aggregation is both a filter and a request for grouped counts. During a
search it goes through one cycle:

1. ``bind(params)`` reads the selected values for its query var,
2. ``request()`` and ``filter()`` contribute DSL to the outbound body,
3. ``parse_buckets(raw)`` turns the response buckets into ``Bucket``s.

Aggregations hold per-request state and must not be shared between
concurrent requests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable

import msgspec

from ..dsl import DEFAULT_BUCKET_COUNT, DSL
from ..exceptions import ConfigurationError
from ..request import RefinementParams
from .bucket import Bucket, RawBucket

logger = logging.getLogger(__name__)


class Logic(str, Enum):
    """How multiple selected values combine."""

    AND = "AND"  # every value must match; more selections narrow results
    OR = "OR"  # any value may match; more selections widen results

    @classmethod
    def parse(cls, value: str | Logic) -> Logic:
        try:
            return cls(str(value.value if isinstance(value, Logic) else value).upper())
        except ValueError:
            raise ConfigurationError(f"expected AND or OR, got {value!r}", "logic")


class SortOrder(str, Enum):
    """Direction for bucket sorting."""

    ASC = "ASC"
    DESC = "DESC"


class AggregationType(str, Enum):
    """Tag selecting the aggregation variant at configuration time."""

    TERM = "term"
    TAXONOMY = "taxonomy"
    CAP_AUTHOR = "cap_author"
    POST_TYPE = "post_type"
    POST_META = "post_meta"
    POST_DATE = "post_date"
    CUSTOM_DATE_RANGE = "custom_date_range"
    RELATIVE_DATE = "relative_date"


SORT_FIELDS = ("count", "key", "label")

RawBuckets = Iterable[RawBucket | dict[str, Any]]


@runtime_checkable
class BuildsRequest(Protocol):
    def request(self) -> dict[str, Any]: ...


@runtime_checkable
class BuildsFilter(Protocol):
    def filter(self) -> list[dict[str, Any]]: ...


@runtime_checkable
class ParsesBuckets(Protocol):
    def parse_buckets(self, raw_buckets: RawBuckets) -> None: ...


def humanize(name: str) -> str:
    """Turn a machine name like ``event_start-date`` into ``Event Start Date``."""
    words = name.replace("-", " ").replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


class Aggregation(ABC):
    """Configured facet holding selected values and parsed buckets.

    Variants implement ``request``, ``filter`` and ``parse_buckets``
    themselves and declare their own ``default_logic``; nothing about the
    DSL a variant emits is inherited implicitly from this class.
    """

    type: ClassVar[AggregationType]
    default_logic: ClassVar[Logic]
    sort_fields: ClassVar[tuple[str, ...]] = SORT_FIELDS

    def __init__(
        self,
        dsl: DSL,
        *,
        query_var: str,
        label: str = "",
        logic: Logic | str | None = None,
        term_field: str = "",
        count: int = DEFAULT_BUCKET_COUNT,
        order_by: str | None = "count",
        order: SortOrder | str = SortOrder.DESC,
    ):
        """Initialize aggregation.

        Args:
            dsl: DSL builder bound to the active field map
            query_var: Aggregation name and request parameter namespace
            label: Human-readable name (default: humanized query var)
            logic: AND/OR combination of selected values
            term_field: Mapped backend field to filter and group on
            count: Maximum number of buckets to request
            order_by: One of ``sort_fields``, or None for backend order
            order: Sort direction
        """
        if not query_var:
            raise ConfigurationError("must not be empty", "query_var")
        if count < 1:
            raise ConfigurationError(f"must be positive, got {count}", "count")
        if order_by is not None and order_by not in self.sort_fields:
            raise ConfigurationError(
                f"expected one of {', '.join(self.sort_fields)}, got {order_by!r}",
                "order_by",
            )

        self.dsl = dsl
        self.query_var = query_var
        self.label = label or humanize(query_var)
        self.logic = Logic.parse(logic) if logic else self.default_logic
        self.term_field = term_field
        self.count = count
        self.order_by = order_by
        self.order = SortOrder(str(getattr(order, "value", order)).upper())

        self.query_values: list[str] = []
        self.buckets: list[Bucket] = []

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(query_var={self.query_var!r}, "
            f"values={self.query_values!r}, buckets={len(self.buckets)})"
        )

    # Request state

    def extract_query_values(
        self, params: RefinementParams, key: str | None = None
    ) -> list[str]:
        """Read selected values for this aggregation from request parameters.

        Args:
            params: Refinement parameters of the current request
            key: Parameter to read instead of this aggregation's query var

        Returns:
            Non-empty values, deduplicated, in request order
        """
        values = params.values(key or self.query_var)
        return list(dict.fromkeys(value for value in values if value))

    def bind(self, params: RefinementParams) -> None:
        """Set ``query_values`` from the current request."""
        self.query_values = self.extract_query_values(params)

    def is_selected(self, key: str) -> bool:
        return key in self.query_values

    # Capabilities

    @abstractmethod
    def request(self) -> dict[str, Any]:
        """Get the aggregation DSL keyed by query var, or ``{}``."""

    @abstractmethod
    def filter(self) -> list[dict[str, Any]]:
        """Get filter clauses matching the selected values; ``[]`` for none."""

    @abstractmethod
    def parse_buckets(self, raw_buckets: RawBuckets) -> None:
        """Replace ``buckets`` with the parsed response buckets."""

    # Bucket helpers

    def coerce_buckets(self, raw_buckets: RawBuckets | None) -> list[RawBucket]:
        """Convert response buckets to ``RawBucket``, skipping malformed ones."""
        coerced = []
        for raw in raw_buckets or []:
            if isinstance(raw, RawBucket):
                coerced.append(raw)
                continue
            try:
                coerced.append(msgspec.convert(raw, RawBucket))
            except msgspec.ValidationError as e:
                logger.warning(f"Skipping malformed bucket in {self.query_var}: {e}")
        return coerced

    def set_buckets(self, buckets: Sequence[Bucket]) -> None:
        self.buckets = self.sort_buckets(list(buckets))

    def sort_buckets(self, buckets: list[Bucket]) -> list[Bucket]:
        """Apply the configured ordering; keep backend order when unset."""
        if self.order_by is None:
            return buckets

        if self.order_by == "key":
            sort_key = lambda b: b.key.casefold()  # noqa: E731
        elif self.order_by == "label":
            sort_key = lambda b: b.label.casefold()  # noqa: E731
        else:
            sort_key = lambda b: b.count  # noqa: E731

        return sorted(buckets, key=sort_key, reverse=self.order == SortOrder.DESC)

    def get_bucket(self, key: str) -> Bucket | None:
        for bucket in self.buckets:
            if bucket.key == key:
                return bucket
        return None

    @property
    def selected_buckets(self) -> list[Bucket]:
        return [bucket for bucket in self.buckets if bucket.selected]
