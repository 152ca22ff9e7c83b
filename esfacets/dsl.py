"""Builders for Elasticsearch query DSL fragments.

Every builder is a pure function of its arguments and the field map the
``DSL`` instance was created with. Fragments are plain nested dicts, ready
to be merged into a request body and serialized.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from .fields import FieldMap

DEFAULT_BUCKET_COUNT = 1000

# Backend post dates read "YYYY-mm-dd HH:MM:SS"; this is the part after the year.
TIME_FORMAT = "%m-%d %H:%M:%S"


def format_date(value: datetime) -> str:
    """Format a datetime in the backend layout with a four-digit year.

    ``strftime("%Y")`` does not pad years before 1000 on every platform.
    """
    return f"{value.year:04d}-{value.strftime(TIME_FORMAT)}"


CALENDAR_INTERVALS = ("year", "quarter", "month", "week", "day", "hour", "minute")

HISTOGRAM_FORMATS = {
    "year": "yyyy",
    "quarter": "yyyy-MM",
    "month": "yyyy-MM",
    "week": "yyyy-MM-dd",
    "day": "yyyy-MM-dd",
}
HISTOGRAM_FALLBACK_FORMAT = "yyyy-MM-dd'T'HH:mm:ss.SSSXXX"


def histogram_format(interval: str) -> str:
    """Get the bucket key format for a date histogram interval."""
    return HISTOGRAM_FORMATS.get(interval, HISTOGRAM_FALLBACK_FORMAT)


class DSL:
    """Query DSL builder bound to a backend field map."""

    def __init__(self, field_map: FieldMap | None = None):
        """Initialize builder.

        Args:
            field_map: Field map of the active adapter (default: empty map)
        """
        self.field_map = field_map or FieldMap()

    # Field mapping shortcuts

    def map_field(self, field: str) -> str:
        return self.field_map.map(field)

    def map_meta_field(self, meta_key: str, data_type: str = "") -> str:
        return self.field_map.map_meta(meta_key, data_type)

    def map_tax_field(self, taxonomy: str, field: str) -> str:
        return self.field_map.map_taxonomy(taxonomy, field)

    # Query and filter clauses

    def terms(self, field: str, values: Any, **extra: Any) -> dict[str, Any]:
        """Build a ``term`` clause for one value or ``terms`` for several.

        Args:
            field: Generic field key (mapped paths pass through unchanged)
            values: A single value, or a list/tuple of values
            **extra: Additional clause arguments such as ``boost``

        Returns:
            DSL fragment
        """
        if isinstance(values, list | tuple):
            return {"terms": {self.map_field(field): list(values), **extra}}
        return {"term": {self.map_field(field): values, **extra}}

    def all_terms(
        self, taxonomy: str, field: str, values: Sequence[str]
    ) -> dict[str, Any]:
        """Build a bool filter requiring every value to match.

        Args:
            taxonomy: Taxonomy name used to resolve the field
            field: Generic term field, e.g. ``term_slug``
            values: Values that must all be present

        Returns:
            DSL fragment
        """
        mapped = self.map_tax_field(taxonomy, field)
        return {"bool": {"filter": [{"term": {mapped: value}} for value in values]}}

    def range(self, field: str, args: dict[str, Any]) -> dict[str, Any]:
        """Build a range clause with comparator keys such as ``gte``/``lt``."""
        return {"range": {self.map_field(field): dict(args)}}

    def exists(self, field: str) -> dict[str, Any]:
        return {"exists": {"field": self.map_field(field)}}

    def missing(self, field: str, **extra: Any) -> dict[str, Any]:
        return {
            "bool": {"must_not": {"exists": {"field": self.map_field(field), **extra}}}
        }

    def match(
        self, field: str, value: str, extra: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return {"match": {self.map_field(field): value, **(extra or {})}}

    def multi_match(
        self, fields: Sequence[str], query: str, extra: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Build a multi_match clause. Fields must already be mapped."""
        return {
            "multi_match": {"query": query, "fields": list(fields), **(extra or {})}
        }

    def match_all(self) -> dict[str, Any]:
        return {"match_all": {}}

    def searchable_fields(self) -> list[str]:
        """Default weighted fields for free-text search, already mapped."""
        return [
            self.map_field("post_title.analyzed") + "^3",
            self.map_field("post_excerpt"),
            self.map_field("post_content.analyzed"),
            self.map_field("post_author.display_name"),
            self.map_meta_field("_wp_attachment_image_alt", "analyzed"),
        ]

    def search_query(
        self, text: str, fields: Sequence[str] | None = None
    ) -> dict[str, Any]:
        """Build the primary free-text query.

        All terms are required, but they may be spread across fields.

        Args:
            text: Search phrase
            fields: Mapped fields overriding ``searchable_fields()``

        Returns:
            DSL fragment
        """
        return self.multi_match(
            fields if fields is not None else self.searchable_fields(),
            text,
            {"operator": "and", "type": "cross_fields"},
        )

    # Aggregations

    def aggregate_terms(
        self, name: str, field: str, count: int = DEFAULT_BUCKET_COUNT
    ) -> dict[str, Any]:
        """Build a terms aggregation keyed by ``name``."""
        return {name: {"terms": {"field": self.map_field(field), "size": count}}}

    def aggregate_date_histogram(
        self, name: str, field: str, interval: str, min_doc_count: int = 1
    ) -> dict[str, Any]:
        """Build a date histogram aggregation, most recent bucket first.

        Calendar units (``year``, ``month``, ...) use ``calendar_interval``;
        anything else is sent as a ``fixed_interval`` such as ``30d``.

        Args:
            name: Aggregation name
            field: Generic date field key
            interval: Histogram interval
            min_doc_count: Smallest bucket the backend should return

        Returns:
            DSL fragment
        """
        interval_key = (
            "calendar_interval" if interval in CALENDAR_INTERVALS else "fixed_interval"
        )
        return {
            name: {
                "date_histogram": {
                    "field": self.map_field(field),
                    interval_key: interval,
                    "format": histogram_format(interval),
                    "min_doc_count": min_doc_count,
                    "order": {"_key": "desc"},
                }
            }
        }

    def aggregate_date_range(
        self, field: str, ranges: Sequence[dict[str, Any]], name: str | None = None
    ) -> dict[str, Any]:
        """Build a date range aggregation over ``{key, from, to}`` entries.

        Args:
            field: Generic date field key
            ranges: Range definitions
            name: Aggregation name to key the fragment by

        Returns:
            DSL fragment, keyed by ``name`` when one is given
        """
        clause = {
            "date_range": {
                "field": self.map_field(field),
                "format": "yyyy-MM-dd HH:mm:ss",
                "ranges": [dict(r) for r in ranges],
            }
        }
        return {name: clause} if name else clause

    @staticmethod
    def build_range(start: datetime, end: datetime) -> dict[str, str]:
        """Format a pair of datetimes as a ``from``/``to`` range."""
        return {"from": format_date(start), "to": format_date(end)}
