"""Request-scoped search context.

A ``SearchContext`` is created for each incoming search. It owns the DSL
builder of the active adapter and a fresh ``AggregationRegistry``, reads
the request's refinement parameters, produces the request body and parses
the backend's response. Nothing here is shared between requests except the
field map and settings it was built from.

Typical use::

    context = SearchContext.from_settings(settings)
    context.bind(RefinementParams.from_query_string(query_string))
    body = context.build_body("election results", size=20)
    response = transport.search(body)  # host-provided
    context.parse_response(response)
    for aggregation in context.aggregations:
        ...
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import msgspec

from .adapters import Adapter, Feature, get_adapter
from .aggregations import (
    Aggregation,
    AggregationRegistry,
    AggregationType,
    create_aggregation,
)
from .collaborators import Collaborators
from .config import Settings
from .dsl import DSL
from .request import RefinementParams

logger = logging.getLogger(__name__)


@dataclass
class CompiledAggregation:
    """DSL produced by one aggregation for one request."""

    request: dict[str, Any] = field(default_factory=dict)
    filters: list[dict[str, Any]] = field(default_factory=list)


class SearchContext:
    """Compiles refinements into a request body and parses the response."""

    def __init__(
        self,
        adapter: Adapter | str | None = None,
        collaborators: Collaborators | None = None,
        settings: Settings | None = None,
    ):
        """Initialize search context.

        Args:
            adapter: Adapter instance or name (default: from settings)
            collaborators: Host lookup services and site timezone
            settings: Validated settings (default: built-in defaults)
        """
        self.settings = settings or Settings()
        if adapter is None:
            adapter = self.settings.adapter
        self.adapter = get_adapter(adapter) if isinstance(adapter, str) else adapter
        self.collaborators = collaborators or Collaborators()
        self.dsl = DSL(self.adapter.field_map())
        self.registry = AggregationRegistry()
        self.params = RefinementParams()
        self.empty_search = False
        if self.settings.empty_search:
            self.enable_empty_search()

    @classmethod
    def from_settings(cls, settings: Settings) -> SearchContext:
        """Build a context with adapter, lookups and aggregations from
        settings."""
        context = cls(settings.adapter, settings.collaborators(), settings)
        context.configure(settings)
        return context

    def __repr__(self) -> str:
        return (
            f"SearchContext(adapter={self.adapter.name!r}, "
            f"aggregations={[a.query_var for a in self.registry]!r})"
        )

    @property
    def aggregations(self) -> list[Aggregation]:
        return self.registry.all()

    # Setup

    def enable_empty_search(self) -> None:
        """Return every document, instead of nothing, for an empty phrase."""
        self.adapter.require(Feature.EMPTY_SEARCH)
        self.empty_search = True

    def configure(self, settings: Settings) -> None:
        """Register the aggregations listed in settings, in order."""
        for entry in settings.aggregations:
            self.add_aggregation(entry.type, **entry.options())

    def add_aggregation(
        self, type_: str | AggregationType, **options: Any
    ) -> Aggregation:
        """Create an aggregation and register it.

        Raises:
            UnsupportedFeatureError: If the adapter does not do aggregations
            ConfigurationError: If the type or options are invalid
        """
        self.adapter.require(Feature.AGGREGATIONS)
        aggregation = create_aggregation(type_, self.dsl, self.collaborators, **options)
        logger.debug(
            f"Registered {aggregation.type.value} aggregation {aggregation.query_var!r}"
        )
        return self.registry.add(aggregation)

    def add_term_aggregation(
        self, query_var: str, term_field: str, **options: Any
    ) -> Aggregation:
        return self.add_aggregation(
            AggregationType.TERM, query_var=query_var, term_field=term_field, **options
        )

    def add_taxonomy_aggregation(self, taxonomy: str, **options: Any) -> Aggregation:
        return self.add_aggregation(
            AggregationType.TAXONOMY, taxonomy=taxonomy, **options
        )

    def add_cap_author_aggregation(self, **options: Any) -> Aggregation:
        return self.add_aggregation(AggregationType.CAP_AUTHOR, **options)

    def add_post_type_aggregation(self, **options: Any) -> Aggregation:
        return self.add_aggregation(AggregationType.POST_TYPE, **options)

    def add_post_meta_aggregation(
        self, meta_key: str, data_type: str = "", **options: Any
    ) -> Aggregation:
        return self.add_aggregation(
            AggregationType.POST_META,
            meta_key=meta_key,
            data_type=data_type,
            **options,
        )

    def add_post_date_aggregation(
        self, interval: str = "year", **options: Any
    ) -> Aggregation:
        return self.add_aggregation(
            AggregationType.POST_DATE, interval=interval, **options
        )

    def add_relative_date_aggregation(
        self, offsets: Sequence[int] | None = None, **options: Any
    ) -> Aggregation:
        return self.add_aggregation(
            AggregationType.RELATIVE_DATE, offsets=offsets, **options
        )

    def add_custom_date_range_aggregation(self, **options: Any) -> Aggregation:
        return self.add_aggregation(AggregationType.CUSTOM_DATE_RANGE, **options)

    # Compilation

    def bind(self, params: RefinementParams) -> None:
        """Read the selections of every aggregation from the request."""
        self.params = params
        self.registry.bind(params)

    def compile(
        self, aggregation: Aggregation | str, params: RefinementParams | None = None
    ) -> CompiledAggregation:
        """Bind one aggregation and get the DSL it contributes.

        Args:
            aggregation: Aggregation, or the query var of a registered one
            params: Request parameters (default: the last bound ones)

        Returns:
            Aggregation request and filter clauses

        Raises:
            KeyError: If no aggregation is registered under the query var
        """
        if isinstance(aggregation, str):
            found = self.registry.get_by_query_var(aggregation)
            if found is None:
                raise KeyError(f"No aggregation registered as {aggregation!r}")
            aggregation = found

        aggregation.bind(params if params is not None else self.params)
        return CompiledAggregation(
            request=aggregation.request(), filters=aggregation.filter()
        )

    def apply(self, body: Mapping[str, Any]) -> dict[str, Any]:
        """Merge aggregation requests and filters into a request body.

        Filters go into ``query.bool.filter``, or into
        ``query.function_score.query.bool.filter`` when the query is wrapped
        in a ``function_score``. A query that is not a ``bool`` is moved
        into ``bool.must`` first. The input is not modified.

        Args:
            body: Request body with an optional ``query``

        Returns:
            New request body
        """
        result = copy.deepcopy(dict(body))

        aggs = self.registry.requests()
        if aggs:
            result.setdefault("aggs", {}).update(aggs)

        filters = self.registry.filters()
        if filters:
            parent, key = result, "query"
            query = result.get("query")
            if isinstance(query, dict) and "function_score" in query:
                parent, key = query["function_score"], "query"
            bool_query = _bool_query(parent, key)
            existing = bool_query.get("filter", [])
            if isinstance(existing, dict):
                existing = [existing]
            bool_query["filter"] = list(existing) + filters

        return result

    def build_body(
        self,
        search_text: str = "",
        offset: int = 0,
        size: int = 10,
        source: list[str] | bool | None = None,
    ) -> dict[str, Any] | None:
        """Build a complete search request body.

        Args:
            search_text: Free-text phrase
            offset: Index of the first hit
            size: Number of hits
            source: ``_source`` setting, omitted when None

        Returns:
            Request body, or None for an empty phrase when empty search is
            not enabled, leaving the host to its own behaviour
        """
        text = search_text.strip()
        if text:
            query = self.dsl.search_query(text, self.settings.search_fields)
        elif self.empty_search:
            query = self.dsl.match_all()
        else:
            logger.debug("Empty search phrase and empty search disabled")
            return None

        body: dict[str, Any] = {"query": query, "from": offset, "size": size}
        if source is not None:
            body["_source"] = source
        return self.apply(body)

    def encode(self, body: Mapping[str, Any]) -> bytes:
        return msgspec.json.encode(body)

    # Response

    def parse_response(
        self, response: Mapping[str, Any] | bytes | str
    ) -> list[Aggregation]:
        """Parse the aggregations of a search response into buckets.

        Args:
            response: Decoded response, or its raw JSON

        Returns:
            Registered aggregations, in configuration order

        Raises:
            msgspec.DecodeError: If raw JSON cannot be decoded
        """
        if isinstance(response, bytes | str):
            response = msgspec.json.decode(response)
        if not isinstance(response, Mapping):
            logger.warning("Ignoring response that is not a JSON object")
            return self.aggregations

        self.registry.parse(response.get("aggregations"))
        return self.aggregations


def _bool_query(parent: dict[str, Any], key: str) -> dict[str, Any]:
    """Get the ``bool`` object at ``parent[key]``, wrapping as needed."""
    query = parent.get(key)
    if not query:
        parent[key] = {"bool": {}}
    elif "bool" not in query:
        parent[key] = {"bool": {"must": [query]}}
    return parent[key]["bool"]
