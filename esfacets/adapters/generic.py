"""Adapter for indexes that use the generic field names as-is."""

from .base import Adapter, Feature


class GenericAdapter(Adapter):
    """Empty field map: every generic key is its own index path."""

    name = "generic"

    def field_table(self) -> dict[str, str]:
        return {}

    def supports(self) -> frozenset[Feature]:
        return frozenset({Feature.AGGREGATIONS, Feature.EMPTY_SEARCH})
