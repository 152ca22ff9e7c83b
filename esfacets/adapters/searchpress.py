"""SearchPress adapter."""

from ..fields import SEARCHPRESS_FIELD_MAP
from .base import Adapter, Feature


class SearchPressAdapter(Adapter):
    name = "searchpress"

    def field_table(self) -> dict[str, str]:
        return dict(SEARCHPRESS_FIELD_MAP)

    def supports(self) -> frozenset[Feature]:
        return frozenset({Feature.AGGREGATIONS, Feature.EMPTY_SEARCH})
