"""VIP Enterprise Search (ElasticPress) adapter."""

from ..fields import VIP_ENTERPRISE_SEARCH_FIELD_MAP
from .base import Adapter, Feature


class VIPEnterpriseSearchAdapter(Adapter):
    name = "vip"

    def field_table(self) -> dict[str, str]:
        return dict(VIP_ENTERPRISE_SEARCH_FIELD_MAP)

    def supports(self) -> frozenset[Feature]:
        return frozenset({Feature.AGGREGATIONS, Feature.EMPTY_SEARCH})
