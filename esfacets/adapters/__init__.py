"""Backend adapters."""

from ..exceptions import ConfigurationError
from .base import Adapter, Feature
from .generic import GenericAdapter
from .searchpress import SearchPressAdapter
from .vip import VIPEnterpriseSearchAdapter

ADAPTERS: dict[str, type[Adapter]] = {
    SearchPressAdapter.name: SearchPressAdapter,
    VIPEnterpriseSearchAdapter.name: VIPEnterpriseSearchAdapter,
    GenericAdapter.name: GenericAdapter,
}

# Alternate spellings accepted in configuration.
_ALIASES = {
    "vip_enterprise_search": "vip",
    "vip-enterprise-search": "vip",
    "elasticpress": "vip",
}


def get_adapter(name: str) -> Adapter:
    """Create the adapter registered under ``name``.

    Raises:
        ConfigurationError: If no adapter has that name
    """
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    if key not in ADAPTERS:
        raise ConfigurationError(
            f"unknown adapter {name!r}, expected one of {', '.join(ADAPTERS)}",
            "adapter",
        )
    return ADAPTERS[key]()


__all__ = [
    "ADAPTERS",
    "Adapter",
    "Feature",
    "GenericAdapter",
    "SearchPressAdapter",
    "VIPEnterpriseSearchAdapter",
    "get_adapter",
]
