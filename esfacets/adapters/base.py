"""Backend adapter interface and the optional features adapters declare."""

from abc import ABC, abstractmethod
from enum import Enum

from ..exceptions import InvalidFeatureError, UnsupportedFeatureError
from ..fields import FieldMap


class Feature(str, Enum):
    """Optional behaviours an adapter may support."""

    AGGREGATIONS = "aggregations"
    EMPTY_SEARCH = "empty_search"  # match_all body for an empty search phrase
    SEARCH_SUGGESTIONS = "search_suggestions"

    @classmethod
    def parse(cls, value: "str | Feature") -> "Feature":
        """Convert a feature name to ``Feature``.

        Raises:
            InvalidFeatureError: If no feature has that name
        """
        if isinstance(value, Feature):
            return value
        try:
            return cls(value.strip().lower().replace("-", "_"))
        except ValueError:
            raise InvalidFeatureError(value)


class Adapter(ABC):
    """One backend integration: its field schema and supported features."""

    name: str = ""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    @abstractmethod
    def field_table(self) -> dict[str, str]:
        """Get the generic key to path template table."""
        pass

    @abstractmethod
    def supports(self) -> frozenset[Feature]:
        """Get the features this backend integration supports."""
        pass

    def field_map(self) -> FieldMap:
        return FieldMap(self.field_table(), name=self.name)

    def is_supported(self, feature: "str | Feature") -> bool:
        return Feature.parse(feature) in self.supports()

    def require(self, feature: "str | Feature") -> Feature:
        """Ensure a feature is supported.

        Raises:
            InvalidFeatureError: If the feature name is unknown
            UnsupportedFeatureError: If this adapter does not support it
        """
        parsed = Feature.parse(feature)
        if parsed not in self.supports():
            raise UnsupportedFeatureError(parsed.value, self.name)
        return parsed
