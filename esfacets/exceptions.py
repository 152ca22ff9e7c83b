"""Exception classes for the facets package.

Nothing raised here happens while compiling or parsing a single request:
lookup misses, malformed dates and unknown fields all degrade to fewer
refinement options. These errors are for setup-time problems.
"""


class FacetError(Exception):
    """Base exception for facet-related errors."""

    pass


class ConfigurationError(FacetError, ValueError):
    """Raised when settings or aggregation options are invalid."""

    def __init__(self, message: str, field: str | None = None):
        """Initialize with message and optional offending field."""
        self.field = field
        if field:
            message = f"Invalid configuration for {field}: {message}"
        super().__init__(message)


class InvalidFeatureError(FacetError, ValueError):
    """Raised when an unknown feature name is requested."""

    def __init__(self, feature: str):
        """Initialize with feature name."""
        self.feature = feature
        super().__init__(f"Unknown feature: {feature}")


class UnsupportedFeatureError(FacetError):
    """Raised when a feature is not supported by the active adapter."""

    def __init__(self, feature: str, adapter: str):
        """Initialize with feature and adapter names."""
        self.feature = feature
        self.adapter = adapter
        super().__init__(f"Feature '{feature}' is not supported by adapter '{adapter}'")
