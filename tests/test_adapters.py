"""Tests for backend adapters and features."""

import pytest

from esfacets.adapters import (
    ADAPTERS,
    Feature,
    GenericAdapter,
    SearchPressAdapter,
    VIPEnterpriseSearchAdapter,
    get_adapter,
)
from esfacets.exceptions import (
    ConfigurationError,
    InvalidFeatureError,
    UnsupportedFeatureError,
)


class TestFeature:
    """Test feature names."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("aggregations", Feature.AGGREGATIONS),
            ("Empty-Search", Feature.EMPTY_SEARCH),
            (Feature.SEARCH_SUGGESTIONS, Feature.SEARCH_SUGGESTIONS),
        ],
    )
    def test_parse(self, name, expected):
        """Test accepted spellings."""
        assert Feature.parse(name) == expected

    def test_parse_unknown(self):
        """Test unknown names raise InvalidFeatureError."""
        with pytest.raises(InvalidFeatureError, match="Unknown feature: facets"):
            Feature.parse("facets")


class TestGetAdapter:
    """Test adapter lookup by name."""

    @pytest.mark.parametrize(
        ("name", "cls"),
        [
            ("searchpress", SearchPressAdapter),
            ("SearchPress", SearchPressAdapter),
            ("vip", VIPEnterpriseSearchAdapter),
            ("vip-enterprise-search", VIPEnterpriseSearchAdapter),
            ("generic", GenericAdapter),
        ],
    )
    def test_known(self, name, cls):
        """Test names and aliases."""
        assert isinstance(get_adapter(name), cls)

    def test_unknown(self):
        """Test unknown adapters are configuration errors."""
        with pytest.raises(ConfigurationError, match="unknown adapter"):
            get_adapter("solr")

    def test_registered_names(self):
        """Test every adapter is registered under its name."""
        for name, cls in ADAPTERS.items():
            assert cls.name == name


class TestAdapters:
    """Test field maps and supported features."""

    def test_field_maps(self):
        """Test each adapter builds its own named field map."""
        assert get_adapter("searchpress").field_map().map("post_author") == (
            "post_author.user_id"
        )
        assert get_adapter("vip").field_map().map("post_author") == "post_author.id"
        assert len(get_adapter("generic").field_map()) == 0
        assert get_adapter("vip").field_map().name == "vip"

    @pytest.mark.parametrize("name", list(ADAPTERS))
    def test_supported_features(self, name):
        """Test aggregations and empty search are available everywhere."""
        adapter = get_adapter(name)

        assert adapter.is_supported("aggregations")
        assert adapter.require(Feature.EMPTY_SEARCH) == Feature.EMPTY_SEARCH

    @pytest.mark.parametrize("name", list(ADAPTERS))
    def test_unsupported_feature(self, name):
        """Test requiring search suggestions fails with the adapter name."""
        adapter = get_adapter(name)

        assert not adapter.is_supported(Feature.SEARCH_SUGGESTIONS)
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            adapter.require("search_suggestions")
        assert exc_info.value.adapter == name
        assert exc_info.value.feature == "search_suggestions"

    def test_require_unknown_feature(self):
        """Test unknown feature names are reported as such."""
        with pytest.raises(InvalidFeatureError):
            get_adapter("generic").require("telepathy")
