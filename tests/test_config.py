"""Tests for configuration loading and validation."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest
import yaml

from esfacets.collaborators import PostType
from esfacets.config import (
    AggregationSettings,
    Config,
    Settings,
    load_config,
    load_settings,
)
from esfacets.exceptions import ConfigurationError


@pytest.fixture
def config_file(tmp_path):
    """Write a full configuration file."""
    path = tmp_path / "esfacets.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "adapter": "vip",
                "timezone": "America/New_York",
                "empty_search": True,
                "aggregations": [
                    {"type": "post_type"},
                    {"type": "taxonomy", "taxonomy": "category", "logic": "OR"},
                    {
                        "type": "post_meta",
                        "meta_key": "event_year",
                        "data_type": "long",
                    },
                ],
                "lookups": {
                    "terms": {"category": {"news": "News"}},
                    "post_types": {
                        "post": {"singular_name": "Post"},
                        "page": {"singular_name": "Page", "searchable": False},
                    },
                },
            }
        )
    )
    return path


class TestConfigFile:
    """Test reading YAML files."""

    def test_from_file(self, config_file):
        """Test a valid file loads as a mapping."""
        data = Config.from_file(config_file)
        assert data["adapter"] == "vip"

    def test_empty_file(self, tmp_path):
        """Test an empty file is an empty configuration."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.from_file(path) == {}

    def test_invalid_yaml(self, tmp_path):
        """Test YAML errors become configuration errors."""
        path = tmp_path / "bad.yaml"
        path.write_text("invalid: yaml: content:")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            Config.from_file(path)

    def test_not_a_mapping(self, tmp_path):
        """Test a top-level list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            Config.from_file(path)

    def test_missing_file(self, tmp_path):
        """Test unreadable files become configuration errors."""
        with pytest.raises(ConfigurationError, match="Error reading"):
            Config.from_file(tmp_path / "missing.yaml")

    def test_default_paths(self, monkeypatch, tmp_path):
        """Test XDG location comes first, then project files."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        paths = Config.get_config_paths()

        assert paths[0] == tmp_path / "esfacets" / "config.yaml"
        assert paths[1:] == [Path(".esfacets.yaml"), Path("esfacets.yaml")]

    def test_merge_configs(self):
        """Test nested dictionaries are deep merged, later wins."""
        merged = Config.merge_configs(
            {"adapter": "vip", "lookups": {"terms": {"category": {"a": "A"}}}},
            {"lookups": {"terms": {"post_tag": {"b": "B"}}}},
            {"adapter": "generic"},
        )

        assert merged == {
            "adapter": "generic",
            "lookups": {"terms": {"category": {"a": "A"}, "post_tag": {"b": "B"}}},
        }


class TestLoadConfig:
    """Test file precedence and environment overrides."""

    def test_default_locations_merged(self, monkeypatch, tmp_path):
        """Test project files override the user file."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        user_dir = tmp_path / "xdg" / "esfacets"
        user_dir.mkdir(parents=True)
        (user_dir / "config.yaml").write_text("adapter: vip\ntimezone: UTC\n")
        project = tmp_path / "project"
        project.mkdir()
        (project / "esfacets.yaml").write_text("adapter: generic\n")
        monkeypatch.chdir(project)

        assert load_config() == {"adapter": "generic", "timezone": "UTC"}

    def test_explicit_path_only(self, monkeypatch, tmp_path, config_file):
        """Test an explicit file replaces the default lookup."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".esfacets.yaml").write_text("adapter: generic\n")

        assert load_config(config_file)["adapter"] == "vip"

    def test_environment_override(self, monkeypatch, config_file):
        """Test ESFACETS_* variables win over files."""
        monkeypatch.setenv("ESFACETS_ADAPTER", "searchpress")
        monkeypatch.setenv("ESFACETS_TIMEZONE", "Europe/Oslo")

        config = load_config(config_file)
        assert config["adapter"] == "searchpress"
        assert config["timezone"] == "Europe/Oslo"

    def test_no_files(self, monkeypatch, tmp_path):
        """Test defaults apply when nothing is configured."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)

        assert load_settings() == Settings()


class TestSettings:
    """Test validation into settings."""

    def test_defaults(self):
        """Test built-in defaults."""
        settings = Settings.from_dict({})

        assert settings.adapter == "searchpress"
        assert settings.timezone == "UTC"
        assert settings.empty_search is False
        assert settings.aggregations == []

    def test_full_file(self, config_file):
        """Test a complete configuration validates."""
        settings = load_settings(config_file)

        assert settings.adapter == "vip"
        assert [a.type for a in settings.aggregations] == [
            "post_type",
            "taxonomy",
            "post_meta",
        ]
        assert settings.lookups.post_types["page"].searchable is False

    def test_unknown_field(self):
        """Test typos are reported rather than ignored."""
        with pytest.raises(ConfigurationError, match="adaptor"):
            Settings.from_dict({"adaptor": "vip"})

    def test_wrong_type(self):
        """Test type mismatches are reported."""
        with pytest.raises(ConfigurationError):
            Settings.from_dict({"aggregations": [{"type": "term", "count": "many"}]})

    def test_aggregation_requires_type(self):
        """Test every aggregation entry names its type."""
        with pytest.raises(ConfigurationError, match="type"):
            Settings.from_dict({"aggregations": [{"label": "Color"}]})

    def test_unknown_timezone(self):
        """Test timezones are checked at load time."""
        with pytest.raises(ConfigurationError, match="timezone"):
            Settings.from_dict({"timezone": "Mars/Olympus_Mons"})

    def test_aggregation_options(self):
        """Test unset options are left out."""
        entry = AggregationSettings(type="taxonomy", taxonomy="category", logic="OR")
        assert entry.options() == {"taxonomy": "category", "logic": "OR"}

    def test_collaborators(self, config_file):
        """Test lookup tables become resolvers and the timezone resolves."""
        collaborators = load_settings(config_file).collaborators()

        assert collaborators.terms.resolve_term("category", "news").name == "News"
        assert collaborators.terms.resolve_term("category", "gone") is None
        assert collaborators.post_types.resolve_post_type("page") == PostType(
            slug="page", singular_name="Page", searchable=False
        )
        summer = datetime(2024, 7, 1, tzinfo=collaborators.timezone)
        assert summer.utcoffset() == timedelta(hours=-4)
