"""Configuration loading and validation.

Settings live in YAML files. Values from every default location are deep
merged (later paths win), environment variables override them, and the
result is validated into ``Settings``.

Example::

    adapter: searchpress
    timezone: America/New_York
    empty_search: true
    aggregations:
      - type: post_type
      - type: taxonomy
        taxonomy: category
        logic: OR
      - type: post_meta
        meta_key: event_year
        data_type: long
    lookups:
      terms:
        category: {news: News, sports: Sports}
      post_types:
        post: {singular_name: Post}
        page: {singular_name: Page, searchable: false}
"""

import os
from datetime import tzinfo
from pathlib import Path
from typing import Any

import msgspec
import yaml
from dateutil import tz

from .collaborators import (
    Collaborators,
    PostType,
    StaticPostTypeResolver,
    StaticTermResolver,
)
from .exceptions import ConfigurationError


class AggregationSettings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """One configured aggregation. Unset options keep the variant defaults."""

    type: str
    query_var: str | None = None
    label: str | None = None
    logic: str | None = None
    term_field: str | None = None
    count: int | None = None
    order_by: str | None = None
    order: str | None = None
    taxonomy: str | None = None
    meta_key: str | None = None
    data_type: str | None = None
    interval: str | None = None
    offsets: list[int] | None = None

    def options(self) -> dict[str, Any]:
        """Get constructor options, skipping unset values."""
        data = msgspec.structs.asdict(self)
        data.pop("type")
        return {key: value for key, value in data.items() if value is not None}


class PostTypeSettings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    singular_name: str
    searchable: bool = True


class LookupSettings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Static lookup tables standing in for the host's term and post type
    services."""

    terms: dict[str, dict[str, str]] = msgspec.field(default_factory=dict)
    post_types: dict[str, PostTypeSettings] = msgspec.field(default_factory=dict)


class Settings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    adapter: str = "searchpress"
    timezone: str = "UTC"
    empty_search: bool = False
    search_fields: list[str] | None = None
    aggregations: list[AggregationSettings] = msgspec.field(default_factory=list)
    lookups: LookupSettings = msgspec.field(default_factory=LookupSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Settings":
        """Validate a configuration mapping.

        Raises:
            ConfigurationError: If the mapping does not describe valid settings
        """
        try:
            settings = msgspec.convert(data or {}, cls)
        except msgspec.ValidationError as e:
            raise ConfigurationError(str(e))
        settings.tzinfo()
        return settings

    def tzinfo(self) -> tzinfo:
        """Resolve the configured site timezone."""
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ConfigurationError(f"unknown timezone {self.timezone!r}", "timezone")
        return zone

    def collaborators(self) -> Collaborators:
        """Build dictionary-backed host services from the lookup tables."""
        post_types = {
            slug: PostType(
                slug=slug,
                singular_name=entry.singular_name,
                searchable=entry.searchable,
            )
            for slug, entry in self.lookups.post_types.items()
        }
        return Collaborators(
            terms=StaticTermResolver(self.lookups.terms),
            post_types=StaticPostTypeResolver(post_types),
            timezone=self.tzinfo(),
        )


class Config:
    """Configuration file handling."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading config file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {path}")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths, lowest precedence first."""
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        return [
            xdg_config_home / "esfacets" / "config.yaml",
            Path(".esfacets.yaml"),
            Path("esfacets.yaml"),
        ]

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def env_overrides() -> dict[str, Any]:
    overrides = {}
    if adapter := os.environ.get("ESFACETS_ADAPTER"):
        overrides["adapter"] = adapter
    if timezone := os.environ.get("ESFACETS_TIMEZONE"):
        overrides["timezone"] = timezone
    return overrides


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from files and environment variables.

    Args:
        path: Explicit file; replaces the default lookup paths

    Returns:
        Merged configuration mapping
    """
    config: dict[str, Any] = {}
    paths = [path] if path else Config.get_config_paths()
    for candidate in paths:
        if path or candidate.exists():
            config = Config.merge_configs(config, Config.from_file(candidate))
    return Config.merge_configs(config, env_overrides())


def load_settings(path: Path | None = None) -> Settings:
    return Settings.from_dict(load_config(path))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
