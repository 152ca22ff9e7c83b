"""CLI test fixtures."""

import json

import pytest
import yaml
from click.testing import CliRunner


@pytest.fixture
def cli_runner(monkeypatch, tmp_path):
    """Click runner isolated from user and project configuration files."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)

    class EsFacetsCliRunner(CliRunner):
        def invoke(self, args, **kwargs):  # type: ignore[override]
            from esfacets.cli.main import cli

            if isinstance(args, list):
                return super().invoke(cli, args, **kwargs)
            return super().invoke(args, **kwargs)

    return EsFacetsCliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Configuration with category and post type aggregations."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "adapter": "searchpress",
                "aggregations": [
                    {"type": "post_type"},
                    {"type": "taxonomy", "taxonomy": "category"},
                ],
                "lookups": {
                    "terms": {"category": {"news": "News", "sports": "Sports"}},
                    "post_types": {"post": {"singular_name": "Post"}},
                },
            }
        )
    )
    return path


@pytest.fixture
def response_file(tmp_path):
    """Search response with buckets for both aggregations."""
    path = tmp_path / "response.json"
    path.write_text(
        json.dumps(
            {
                "aggregations": {
                    "post_type": {"buckets": [{"key": "post", "doc_count": 7}]},
                    "taxonomy_category": {
                        "buckets": [
                            {"key": "news", "doc_count": 5},
                            {"key": "gone", "doc_count": 1},
                        ]
                    },
                }
            }
        )
    )
    return path
