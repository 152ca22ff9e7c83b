"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timezone

import pytest

from esfacets.collaborators import (
    Collaborators,
    PostType,
    StaticPostTypeResolver,
    StaticTermResolver,
)
from esfacets.dsl import DSL
from esfacets.fields import (
    SEARCHPRESS_FIELD_MAP,
    VIP_ENTERPRISE_SEARCH_FIELD_MAP,
    FieldMap,
)
from esfacets.request import RefinementParams


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Isolate environment variables for each test."""
    original_env = os.environ.copy()
    monkeypatch.delenv("ESFACETS_ADAPTER", raising=False)
    monkeypatch.delenv("ESFACETS_TIMEZONE", raising=False)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def searchpress_map():
    """SearchPress field map."""
    return FieldMap(SEARCHPRESS_FIELD_MAP, name="searchpress")


@pytest.fixture
def vip_map():
    """VIP Enterprise Search field map."""
    return FieldMap(VIP_ENTERPRISE_SEARCH_FIELD_MAP, name="vip")


@pytest.fixture
def dsl(searchpress_map):
    """DSL builder bound to the SearchPress field map."""
    return DSL(searchpress_map)


@pytest.fixture
def generic_dsl():
    """DSL builder with an empty field map."""
    return DSL()


@pytest.fixture
def term_resolver():
    """Term lookup with a few categories, tags and authors."""
    return StaticTermResolver(
        {
            "category": {"news": "News", "sports": "Sports", "opinion": "Opinion"},
            "post_tag": {"elections": "Elections"},
            "author": {"jane-doe": "Jane Doe", "john-roe": "John Roe"},
            "genre": {"jazz": "Jazz", "blues": "Blues"},
        }
    )


@pytest.fixture
def post_type_resolver():
    """Post type lookup where attachments are excluded from search."""
    return StaticPostTypeResolver(
        {
            "post": PostType(slug="post", singular_name="Post"),
            "page": PostType(slug="page", singular_name="Page"),
            "attachment": PostType(
                slug="attachment", singular_name="Media", searchable=False
            ),
        }
    )


@pytest.fixture
def collaborators(term_resolver, post_type_resolver):
    """Host services for a site in UTC."""
    return Collaborators(
        terms=term_resolver, post_types=post_type_resolver, timezone=timezone.utc
    )


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-03-15 10:30 in whatever timezone is asked for."""

    def clock(tz):
        return datetime(2024, 3, 15, 10, 30, tzinfo=tz)

    return clock


@pytest.fixture
def make_params():
    """Build refinement parameters from keyword arguments."""

    def _make(**values):
        return RefinementParams.from_mapping(values)

    return _make
