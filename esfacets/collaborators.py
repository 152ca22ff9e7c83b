"""Interfaces to host-system services consumed by aggregations.

The host content system owns taxonomies, post types and the site timezone.
Aggregations only need to look things up by slug, so they depend on the
small protocols below. Dictionary-backed implementations are provided for
configuration files, the CLI and tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Protocol, runtime_checkable

import msgspec


class Term(msgspec.Struct, frozen=True, kw_only=True):
    """A taxonomy term as seen by the aggregations."""

    slug: str
    name: str
    taxonomy: str = ""
    # Author terms only; empty when the host does not know them
    first_name: str = ""
    last_name: str = ""


class PostType(msgspec.Struct, frozen=True, kw_only=True):
    """A registered post type."""

    slug: str
    singular_name: str
    searchable: bool = True


@runtime_checkable
class TermResolver(Protocol):
    """Looks up taxonomy terms by slug."""

    def resolve_term(self, taxonomy: str, slug: str) -> Term | None: ...


@runtime_checkable
class PostTypeResolver(Protocol):
    """Looks up post types by slug."""

    def resolve_post_type(self, slug: str) -> PostType | None: ...


class StaticTermResolver:
    """Term resolver backed by a ``{taxonomy: {slug: name}}`` mapping."""

    def __init__(self, terms: Mapping[str, Mapping[str, str]] | None = None):
        self._terms: dict[str, dict[str, Term]] = {}
        for taxonomy, names in (terms or {}).items():
            for slug, name in names.items():
                self.add(taxonomy, slug, name)

    def add(
        self,
        taxonomy: str,
        slug: str,
        name: str,
        first_name: str = "",
        last_name: str = "",
    ) -> None:
        self._terms.setdefault(taxonomy, {})[slug] = Term(
            slug=slug,
            name=name,
            taxonomy=taxonomy,
            first_name=first_name,
            last_name=last_name,
        )

    def resolve_term(self, taxonomy: str, slug: str) -> Term | None:
        return self._terms.get(taxonomy, {}).get(slug)


class StaticPostTypeResolver:
    """Post type resolver backed by a ``{slug: PostType}`` mapping."""

    def __init__(self, post_types: Mapping[str, PostType] | None = None):
        self._post_types = dict(post_types or {})

    def add(self, post_type: PostType) -> None:
        self._post_types[post_type.slug] = post_type

    def resolve_post_type(self, slug: str) -> PostType | None:
        return self._post_types.get(slug)


@dataclass
class Collaborators:
    """Host services handed to a search context."""

    terms: TermResolver | None = None
    post_types: PostTypeResolver | None = None
    timezone: tzinfo = field(default=timezone.utc)
