"""Bucket models: parsed results and the raw response shapes they come from."""

from __future__ import annotations

import msgspec


class Bucket(msgspec.Struct):
    """One resolved, labeled, countable refinement option.

    ``key`` is the backend's machine identifier (term slug, post type slug,
    epoch-millis date key). ``label`` falls back to ``key``.
    """

    key: str
    count: int = 0
    label: str = ""
    selected: bool = False

    def __post_init__(self):
        if not self.label:
            self.label = self.key
        if self.count < 0:
            self.count = 0

    def __str__(self) -> str:
        return f"{self.label} ({self.count})"


class RawBucket(msgspec.Struct):
    """A bucket exactly as the backend returns it."""

    key: str | int | float
    doc_count: int = 0
    key_as_string: str | None = None


def normalize_key(key: str | int | float) -> str:
    """Convert a raw bucket key to the string form used for selection."""
    if isinstance(key, float) and key.is_integer():
        return str(int(key))
    return str(key)
