"""Reading refinement selections from the incoming request.

Selections arrive namespaced under ``fs``, one sequence-valued parameter per
aggregation query var::

    fs[post_type][]=post&fs[post_type][]=page&fs[custom_date_range_from]=...

Nothing here touches ambient request state; the host hands the query string
(or an already decoded mapping) to ``RefinementParams`` explicitly.
"""

import re
from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl

NAMESPACE = "fs"

_PARAM_PATTERN = re.compile(rf"^{NAMESPACE}\[([^\]]+)\](?:\[[^\]]*\])?$")


class RefinementParams:
    """Refinement parameters for one request, keyed by query var."""

    def __init__(self, values: Mapping[str, Iterable[str]] | None = None):
        """Initialize with a mapping of query var to raw values."""
        self._values: dict[str, list[str]] = {
            key: [str(v) for v in vals] for key, vals in (values or {}).items()
        }

    @classmethod
    def from_query_string(cls, query_string: str) -> "RefinementParams":
        """Parse a URL query string, keeping only ``fs[...]`` parameters.

        Args:
            query_string: Raw query string, with or without a leading ``?``

        Returns:
            Parsed parameters
        """
        values: dict[str, list[str]] = {}
        for name, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
            match = _PARAM_PATTERN.match(name)
            if match:
                values.setdefault(match.group(1), []).append(value)
        return cls(values)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, str | Iterable[str] | None]
    ) -> "RefinementParams":
        """Build from a decoded mapping where values may be scalars or lists."""
        values: dict[str, list[str]] = {}
        for key, value in data.items():
            if isinstance(value, str):
                values[key] = [value]
            elif value is None:
                values[key] = []
            else:
                values[key] = list(value)
        return cls(values)

    def __contains__(self, query_var: object) -> bool:
        return query_var in self._values

    def __repr__(self) -> str:
        return f"RefinementParams({self._values!r})"

    def keys(self) -> list[str]:
        return list(self._values)

    def values(self, query_var: str) -> list[str]:
        """Get the raw values for a query var (empty if absent)."""
        return list(self._values.get(query_var, []))

    def value(self, query_var: str, default: str = "") -> str:
        """Get the first value for a query var, for scalar parameters."""
        values = self._values.get(query_var)
        return values[0] if values else default
