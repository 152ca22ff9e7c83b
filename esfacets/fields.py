"""Field maps translating generic field keys into backend index paths.

Each backend integration indexes the same content under different physical
paths. A field map is the single table that absorbs those differences, so
the DSL builder can be written once against generic keys such as
``post_title``, ``term_slug`` or ``post_meta.long``. Templates may contain
one ``%s`` placeholder that receives a taxonomy name or meta key.
"""

from collections.abc import Mapping
from types import MappingProxyType

PLACEHOLDER = "%s"

# Taxonomies with dedicated keys in every field map.
BUILTIN_TAXONOMY_PREFIXES = {
    "category": "category_",
    "post_tag": "tag_",
}

META_DATA_TYPES = ("boolean", "long", "double", "date", "datetime", "time")

_DATE_PARTS = (
    "year",
    "month",
    "week",
    "day",
    "day_of_week",
    "day_of_year",
    "hour",
    "minute",
    "second",
)


def _date_parts(key: str, prefix: str) -> dict[str, str]:
    return {f"{key}.{part}": f"{prefix}.{part}" for part in _DATE_PARTS}


class FieldMap:
    """Immutable lookup table from generic keys to backend paths.

    Unmapped keys are returned unchanged. Sites frequently query fields
    that no table knows about, and a literal field name is the most useful
    thing to send in that case.
    """

    def __init__(self, fields: Mapping[str, str] | None = None, name: str = ""):
        """Initialize field map.

        Args:
            fields: Generic key to path template mapping
            name: Optional name of the backend the map belongs to
        """
        self._fields = MappingProxyType(dict(fields or {}))
        self.name = name

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldMap(name={self.name!r}, fields={len(self)})"

    @property
    def fields(self) -> Mapping[str, str]:
        """Read-only view of the underlying table."""
        return self._fields

    def map(self, key: str) -> str:
        """Map a generic field key to its backend path.

        Args:
            key: Generic field key, e.g. ``post_title``

        Returns:
            The mapped path, or the key itself when unmapped
        """
        return self._fields.get(key, key)

    def map_meta(self, meta_key: str, data_type: str = "") -> str:
        """Map a post meta key, selecting the template by data type.

        Args:
            meta_key: Meta key to substitute into the template
            data_type: Optional declared type (``long``, ``date``, ...)

        Returns:
            The mapped meta field path
        """
        template = self.map(f"post_meta.{data_type}" if data_type else "post_meta")
        return substitute(template, meta_key)

    def map_taxonomy(self, taxonomy: str, field: str) -> str:
        """Map a taxonomy field, substituting the taxonomy name.

        ``category`` and ``post_tag`` have dedicated keys, so the generic
        ``term_`` prefix is rewritten (``term_slug`` becomes ``category_slug``
        or ``tag_slug``) before the lookup.

        Args:
            taxonomy: Taxonomy name, e.g. ``category``
            field: Generic term field, e.g. ``term_slug``

        Returns:
            The mapped taxonomy field path
        """
        prefix = BUILTIN_TAXONOMY_PREFIXES.get(taxonomy)
        if prefix and field.startswith("term_"):
            field = prefix + field[len("term_") :]
        return substitute(self.map(field), taxonomy)


def substitute(template: str, value: str) -> str:
    """Fill the single placeholder of a template, if it has one."""
    if PLACEHOLDER in template:
        return template.replace(PLACEHOLDER, value, 1)
    return template


SEARCHPRESS_FIELD_MAP: dict[str, str] = {
    "category_id": "terms.category.term_id",
    "category_name": "terms.category.name.raw",
    "category_name.analyzed": "terms.category.name",
    "category_slug": "terms.category.slug",
    # Not indexed by SearchPress by default.
    "category_tt_id": "terms.category.term_taxonomy_id",
    "comment_count": "comment_count",
    "menu_order": "menu_order",
    "post_author": "post_author.user_id",
    "post_author.display_name": "post_author.display_name",
    "post_author.user_nicename": "post_author.user_nicename",
    "post_content": "post_content",
    "post_content.analyzed": "post_content",
    "post_date": "post_date.date",
    **_date_parts("post_date", "post_date"),
    "post_date_gmt": "post_date_gmt.date",
    **_date_parts("post_date_gmt", "post_date_gmt"),
    "post_excerpt": "post_excerpt",
    "post_meta": "post_meta.%s.raw",
    "post_meta.analyzed": "post_meta.%s.value",
    "post_meta.binary": "post_meta.%s.boolean",
    "post_meta.boolean": "post_meta.%s.boolean",
    "post_meta.date": "post_meta.%s.date",
    "post_meta.datetime": "post_meta.%s.datetime",
    "post_meta.double": "post_meta.%s.double",
    "post_meta.long": "post_meta.%s.long",
    "post_meta.signed": "post_meta.%s.long",
    "post_meta.time": "post_meta.%s.time",
    "post_meta.unsigned": "post_meta.%s.long",
    "post_mime_type": "post_mime_type",
    "post_modified": "post_modified.date",
    **_date_parts("post_modified", "post_modified"),
    "post_modified_gmt": "post_modified_gmt.date",
    **_date_parts("post_modified_gmt", "post_modified_gmt"),
    "post_name": "post_name.raw",
    "post_parent": "post_parent",
    "post_password": "post_password",
    "post_title": "post_title.raw",
    "post_title.analyzed": "post_title",
    "post_type": "post_type.raw",
    "tag_id": "terms.post_tag.term_id",
    "tag_name": "terms.post_tag.name.raw",
    "tag_name.analyzed": "terms.post_tag.name",
    "tag_slug": "terms.post_tag.slug",
    # Not indexed by SearchPress by default.
    "tag_tt_id": "terms.post_tag.term_taxonomy_id",
    "term_id": "terms.%s.term_id",
    "term_name": "terms.%s.name.raw",
    "term_name.analyzed": "terms.%s.name",
    "term_slug": "terms.%s.slug",
    # Not indexed by SearchPress by default.
    "term_tt_id": "terms.%s.term_taxonomy_id",
}

VIP_ENTERPRISE_SEARCH_FIELD_MAP: dict[str, str] = {
    "category_id": "terms.category.term_id",
    "category_name": "terms.category.name.raw",
    "category_name.analyzed": "terms.category.name",
    "category_slug": "terms.category.slug",
    "category_tt_id": "terms.category.term_taxonomy_id",
    "comment_count": "comment_count",
    "menu_order": "menu_order",
    "post_author": "post_author.id",
    "post_author.display_name": "post_author.display_name",
    "post_author.user_nicename": "post_author.login",
    "post_content": "post_content",
    "post_content.analyzed": "post_content",
    "post_date": "post_date",
    **_date_parts("post_date", "date_terms"),
    "post_date_gmt": "post_date_gmt",
    "post_excerpt": "post_excerpt",
    "post_meta": "meta.%s.raw",
    "post_meta.analyzed": "meta.%s.value",
    "post_meta.binary": "meta.%s.boolean",
    "post_meta.boolean": "meta.%s.boolean",
    "post_meta.date": "meta.%s.date",
    "post_meta.datetime": "meta.%s.datetime",
    "post_meta.double": "meta.%s.double",
    "post_meta.long": "meta.%s.long",
    "post_meta.signed": "meta.%s.long",
    "post_meta.time": "meta.%s.time",
    "post_meta.unsigned": "meta.%s.long",
    "post_mime_type": "post_mime_type",
    "post_modified": "post_modified",
    "post_modified_gmt": "post_modified_gmt",
    "post_name": "post_name.raw",
    "post_parent": "post_parent",
    "post_password": "post_password",
    "post_status": "post_status",
    "post_title": "post_title.raw",
    "post_title.analyzed": "post_title",
    "post_type": "post_type.raw",
    "tag_id": "terms.post_tag.term_id",
    "tag_name": "terms.post_tag.name.raw",
    "tag_name.analyzed": "terms.post_tag.name",
    "tag_slug": "terms.post_tag.slug",
    "tag_tt_id": "terms.post_tag.term_taxonomy_id",
    "term_id": "terms.%s.term_id",
    "term_name": "terms.%s.name.raw",
    "term_name.analyzed": "terms.%s.name",
    "term_slug": "terms.%s.slug",
    "term_tt_id": "terms.%s.term_taxonomy_id",
}
