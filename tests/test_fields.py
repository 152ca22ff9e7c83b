"""Tests for field maps."""

import pytest

from esfacets.fields import (
    META_DATA_TYPES,
    SEARCHPRESS_FIELD_MAP,
    VIP_ENTERPRISE_SEARCH_FIELD_MAP,
    FieldMap,
    substitute,
)


class TestFieldMapLookup:
    """Test plain key lookups."""

    def test_mapped_key(self, searchpress_map):
        """Test that a known key returns its backend path."""
        assert searchpress_map.map("post_title") == "post_title.raw"
        assert searchpress_map.map("post_title.analyzed") == "post_title"
        assert searchpress_map.map("post_type") == "post_type.raw"

    @pytest.mark.parametrize(
        "key", ["custom_field", "post_meta.unknown_type", "", "terms.genre.slug"]
    )
    def test_unmapped_key_returns_itself(self, searchpress_map, vip_map, key):
        """Test identity fallback for keys missing from the table."""
        assert searchpress_map.map(key) == key
        assert vip_map.map(key) == key
        assert FieldMap().map(key) == key

    def test_backends_differ(self, searchpress_map, vip_map):
        """Test that the same generic key maps differently per backend."""
        assert searchpress_map.map("post_author") == "post_author.user_id"
        assert vip_map.map("post_author") == "post_author.id"
        assert searchpress_map.map("post_date") == "post_date.date"
        assert vip_map.map("post_date") == "post_date"

    def test_date_parts(self, searchpress_map, vip_map):
        """Test expanded date part keys."""
        assert searchpress_map.map("post_date.year") == "post_date.year"
        assert vip_map.map("post_date.year") == "date_terms.year"
        assert vip_map.map("post_date.day_of_week") == "date_terms.day_of_week"

    def test_map_is_immutable(self, searchpress_map):
        """Test that the table cannot be changed after construction."""
        with pytest.raises(TypeError):
            searchpress_map.fields["post_title"] = "title"  # type: ignore[index]

    def test_source_dict_changes_do_not_leak(self):
        """Test that the map copies its input."""
        source = {"post_title": "title"}
        field_map = FieldMap(source)
        source["post_title"] = "changed"

        assert field_map.map("post_title") == "title"

    def test_container_protocol(self, searchpress_map):
        """Test membership, length and repr."""
        assert "post_title" in searchpress_map
        assert "nope" not in searchpress_map
        assert len(searchpress_map) == len(SEARCHPRESS_FIELD_MAP)
        assert "searchpress" in repr(searchpress_map)


class TestMetaMapping:
    """Test post meta field mapping."""

    def test_untyped_meta(self, searchpress_map, vip_map):
        """Test the generic meta template."""
        assert searchpress_map.map_meta("color") == "post_meta.color.raw"
        assert vip_map.map_meta("color") == "meta.color.raw"

    @pytest.mark.parametrize("data_type", META_DATA_TYPES)
    def test_typed_meta(self, searchpress_map, vip_map, data_type):
        """Test every declared data type has a template in both tables."""
        assert (
            searchpress_map.map_meta("event_year", data_type)
            == f"post_meta.event_year.{data_type}"
        )
        assert vip_map.map_meta("event_year", data_type) == (
            f"meta.event_year.{data_type}"
        )

    def test_meta_aliases(self, searchpress_map):
        """Test legacy type names."""
        assert searchpress_map.map_meta("flag", "binary") == "post_meta.flag.boolean"
        assert searchpress_map.map_meta("n", "unsigned") == "post_meta.n.long"
        assert searchpress_map.map_meta("alt", "analyzed") == "post_meta.alt.value"

    def test_meta_without_table(self):
        """Test an empty map returns the template key, which has no placeholder."""
        assert FieldMap().map_meta("color", "long") == "post_meta.long"
        assert FieldMap().map_meta("color") == "post_meta"


class TestTaxonomyMapping:
    """Test taxonomy field mapping."""

    def test_category_uses_dedicated_keys(self, searchpress_map):
        """Test that term_ becomes category_ before lookup."""
        assert searchpress_map.map_taxonomy("category", "term_slug") == (
            "terms.category.slug"
        )
        assert searchpress_map.map_taxonomy("category", "term_id") == (
            "terms.category.term_id"
        )

    def test_post_tag_uses_dedicated_keys(self, searchpress_map):
        """Test that term_ becomes tag_ before lookup."""
        assert searchpress_map.map_taxonomy("post_tag", "term_name") == (
            "terms.post_tag.name.raw"
        )

    def test_custom_taxonomy_substitutes_name(self, searchpress_map, vip_map):
        """Test the generic term_ template with the taxonomy name filled in."""
        assert searchpress_map.map_taxonomy("genre", "term_slug") == "terms.genre.slug"
        assert vip_map.map_taxonomy("genre", "term_name.analyzed") == "terms.genre.name"

    def test_non_term_field_is_not_rewritten(self, searchpress_map):
        """Test that only the term_ prefix is rewritten."""
        assert searchpress_map.map_taxonomy("category", "post_title") == (
            "post_title.raw"
        )

    def test_taxonomy_without_table(self):
        """Test an empty map leaves the generic key as is."""
        assert FieldMap().map_taxonomy("genre", "term_slug") == "term_slug"
        assert FieldMap().map_taxonomy("category", "term_slug") == "category_slug"


class TestSubstitute:
    """Test placeholder substitution."""

    def test_substitute_placeholder(self):
        """Test that the placeholder receives the value."""
        assert substitute("terms.%s.slug", "genre") == "terms.genre.slug"

    def test_template_without_placeholder(self):
        """Test that a template without placeholder is returned unchanged."""
        assert substitute("post_type.raw", "genre") == "post_type.raw"


class TestFieldTables:
    """Test the built-in tables."""

    def test_tables_cover_same_core_keys(self):
        """Test that both backends map the keys the aggregations rely on."""
        for key in ("post_type", "post_date", "term_slug", "post_meta", "post_excerpt"):
            assert key in SEARCHPRESS_FIELD_MAP
            assert key in VIP_ENTERPRISE_SEARCH_FIELD_MAP

    def test_templates_have_at_most_one_placeholder(self):
        """Test that no template needs two substitutions."""
        for table in (SEARCHPRESS_FIELD_MAP, VIP_ENTERPRISE_SEARCH_FIELD_MAP):
            for path in table.values():
                assert path.count("%s") <= 1
