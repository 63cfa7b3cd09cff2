"""
Unit tests for the attribute catalog resolver
"""

import pytest

from variant_engine.models.attribute import AttributeDefinition, AttributeOrigin
from variant_engine.services.attribute_catalog_service import (
    AttributeCatalogResolver,
    resolve_catalog,
)


@pytest.fixture
def resolver():
    """Resolver instance"""
    return AttributeCatalogResolver()


class TestResolve:
    """Test resolve method"""

    def test_brand_excluded(self, resolver, category_attributes):
        """Test brand from the category never reaches the catalog"""
        catalog = resolver.resolve(category_attributes, [])
        assert catalog.names() == ["Color", "Size"]

    def test_predefined_before_custom(self, resolver, category_attributes):
        """Test custom attributes follow category attributes in insertion order"""
        catalog = resolver.resolve(category_attributes, ["Material", "Pattern"])

        assert catalog.names() == ["Color", "Size", "Material", "Pattern"]
        assert [a.origin for a in catalog.attributes] == [
            AttributeOrigin.PREDEFINED,
            AttributeOrigin.PREDEFINED,
            AttributeOrigin.CUSTOM,
            AttributeOrigin.CUSTOM,
        ]

    def test_custom_brand_excluded(self, resolver):
        catalog = resolver.resolve([], ["BRAND", "Material"])
        assert catalog.names() == ["Material"]

    def test_custom_duplicates_of_predefined_dropped(self, resolver, category_attributes):
        """Test custom names already in the category are de-duplicated ignoring case"""
        catalog = resolver.resolve(category_attributes, ["color", "Material", "MATERIAL"])
        assert catalog.names() == ["Color", "Size", "Material"]

    def test_string_category_attributes(self, resolver):
        """Test plain names are accepted as category attributes"""
        catalog = resolver.resolve(["Color", "Size"], [])
        assert catalog.names() == ["Color", "Size"]
        assert catalog.attributes[0].origin == AttributeOrigin.PREDEFINED

    def test_empty_inputs(self, resolver):
        assert len(resolver.resolve([], [])) == 0
        assert len(resolver.resolve(None, None)) == 0

    def test_inputs_not_mutated(self, resolver, category_attributes):
        """Test resolve is side-effect free"""
        custom = ["Material"]
        resolver.resolve(category_attributes, custom)
        assert custom == ["Material"]
        assert len(category_attributes) == 3

    def test_module_shortcut(self, category_attributes):
        assert resolve_catalog(category_attributes, ["Fit"]).names() == ["Color", "Size", "Fit"]


class TestAddCustomAttribute:
    """Test add_custom_attribute guard"""

    def test_adds_trimmed_name(self, resolver):
        assert resolver.add_custom_attribute(["Material"], "  Pattern ") == ["Material", "Pattern"]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_is_noop(self, resolver, name):
        """Test blank names are silently rejected"""
        assert resolver.add_custom_attribute(["Material"], name) == ["Material"]

    @pytest.mark.parametrize("name", ["brand", "Brand", " BRAND "])
    def test_reserved_is_noop(self, resolver, name):
        assert resolver.add_custom_attribute([], name) == []

    def test_duplicate_custom_is_noop(self, resolver):
        """Test duplicates are detected ignoring case"""
        assert resolver.add_custom_attribute(["Material"], "material") == ["Material"]

    def test_duplicate_of_predefined_is_noop(self, resolver, category_attributes):
        assert resolver.add_custom_attribute([], "size", category_attributes) == []

    def test_does_not_mutate_input(self, resolver):
        custom = ["Material"]
        resolver.add_custom_attribute(custom, "Pattern")
        assert custom == ["Material"]


class TestRemoveCustomAttribute:
    """Test remove_custom_attribute"""

    def test_removes_ignoring_case(self, resolver):
        assert resolver.remove_custom_attribute(["Material", "Pattern"], "material") == ["Pattern"]

    def test_absent_is_noop(self, resolver):
        assert resolver.remove_custom_attribute(["Material"], "Fit") == ["Material"]

    def test_definition_input_for_category(self, resolver):
        """Test predefined attributes can be passed as definitions"""
        result = resolver.add_custom_attribute(
            [], "Fit", [AttributeDefinition(name="Color")]
        )
        assert result == ["Fit"]
