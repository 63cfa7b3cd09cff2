"""
Unit tests for variant combination generation
"""

from decimal import Decimal

import pytest

from variant_engine.models.attribute import AttributeCatalog, AttributeDefinition
from variant_engine.models.variant import (
    AttributeOption,
    GenerationRequest,
    SkuContext,
    VariantStatus,
)
from variant_engine.services.combination_service import (
    CombinationGenerator,
    generate_variants,
)
from variant_engine.services.sku_service import SkuAssigner


@pytest.fixture
def generator(fixed_clock):
    """Generator with deterministic SKUs"""
    return CombinationGenerator(SkuAssigner(clock=fixed_clock))


def request_of(**options):
    return GenerationRequest(options=[
        AttributeOption(attribute_name=name, values=values)
        for name, values in options.items()
    ])


def pairs(variant):
    return [(a.key, a.value) for a in variant.attributes]


class TestGenerate:
    """Test generate method"""

    def test_color_size_matrix(self, generator, color_size_catalog):
        """Test 2 colors x 3 sizes produce 6 empty active variants"""
        request = request_of(Color=["Red", "Blue"], Size=["S", "M", "L"])

        variants = generator.generate(request, SkuContext(), None, color_size_catalog)

        assert len(variants) == 6
        for variant in variants:
            assert variant.stock == 0
            assert variant.price == Decimal("0")
            assert variant.discount == Decimal("0")
            assert variant.status == VariantStatus.ACTIVE
            assert variant.images == []
            assert variant.id is None
            assert variant.sku.startswith("UNK-UNK-")
            assert variant.sku.endswith("-2345")

    def test_combination_order(self, generator, color_size_catalog):
        """Test earlier attributes vary slowest"""
        request = request_of(Color=["Red", "Blue"], Size=["S", "M"])

        variants = generator.generate(request, SkuContext(), None, color_size_catalog)

        assert [pairs(v) for v in variants] == [
            [("Color", "Red"), ("Size", "S")],
            [("Color", "Red"), ("Size", "M")],
            [("Color", "Blue"), ("Size", "S")],
            [("Color", "Blue"), ("Size", "M")],
        ]

    def test_variant_segment_truncation_collides(self, generator, color_size_catalog):
        """Test combinations sharing a 3 character prefix share a variant segment"""
        request = request_of(Color=["Red", "Blue"], Size=["S", "M", "L"])
        variants = generator.generate(request, SkuContext(), None, color_size_catalog)
        segments = [v.sku.split("-")[2] for v in variants]
        assert segments == ["RED"] * 3 + ["BLU"] * 3

    def test_empty_attribute_skipped(self, generator, color_size_catalog):
        """Test an attribute without values does not annihilate the matrix"""
        request = request_of(Color=["Red", "Blue"], Size=[])

        variants = generator.generate(request, SkuContext(), None, color_size_catalog)

        assert [pairs(v) for v in variants] == [
            [("Color", "Red"), ("Size", "")],
            [("Color", "Blue"), ("Size", "")],
        ]

    def test_all_empty_gives_no_variants(self, generator, color_size_catalog):
        request = request_of(Color=[], Size=[])
        assert generator.generate(request, SkuContext(), None, color_size_catalog) == []

    def test_empty_request(self, generator):
        assert generator.generate(GenerationRequest(), SkuContext()) == []

    def test_catalog_order_wins(self, generator, color_size_catalog):
        """Test attributes follow the catalog, not the request order"""
        request = request_of(Size=["S"], Color=["Red"])

        variant = generator.generate(request, SkuContext(), None, color_size_catalog)[0]

        assert pairs(variant) == [("Color", "Red"), ("Size", "S")]
        assert variant.sku == "UNK-UNK-RED-2345"

    def test_request_order_without_catalog(self, generator):
        request = request_of(Size=["S"], Color=["Red"])
        variant = generator.generate(request, SkuContext())[0]
        assert pairs(variant) == [("Size", "S"), ("Color", "Red")]

    def test_catalog_attribute_missing_from_request(self, generator):
        """Test catalog attributes without a value default to empty"""
        catalog = AttributeCatalog(attributes=[
            AttributeDefinition(name="Color"), AttributeDefinition(name="Material"),
        ])
        variant = generator.generate(request_of(Color=["Red"]), SkuContext(), None, catalog)[0]
        assert pairs(variant) == [("Color", "Red"), ("Material", "")]

    def test_brand_option_ignored(self, generator):
        """Test a brand option neither multiplies nor appears"""
        request = request_of(Brand=["Acme", "Other"], Color=["Red"])
        variants = generator.generate(request, SkuContext())
        assert len(variants) == 1
        assert pairs(variants[0]) == [("Color", "Red")]

    def test_sku_context_used(self, generator, sku_context, color_size_catalog):
        request = request_of(Color=["Blue"], Size=["XL"])
        variant = generator.generate(request, sku_context, "shirts", color_size_catalog)[0]
        assert variant.sku == "e7b-SHI-BLU-2345"

    def test_module_shortcut(self):
        variants = generate_variants(request_of(Color=["Red", "Blue"]), SkuContext())
        assert len(variants) == 2


class TestCardinality:
    """Count equals the product of non-empty value list sizes"""

    @pytest.mark.parametrize("options,expected", [
        ({"Color": ["Red", "Blue"], "Size": ["S", "M", "L"]}, 6),
        ({"Color": ["Red"], "Size": ["S", "M"], "Fit": ["Slim", "Regular"]}, 4),
        ({"Color": ["Red", "Blue", "Green"], "Size": []}, 3),
        ({"Color": [], "Size": []}, 0),
        ({}, 0),
    ])
    def test_count(self, generator, options, expected):
        request = request_of(**options)
        assert generator.count_combinations(request) == expected
        assert len(generator.generate(request, SkuContext())) == expected


class TestNewBlankVariant:
    """Test single-append variant"""

    def test_blank_variant(self, generator, color_size_catalog):
        variant = generator.new_blank_variant(color_size_catalog)

        assert pairs(variant) == [("Color", ""), ("Size", "")]
        assert variant.sku == ""
        assert variant.stock == 0
        assert variant.status == VariantStatus.ACTIVE
