"""Shared test fixtures"""
from io import BytesIO

import pytest
from PIL import Image

from variant_engine.models.attribute import (
    AttributeCatalog,
    AttributeDefinition,
    AttributeInstance,
    AttributeOrigin,
)
from variant_engine.models.media import RawImageInput
from variant_engine.models.variant import SkuContext, VariantRecord

FIXED_TIMESTAMP_MS = 1_700_000_012_345


@pytest.fixture
def fixed_clock():
    """Clock frozen at a timestamp ending in 2345"""
    return lambda: FIXED_TIMESTAMP_MS


@pytest.fixture
def color_size_catalog():
    """Catalog with Color and Size from the category"""
    return AttributeCatalog(attributes=[
        AttributeDefinition(name="Color"),
        AttributeDefinition(name="Size"),
    ])


@pytest.fixture
def category_attributes():
    """Attributes as supplied by the category source, brand included"""
    return [
        AttributeDefinition(name="Color"),
        AttributeDefinition(name="Brand"),
        AttributeDefinition(name="Size"),
    ]


@pytest.fixture
def custom_catalog():
    """Catalog with one predefined and one custom attribute"""
    return AttributeCatalog(attributes=[
        AttributeDefinition(name="Color"),
        AttributeDefinition(name="Material", origin=AttributeOrigin.CUSTOM),
    ])


@pytest.fixture
def sku_context():
    """Seller and category context"""
    return SkuContext(seller_id="seller-64f1a9c2e7b", category_code="shirts")


@pytest.fixture
def red_variant():
    """Variant with only Color filled in"""
    return VariantRecord(
        attributes=[AttributeInstance(key="Color", value="Red")],
        price="19.99",
        stock=5,
        sku="C2E-SHI-RED-1234",
    )


def make_image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """Encode a solid-color test image"""
    color = (200, 30, 30, 255) if mode == "RGBA" else (200, 30, 30)
    image = Image.new(mode, (width, height), color)
    buf = BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def image_factory():
    """Builds RawImageInput objects of a given size and format"""
    def _make(filename, width, height, fmt="PNG", mode="RGB"):
        return RawImageInput(
            filename=filename,
            content=make_image_bytes(width, height, fmt=fmt, mode=mode),
            content_type=f"image/{fmt.lower()}",
        )
    return _make


@pytest.fixture
def large_png():
    """2000x1500 PNG image"""
    return RawImageInput(
        filename="front.png",
        content=make_image_bytes(2000, 1500),
        content_type="image/png",
    )


@pytest.fixture
def small_jpeg():
    """200x100 JPEG image"""
    return RawImageInput(
        filename="detail.jpg",
        content=make_image_bytes(200, 100, fmt="JPEG"),
        content_type="image/jpeg",
    )


@pytest.fixture
def broken_image():
    """Bytes that are not an image"""
    return RawImageInput(
        filename="broken.jpg",
        content=b"not really an image",
        content_type="image/jpeg",
    )
