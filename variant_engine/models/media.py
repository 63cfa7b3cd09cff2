"""
Variant media models
"""

from typing import Optional
from pydantic import BaseModel, Field


class RawImageInput(BaseModel):
    """An image as picked by the seller, before normalization."""
    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: Optional[str] = None  # image/jpeg, image/png, image/webp


class NormalizedImage(BaseModel):
    """Result of normalizing one image; passed through when compression failed."""
    filename: str
    content: bytes
    content_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    original_size: int = 0
    size: int = 0
    compressed: bool = False
    error: Optional[str] = None
