"""
Variant Media Service

Normalizes variant images (downscale + recompress) before they are handed to
the image storage collaborator.

Every image is compressed in its own task and the batch waits for all of them
to settle. An image whose compression fails is passed through unchanged, so
the output always has the same length and order as the input.
"""

import asyncio
from io import BytesIO
from typing import Callable, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

from PIL import Image

from variant_engine.core.config import config
from variant_engine.core.logger import logger
from variant_engine.models.media import NormalizedImage, RawImageInput

# (content) -> (compressed content, width, height)
Compressor = Callable[[bytes], Tuple[bytes, int, int]]


class VariantMediaPipeline:
    """
    Concurrent, failure tolerant image normalization.

    Supports:
    - Downscaling to fit max_width x max_height (aspect ratio kept)
    - Re-encoding with the configured quality (JPEG by default)
    - Pass-through of images that cannot be decoded or encoded
    """

    def __init__(
        self,
        max_width: Optional[int] = None,
        max_height: Optional[int] = None,
        quality: Optional[float] = None,
        output_format: Optional[str] = None,
        compressor: Optional[Compressor] = None,
    ):
        self.max_width = max_width or config.media_max_width
        self.max_height = max_height or config.media_max_height
        self.quality = quality or config.media_quality
        self.output_format = (output_format or config.media_output_format).upper()
        self._compressor = compressor or self.compress

    async def normalize(
        self,
        images: Sequence[RawImageInput],
        correlation_id: Optional[str] = None
    ) -> List[NormalizedImage]:
        """
        Normalize a batch of images.

        Args:
            images: Raw images in display order
            correlation_id: For logging

        Returns:
            One NormalizedImage per input, in input order
        """
        if not images:
            return []

        results = await asyncio.gather(
            *(self._normalize_one(image) for image in images),
            return_exceptions=True
        )

        normalized: List[NormalizedImage] = []
        failures = 0
        for image, result in zip(images, results):
            if isinstance(result, BaseException):
                failures += 1
                logger.warning(
                    f"Image compression failed, keeping original: {image.filename}",
                    correlation_id=correlation_id,
                    error=result,
                    metadata={"filename": image.filename}
                )
                normalized.append(self._pass_through(image, result))
            else:
                normalized.append(result)

        logger.info(
            f"Normalized {len(images) - failures} of {len(images)} images",
            correlation_id=correlation_id,
            metadata={"total": len(images), "failed": failures}
        )

        return normalized

    async def normalize_variants(
        self,
        variant_images: Mapping[Hashable, Sequence[RawImageInput]],
        correlation_id: Optional[str] = None
    ) -> Dict[Hashable, List[NormalizedImage]]:
        """Normalize the images of several variants at once, keyed like the input."""
        keys = list(variant_images.keys())
        batches = await asyncio.gather(
            *(self.normalize(variant_images[key], correlation_id) for key in keys)
        )
        return dict(zip(keys, batches))

    def compress(self, content: bytes) -> Tuple[bytes, int, int]:
        """
        Downscale and re-encode one image with Pillow.

        Raises:
            PIL.UnidentifiedImageError / OSError: If the bytes are not an image
        """
        with Image.open(BytesIO(content)) as original:
            original.load()
            if self.output_format == "JPEG" and original.mode not in ("RGB", "L"):
                working = original.convert("RGB")
            else:
                working = original.copy()

        # Image.__exit__ only releases the file pointer; in-memory copies need close()
        try:
            working.thumbnail((self.max_width, self.max_height), Image.LANCZOS)

            buf = BytesIO()
            working.save(
                buf,
                format=self.output_format,
                optimize=True,
                quality=int(round(self.quality * 100)),
            )
            return buf.getvalue(), working.width, working.height
        finally:
            working.close()

    async def _normalize_one(self, image: RawImageInput) -> NormalizedImage:
        # Pillow is blocking; keep the event loop free
        content, width, height = await asyncio.to_thread(self._compressor, image.content)
        return NormalizedImage(
            filename=image.filename,
            content=content,
            content_type=f"image/{self.output_format.lower()}",
            width=width,
            height=height,
            original_size=len(image.content),
            size=len(content),
            compressed=True,
        )

    @staticmethod
    def _pass_through(image: RawImageInput, error: BaseException) -> NormalizedImage:
        return NormalizedImage(
            filename=image.filename,
            content=image.content,
            content_type=image.content_type,
            original_size=len(image.content),
            size=len(image.content),
            compressed=False,
            error=str(error) or type(error).__name__,
        )
