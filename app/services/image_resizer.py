"""Pillow-backed resize engine."""

import asyncio
import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from app.config import settings
from app.errors import ResizeError

logger = logging.getLogger(__name__)

FALLBACK_FORMAT = "PNG"


def fitted_size(source: tuple[int, int], box: tuple[int, int]) -> tuple[int, int]:
    """Size ``ImageOps.contain`` produces when fitting ``source`` into ``box``."""
    src_width, src_height = source
    width, height = box
    src_ratio = src_width / src_height
    box_ratio = width / height
    if src_ratio > box_ratio:
        return width, max(1, round(src_height / src_width * width))
    if src_ratio < box_ratio:
        return max(1, round(src_width / src_height * height)), height
    return width, height


class PillowImageResizer:
    """Fit an image inside ``width`` x ``height`` keeping its aspect ratio.

    The output is encoded in the source format when Pillow can write it,
    PNG otherwise.
    """

    def __init__(
        self, jpeg_quality: int | None = None, max_output_pixels: int | None = None
    ) -> None:
        self.jpeg_quality = jpeg_quality or settings.jpeg_quality
        self.max_output_pixels = max_output_pixels or settings.max_output_pixels

    async def resize(self, data: bytes, width: int, height: int) -> bytes:
        return await asyncio.to_thread(self._resize, data, width, height)

    def _resize(self, data: bytes, width: int, height: int) -> bytes:
        if not data:
            raise ResizeError("Input image is empty.")
        try:
            with Image.open(io.BytesIO(data)) as image:
                out_width, out_height = fitted_size(image.size, (width, height))
                if out_width * out_height > self.max_output_pixels:
                    raise ResizeError(
                        f"Output size {out_width}x{out_height} exceeds the limit of "
                        f"{self.max_output_pixels} pixels."
                    )
                image.load()
                source_format = image.format or FALLBACK_FORMAT
                resized = ImageOps.contain(image, (width, height), Image.Resampling.LANCZOS)
                return self._encode(resized, source_format)
        except UnidentifiedImageError as exc:
            raise ResizeError(f"Unsupported or corrupt image: {exc}") from exc
        except Image.DecompressionBombError as exc:
            raise ResizeError(f"Image is too large to process: {exc}") from exc
        except MemoryError as exc:
            raise ResizeError("Not enough memory to resize image.") from exc
        except (OSError, ValueError, SyntaxError) as exc:
            raise ResizeError(f"Failed to resize image: {exc}") from exc

    def _encode(self, image: Image.Image, fmt: str) -> bytes:
        fmt = fmt.upper()
        if fmt not in Image.SAVE:
            logger.info(f"Pillow cannot write {fmt}, encoding as {FALLBACK_FORMAT}")
            fmt = FALLBACK_FORMAT

        params: dict = {}
        if fmt == "JPEG":
            if image.mode not in ("RGB", "L", "CMYK"):
                image = image.convert("RGB")
            params["quality"] = self.jpeg_quality

        buffer = io.BytesIO()
        image.save(buffer, format=fmt, **params)
        return buffer.getvalue()


resizer = PillowImageResizer()
