"""
CHEESE Image Bridge - compressed image decode/encode over Pillow
==================================================================

The converter never parses JPEG itself. This adapter turns compressed
bytes into an RGBA PixelBuffer and an RGBA PixelBuffer back into JPEG
bytes. Every Pillow failure is re-raised as ImageDecodeError or
ImageEncodeError so callers only see the CHEESE error hierarchy.
"""

import io

from PIL import Image, UnidentifiedImageError

from cheese_types import (
    PixelBuffer, RGBA_CHANNELS,
    ImageDecodeError, ImageEncodeError,
)
from cheese_logger import get_logger

_logger = get_logger("bridge")

DEFAULT_JPEG_QUALITY = 95


class PillowImageBridge:
    """
    Image capability backed by Pillow.

    Usage:
        bridge = PillowImageBridge(quality=90)
        pixels = bridge.decode_compressed_image(jpeg_bytes)
        jpeg_bytes = bridge.encode_pixel_buffer(pixels)
    """

    format = "JPEG"

    def __init__(self, quality: int = DEFAULT_JPEG_QUALITY):
        if not 1 <= quality <= 100:
            raise ValueError(f"JPEG quality must be within 1..100, got {quality}")
        self.quality = quality

    def decode_compressed_image(self, data: bytes) -> PixelBuffer:
        """Decode compressed image bytes into an RGBA PixelBuffer."""
        try:
            with Image.open(io.BytesIO(data), formats=[self.format]) as img:
                img.load()
                rgba = img.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError,
                OSError, ValueError, SyntaxError) as exc:
            _logger.debug("image decode failed: %s", exc)
            raise ImageDecodeError(f"Error loading image: {exc}") from exc

        width, height = rgba.size
        _logger.debug("decoded %dx%d image (%d bytes in)", width, height, len(data))
        return PixelBuffer(width=width, height=height,
                           channels=RGBA_CHANNELS, data=rgba.tobytes())

    def encode_pixel_buffer(self, pixels: PixelBuffer) -> bytes:
        """Encode an RGBA PixelBuffer as JPEG. Alpha is not stored."""
        if pixels.channels != RGBA_CHANNELS:
            raise ImageEncodeError(
                f"Expected {RGBA_CHANNELS}-channel buffer, got {pixels.channels}")
        if pixels.width == 0 or pixels.height == 0:
            raise ImageEncodeError(
                f"Cannot encode a {pixels.width}x{pixels.height} image as {self.format}")

        try:
            img = self.to_image(pixels).convert("RGB")
            buf = io.BytesIO()
            img.save(buf, format=self.format, quality=self.quality)
        except (OSError, ValueError, SystemError) as exc:
            _logger.debug("image encode failed: %s", exc)
            raise ImageEncodeError(f"Error encoding image: {exc}") from exc

        encoded = buf.getvalue()
        _logger.debug("encoded %dx%d image to %d bytes",
                      pixels.width, pixels.height, len(encoded))
        return encoded

    def to_image(self, pixels: PixelBuffer) -> Image.Image:
        """Build a Pillow image for display from a PixelBuffer."""
        try:
            return Image.frombytes(pixels.mode, pixels.size, pixels.data)
        except ValueError as exc:
            raise ImageEncodeError(f"Buffer does not match {pixels.size}: {exc}") from exc


def check_rgba(pixels: PixelBuffer) -> PixelBuffer:
    """Validate a bridge result before the codec consumes it."""
    if not isinstance(pixels, PixelBuffer) or pixels.channels != RGBA_CHANNELS:
        raise ImageDecodeError("Image decoder did not return an RGBA pixel buffer")
    return pixels

