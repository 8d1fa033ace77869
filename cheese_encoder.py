"""
CHEESE Encoder - compressed image -> CHEESE container
=======================================================

Encodes a decoded image into a CHEESE container:
  [14-byte header] + [RGB payload]

Steps:
  - Decode compressed bytes to RGBA (via the image bridge)
  - Drop alpha from every pixel (lossy, one-way)
  - Pack magic + big-endian width/height
  - Concatenate header and payload
"""

from pathlib import Path
from typing import Optional

from cheese_types import (
    CheeseHeader, PixelBuffer, ConversionResult, Direction,
    RGBA_CHANNELS, MAX_PAYLOAD_SIZE,
    CheeseFormatError,
    expected_payload_len, rgba_to_rgb, output_name,
)
from cheese_bridge import PillowImageBridge, check_rgba
from cheese_logger import get_logger

_logger = get_logger("encoder")


# ═══════════════════════════════════════════════════════════════
# ENCODER
# ═══════════════════════════════════════════════════════════════

class CheeseEncoder:
    """
    CHEESE v1 Encoder.

    Usage:
        encoder = CheeseEncoder()
        container = encoder.encode_pixels(rgba_pixels)
        result = encoder.encode_image(jpeg_bytes, "photo.jpg")
    """

    def __init__(self,
                 bridge: Optional[PillowImageBridge] = None,
                 max_payload_size: int = MAX_PAYLOAD_SIZE):
        self.bridge = bridge or PillowImageBridge()
        self.max_payload_size = max_payload_size

    def encode_pixels(self, pixels: PixelBuffer) -> bytes:
        """
        Serialize an RGBA PixelBuffer as a CHEESE container.

        Args:
            pixels: 4-channel buffer, row-major.

        Returns:
            Header bytes followed by width * height * 3 payload bytes.
        """
        if pixels.channels != RGBA_CHANNELS:
            raise CheeseFormatError(
                f"Expected {RGBA_CHANNELS}-channel pixels, got {pixels.channels}")

        # ── 1. Bound the payload before building anything ──
        payload_len = expected_payload_len(pixels.width, pixels.height,
                                           limit=self.max_payload_size)

        # ── 2. Reduce RGBA -> RGB ──
        rgb = rgba_to_rgb(pixels.data)
        assert len(rgb) == payload_len, \
            f"Payload length mismatch: expected {payload_len}, got {len(rgb)}"

        # ── 3. Header + payload ──
        header = CheeseHeader(width=pixels.width, height=pixels.height)
        container = header.pack() + rgb

        _logger.debug("packed %dx%d container: %d payload bytes, %d total",
                      pixels.width, pixels.height, payload_len, len(container))
        return container

    def encode_image(self, data: bytes, file_name: str) -> ConversionResult:
        """Decode compressed image bytes and wrap them as a CHEESE container."""
        name = output_name(file_name, Direction.TO_CHEESE)
        pixels = check_rgba(self.bridge.decode_compressed_image(data))
        return self.build_result(pixels, name)

    def build_result(self, pixels: PixelBuffer, name: str) -> ConversionResult:
        container = self.encode_pixels(pixels)
        return ConversionResult(direction=Direction.TO_CHEESE, pixels=pixels,
                                data=container, output_name=name)


# ═══════════════════════════════════════════════════════════════
# CONVENIENCE FUNCTIONS
# ═══════════════════════════════════════════════════════════════

def encode_file(filepath: str) -> ConversionResult:
    """Convenience: encode a .jpg file in one call."""
    path = Path(filepath)
    return CheeseEncoder().encode_image(path.read_bytes(), str(path))
