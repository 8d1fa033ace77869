"""
CHEESE Decoder - CHEESE container -> pixels -> compressed image
=================================================================

Parses CHEESE containers back into pixel buffers.

Validation order (each failure is terminal, nothing is clamped or padded):
  1. Length >= 14 bytes            -> TruncatedHeader
  2. Magic == b"CHEESE"            -> InvalidContainerMagic
  3. Dimensions within bounds      -> DimensionOverflow
  4. Payload == width * height * 3 -> PayloadSizeMismatch

Only after all four pass is the RGB payload expanded to RGBA with a fully
opaque alpha and handed to the image bridge for JPEG encoding.
"""

from pathlib import Path
from typing import Optional, Tuple

from cheese_types import (
    CHEESE_MAGIC, HEADER_SIZE, RGBA_CHANNELS, MAX_PAYLOAD_SIZE,
    CheeseHeader, PixelBuffer, ConversionResult, Direction,
    CheeseFormatError, PayloadSizeMismatch,
    expected_payload_len, rgb_to_rgba, output_name,
)
from cheese_bridge import PillowImageBridge
from cheese_logger import get_logger

_logger = get_logger("decoder")


# ═══════════════════════════════════════════════════════════════
# DECODER
# ═══════════════════════════════════════════════════════════════

class CheeseDecoder:
    """
    CHEESE v1 Decoder.

    Usage:
        decoder = CheeseDecoder()
        pixels = decoder.decode_bytes(container)     # RGBA PixelBuffer
        result = decoder.decode_file("photo.cheese")  # ConversionResult
    """

    def __init__(self,
                 bridge: Optional[PillowImageBridge] = None,
                 max_payload_size: int = MAX_PAYLOAD_SIZE):
        self.bridge = bridge or PillowImageBridge()
        self.max_payload_size = max_payload_size

    # ─── Container Parsing ────────────────────────────────────

    def read_container(self, data: bytes) -> Tuple[CheeseHeader, bytes]:
        """
        Validate a container and split it into header and RGB payload.

        Nothing is allocated from the declared dimensions until the
        payload length has been checked against the actual input.
        """
        header = CheeseHeader.unpack(data)
        _logger.debug("container header: %dx%d, %d bytes total",
                      header.width, header.height, len(data))

        expected = expected_payload_len(header.width, header.height,
                                        limit=self.max_payload_size)

        actual = len(data) - header.payload_offset
        if actual != expected:
            _logger.warning("payload size mismatch: expected %d, got %d",
                            expected, actual)
            raise PayloadSizeMismatch(
                f"Pixel data length does not match expected size: "
                f"expected {expected} bytes for {header.width}x{header.height}, "
                f"got {actual}",
                expected=expected, actual=actual)

        return header, bytes(data[header.payload_offset:])

    def decode_bytes(self, data: bytes) -> PixelBuffer:
        """Decode a container into a displayable RGBA PixelBuffer."""
        header, payload = self.read_container(data)
        return PixelBuffer(width=header.width, height=header.height,
                           channels=RGBA_CHANNELS, data=rgb_to_rgba(payload))

    def inspect(self, data: bytes) -> dict:
        """
        Summarize a container header without expanding the payload.

        Truncated or wrongly-tagged input still raises; dimension and
        payload problems are reported in 'validation_errors' instead.
        """
        header = CheeseHeader.unpack(data)
        validation_errors = []
        actual = len(data) - HEADER_SIZE
        expected = None
        try:
            expected = expected_payload_len(header.width, header.height,
                                            limit=self.max_payload_size)
        except CheeseFormatError as e:
            validation_errors.append(str(e))
        if expected is not None and actual != expected:
            validation_errors.append(
                f"Payload length mismatch (expected {expected}, got {actual})")

        return {
            'magic': CHEESE_MAGIC.decode('ascii'),
            'width': header.width,
            'height': header.height,
            'payload_offset': header.payload_offset,
            'payload_expected': expected,
            'payload_actual': actual,
            'validation_errors': validation_errors,
            'valid': len(validation_errors) == 0,
        }

    # ─── Re-encoding ──────────────────────────────────────────

    def to_jpeg(self, pixels: PixelBuffer) -> bytes:
        return self.bridge.encode_pixel_buffer(pixels)

    def decode_container(self, data: bytes, file_name: str) -> ConversionResult:
        """Parse a container and re-encode it as JPEG bytes."""
        name = output_name(file_name, Direction.TO_STANDARD_IMAGE)
        pixels = self.decode_bytes(data)
        return self.build_result(pixels, self.to_jpeg(pixels), name)

    def build_result(self, pixels: PixelBuffer, jpeg: bytes, name: str) -> ConversionResult:
        return ConversionResult(direction=Direction.TO_STANDARD_IMAGE,
                                pixels=pixels, data=jpeg, output_name=name)

    def decode_file(self, filepath: str) -> ConversionResult:
        path = Path(filepath)
        return self.decode_container(path.read_bytes(), str(path))


# ═══════════════════════════════════════════════════════════════
# CONVENIENCE FUNCTIONS
# ═══════════════════════════════════════════════════════════════

def decode_file(filepath: str) -> ConversionResult:
    """Convenience: decode a .cheese file in one call."""
    return CheeseDecoder().decode_file(filepath)
