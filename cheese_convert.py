"""
CHEESE Convert - single-entry async conversion
================================================

    result = await convert(file_bytes, "photo.jpg")     # -> .cheese
    result = await convert(file_bytes, "photo.cheese")  # -> .jpg

The extension picks the direction before any byte is read. Calls into the
image bridge run in a worker thread and are awaited under a timeout, so a
stuck decoder surfaces as a typed error instead of hanging the caller.
Each call builds its own buffers; concurrent conversions share nothing.
"""

import asyncio
from typing import Optional

from cheese_types import (
    Direction, ConversionResult, MAX_PAYLOAD_SIZE,
    CheeseError, UnsupportedFileType, ImageDecodeError, ImageEncodeError,
    detect_direction, output_name,
)
from cheese_bridge import PillowImageBridge, check_rgba
from cheese_encoder import CheeseEncoder
from cheese_decoder import CheeseDecoder
from cheese_logger import get_logger

_logger = get_logger("convert")

DEFAULT_TIMEOUT = 30.0


class CheeseConverter:
    """
    Dispatches a (bytes, file name) pair to the encoder or decoder.

    Usage:
        converter = CheeseConverter(timeout=10.0)
        result = await converter.convert(data, "photo.jpg")
    """

    def __init__(self,
                 bridge: Optional[PillowImageBridge] = None,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 max_payload_size: int = MAX_PAYLOAD_SIZE):
        self.bridge = bridge or PillowImageBridge()
        self.timeout = timeout
        self.encoder = CheeseEncoder(bridge=self.bridge, max_payload_size=max_payload_size)
        self.decoder = CheeseDecoder(bridge=self.bridge, max_payload_size=max_payload_size)

    async def convert(self, file_bytes: bytes, file_name: str) -> ConversionResult:
        direction = detect_direction(file_name)
        if direction == Direction.UNSUPPORTED:
            _logger.error("unsupported file type: %s", file_name)
            raise UnsupportedFileType(
                f"Invalid file type for {file_name!r}. "
                f"Please provide a .jpg or .cheese file.")

        name = output_name(file_name, direction)
        _logger.info("converting %s -> %s (%d bytes)", file_name, name, len(file_bytes))

        if direction == Direction.TO_CHEESE:
            return await self._to_cheese(file_bytes, name)
        return await self._to_standard_image(file_bytes, name)

    # ─── Directions ───────────────────────────────────────────

    async def _to_cheese(self, data: bytes, name: str) -> ConversionResult:
        pixels = await self._call_bridge(
            self.bridge.decode_compressed_image, data, error=ImageDecodeError)
        pixels = check_rgba(pixels)
        _logger.info("image loaded: %dx%d", pixels.width, pixels.height)
        return self.encoder.build_result(pixels, name)

    async def _to_standard_image(self, data: bytes, name: str) -> ConversionResult:
        pixels = self.decoder.decode_bytes(data)
        _logger.info("container parsed: %dx%d", pixels.width, pixels.height)
        jpeg = await self._call_bridge(
            self.bridge.encode_pixel_buffer, pixels, error=ImageEncodeError)
        return self.decoder.build_result(pixels, jpeg, name)

    # ─── Bridge Suspension ────────────────────────────────────

    async def _call_bridge(self, func, arg, error):
        """
        Run a blocking bridge call off the event loop and wait for it.

        Timeouts and untyped failures become `error`; CHEESE errors raised
        by the bridge pass through unchanged.
        """
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, arg), self.timeout)
        except asyncio.TimeoutError as exc:
            _logger.error("%s timed out after %ss", func.__name__, self.timeout)
            raise error(f"{func.__name__} timed out after {self.timeout}s") from exc
        except CheeseError:
            raise
        except Exception as exc:
            _logger.error("%s failed: %s", func.__name__, exc)
            raise error(f"{func.__name__} failed: {exc}") from exc


# ═══════════════════════════════════════════════════════════════
# CONVENIENCE FUNCTIONS
# ═══════════════════════════════════════════════════════════════

async def convert(file_bytes: bytes, file_name: str, *,
                  bridge: Optional[PillowImageBridge] = None,
                  timeout: Optional[float] = DEFAULT_TIMEOUT) -> ConversionResult:
    """Convenience: convert one file's bytes in one call."""
    return await CheeseConverter(bridge=bridge, timeout=timeout).convert(file_bytes, file_name)
