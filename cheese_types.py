"""
CHEESE Types & Constants - CHEESE Pixel Container v1
======================================================

Foundational type definitions, constants, enumerations, and error classes
for the CHEESE converter. This module has ZERO external dependencies beyond
the Python standard library.

Container layout (big-endian):
  - Magic   : 6 bytes, ASCII "CHEESE"
  - Width   : uint32
  - Height  : uint32
  - Payload : width * height * 3 bytes, row-major, R,G,B
"""

import struct
from enum import Enum
from dataclasses import dataclass
from typing import Tuple

# ═══════════════════════════════════════════════════════════════
# MAGIC BYTES & LAYOUT
# ═══════════════════════════════════════════════════════════════

CHEESE_MAGIC = b"CHEESE"

HEADER_FORMAT = '>6sII'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 14

RGB_CHANNELS = 3
RGBA_CHANNELS = 4
OPAQUE_ALPHA = 0xFF

# Largest side a JPEG can carry; every container must be re-encodable
MAX_DIMENSION = 0xFFFF
MAX_UINT32 = 0xFFFFFFFF

# Upper bound on a payload we are willing to materialize (1 GiB)
MAX_PAYLOAD_SIZE = 1 * 1024 * 1024 * 1024

JPEG_EXTENSION = ".jpg"
CHEESE_EXTENSION = ".cheese"


# ═══════════════════════════════════════════════════════════════
# CONVERSION DIRECTION
# ═══════════════════════════════════════════════════════════════

class Direction(Enum):
    """Which way a file is converted, chosen from its extension."""
    TO_CHEESE         = "to_cheese"          # .jpg    -> .cheese
    TO_STANDARD_IMAGE = "to_standard_image"  # .cheese -> .jpg
    UNSUPPORTED       = "unsupported"


# ═══════════════════════════════════════════════════════════════
# ERROR CLASSES
# ═══════════════════════════════════════════════════════════════

class CheeseError(Exception):
    """Base error for all CHEESE conversions."""
    pass

class UnsupportedFileType(CheeseError):
    """File name matches neither .jpg nor .cheese."""
    pass

class CheeseFormatError(CheeseError):
    """Container structural or parsing error."""
    pass

class InvalidContainerMagic(CheeseFormatError):
    """First six bytes are not ASCII "CHEESE"."""
    pass

class TruncatedHeader(CheeseFormatError):
    """Fewer than HEADER_SIZE bytes where a container was expected."""
    pass

class PayloadSizeMismatch(CheeseFormatError):
    """Pixel data length disagrees with the declared dimensions."""

    def __init__(self, message: str, expected: int = None, actual: int = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual

class DimensionOverflow(CheeseFormatError):
    """Declared width/height cannot be represented or materialized."""

    def __init__(self, message: str, width: int = None, height: int = None):
        super().__init__(message)
        self.width = width
        self.height = height

class CheeseImageError(CheeseError):
    """Failure inside the compressed-image capability."""
    pass

class ImageDecodeError(CheeseImageError):
    """Compressed image bytes could not be decoded."""
    pass

class ImageEncodeError(CheeseImageError):
    """Pixel buffer could not be encoded as a compressed image."""
    pass


# ═══════════════════════════════════════════════════════════════
# DATA STRUCTURES
# ═══════════════════════════════════════════════════════════════

def expected_payload_len(width: int, height: int,
                         channels: int = RGB_CHANNELS,
                         limit: int = MAX_PAYLOAD_SIZE) -> int:
    """
    Byte length of a width x height buffer with `channels` per pixel.

    Raises DimensionOverflow when either side exceeds MAX_DIMENSION or the
    product exceeds `limit`, so callers never size an allocation from an
    untrusted header.
    """
    if width < 0 or height < 0:
        raise DimensionOverflow(
            f"Negative dimensions {width}x{height}", width=width, height=height)
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise DimensionOverflow(
            f"Dimensions {width}x{height} exceed maximum side {MAX_DIMENSION}",
            width=width, height=height)
    size = width * height * channels
    if size > limit:
        raise DimensionOverflow(
            f"Dimensions {width}x{height} need {size} bytes, limit is {limit}",
            width=width, height=height)
    return size


@dataclass(frozen=True)
class CheeseHeader:
    """
    CHEESE container header.

    Wire format (14 bytes):
        magic  : bytes  (6 bytes) - CHEESE_MAGIC
        width  : uint32 (4 bytes)
        height : uint32 (4 bytes)
    """
    width: int
    height: int

    PACKED_SIZE = HEADER_SIZE

    @property
    def payload_offset(self) -> int:
        return self.PACKED_SIZE

    @property
    def payload_length(self) -> int:
        return self.width * self.height * RGB_CHANNELS

    def pack(self) -> bytes:
        """Serialize to wire format."""
        for value in (self.width, self.height):
            if not 0 <= value <= MAX_UINT32:
                raise DimensionOverflow(
                    f"Dimensions {self.width}x{self.height} do not fit uint32",
                    width=self.width, height=self.height)
        return struct.pack(HEADER_FORMAT, CHEESE_MAGIC, self.width, self.height)

    @classmethod
    def unpack(cls, data: bytes) -> 'CheeseHeader':
        """Deserialize from wire format. Extra trailing bytes are ignored."""
        if len(data) < cls.PACKED_SIZE:
            raise TruncatedHeader(
                f"CHEESE header needs {cls.PACKED_SIZE} bytes, got {len(data)}")
        magic, width, height = struct.unpack_from(HEADER_FORMAT, data, 0)
        if magic != CHEESE_MAGIC:
            raise InvalidContainerMagic(f"Invalid CHEESE magic: {magic!r}")
        return cls(width=width, height=height)


@dataclass(frozen=True)
class PixelBuffer:
    """
    Row-major, unpadded pixel grid with 3 (RGB) or 4 (RGBA) channels.

    The length invariant is enforced on construction; a buffer that does
    not match width * height * channels is never truncated or padded.
    """
    width: int
    height: int
    channels: int
    data: bytes

    def __post_init__(self):
        if self.channels not in (RGB_CHANNELS, RGBA_CHANNELS):
            raise ValueError(f"Unsupported channel count: {self.channels}")
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise PayloadSizeMismatch(
                f"{self.width}x{self.height}x{self.channels} buffer needs "
                f"{expected} bytes, got {len(self.data)}",
                expected=expected, actual=len(self.data))

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def mode(self) -> str:
        return "RGBA" if self.channels == RGBA_CHANNELS else "RGB"


@dataclass(frozen=True)
class ConversionResult:
    """
    Output of one conversion.

    pixels      : displayable RGBA buffer (preview)
    data        : bytes ready to persist (.cheese container or JPEG)
    output_name : input name with its extension swapped
    """
    direction: Direction
    pixels: PixelBuffer
    data: bytes
    output_name: str


# ═══════════════════════════════════════════════════════════════
# CHANNEL TRANSFORMS
# ═══════════════════════════════════════════════════════════════

def rgba_to_rgb(data: bytes) -> bytes:
    """Drop the alpha byte of every pixel. Lossy: alpha is discarded."""
    if len(data) % RGBA_CHANNELS:
        raise PayloadSizeMismatch(
            f"RGBA data length {len(data)} is not a multiple of {RGBA_CHANNELS}",
            actual=len(data))
    count = len(data) // RGBA_CHANNELS
    rgb = bytearray(count * RGB_CHANNELS)
    rgb[0::3] = data[0::4]
    rgb[1::3] = data[1::4]
    rgb[2::3] = data[2::4]
    return bytes(rgb)


def rgb_to_rgba(data: bytes, alpha: int = OPAQUE_ALPHA) -> bytes:
    """Insert a constant alpha byte after every RGB triple."""
    if len(data) % RGB_CHANNELS:
        raise PayloadSizeMismatch(
            f"RGB data length {len(data)} is not a multiple of {RGB_CHANNELS}",
            actual=len(data))
    count = len(data) // RGB_CHANNELS
    rgba = bytearray([alpha]) * (count * RGBA_CHANNELS)
    rgba[0::4] = data[0::3]
    rgba[1::4] = data[1::3]
    rgba[2::4] = data[2::3]
    return bytes(rgba)


# ═══════════════════════════════════════════════════════════════
# FORMAT DETECTION
# ═══════════════════════════════════════════════════════════════

def detect_direction(file_name: str) -> Direction:
    """
    Pick the conversion direction from the file name.

    Suffix matching is case-sensitive: "photo.JPG" is UNSUPPORTED.
    """
    if file_name.endswith(JPEG_EXTENSION):
        return Direction.TO_CHEESE
    if file_name.endswith(CHEESE_EXTENSION):
        return Direction.TO_STANDARD_IMAGE
    return Direction.UNSUPPORTED


def output_name(file_name: str, direction: Direction = None) -> str:
    """
    Swap the trailing extension: .jpg <-> .cheese.

    When `direction` is given the name must actually carry the matching
    extension, otherwise UnsupportedFileType is raised.
    """
    detected = detect_direction(file_name)
    if direction is not None and direction != detected:
        detected = Direction.UNSUPPORTED
    direction = detected
    if direction == Direction.TO_CHEESE:
        return file_name[:-len(JPEG_EXTENSION)] + CHEESE_EXTENSION
    if direction == Direction.TO_STANDARD_IMAGE:
        return file_name[:-len(CHEESE_EXTENSION)] + JPEG_EXTENSION
    raise UnsupportedFileType(
        f"Invalid file type for {file_name!r}. "
        f"Please provide a {JPEG_EXTENSION} or {CHEESE_EXTENSION} file.")
