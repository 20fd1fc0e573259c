"""DDS (DirectDraw Surface) image container support.

Builds standard DDS headers from ZeroEngine texture metadata and hands the
result to Pillow for raster decoding. D3D9 ``D3DFORMAT`` codes, as stored
by the engine, are mapped to DDS pixel formats here.
"""

from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass

from PIL import Image

from ..ucfb.errors import UCFBError

log = logging.getLogger(__name__)

DDS_MAGIC = b"DDS "
DDS_HEADER_SIZE = 124
DDS_PIXELFORMAT_SIZE = 32

# DDS_HEADER.dwFlags
DDSD_CAPS = 0x1
DDSD_HEIGHT = 0x2
DDSD_WIDTH = 0x4
DDSD_PITCH = 0x8
DDSD_PIXELFORMAT = 0x1000
DDSD_MIPMAPCOUNT = 0x20000
DDSD_LINEARSIZE = 0x80000
DDSD_DEPTH = 0x800000

# DDS_PIXELFORMAT.dwFlags
DDPF_ALPHAPIXELS = 0x1
DDPF_ALPHA = 0x2
DDPF_FOURCC = 0x4
DDPF_RGB = 0x40
DDPF_LUMINANCE = 0x20000
DDPF_BUMPDUDV = 0x80000

# dwCaps / dwCaps2
DDSCAPS_COMPLEX = 0x8
DDSCAPS_TEXTURE = 0x1000
DDSCAPS_MIPMAP = 0x400000
DDSCAPS2_VOLUME = 0x200000


class ImageCodecError(UCFBError):
    """Base class for DDS building / decoding failures."""


class UnsupportedFormat(ImageCodecError):
    """Pixel format or dimensions the container cannot describe."""


class DecodeFailure(ImageCodecError):
    """The raster decoder rejected the container."""


@dataclass(frozen=True)
class PixelFormat:
    """A DDS_PIXELFORMAT description."""

    name: str
    flags: int
    fourcc: bytes = b"\0\0\0\0"
    bit_count: int = 0
    r_mask: int = 0
    g_mask: int = 0
    b_mask: int = 0
    a_mask: int = 0
    block_size: int = 0  # bytes per 4x4 block, 0 for uncompressed formats

    @property
    def compressed(self) -> bool:
        return self.block_size > 0

    def surface_size(self, width: int, height: int) -> int:
        """Byte size of one surface of the given dimensions."""
        if self.compressed:
            return max(1, (width + 3) // 4) * max(1, (height + 3) // 4) * self.block_size
        return ((width * self.bit_count + 7) // 8) * height

    def pack(self) -> bytes:
        return struct.pack(
            "<II4sIIIII",
            DDS_PIXELFORMAT_SIZE,
            self.flags,
            self.fourcc,
            self.bit_count,
            self.r_mask,
            self.g_mask,
            self.b_mask,
            self.a_mask,
        )


def _fourcc(code: bytes, block_size: int) -> PixelFormat:
    return PixelFormat(code.decode("ascii"), DDPF_FOURCC, fourcc=code, block_size=block_size)


def _d3dfmt_fourcc(code: bytes) -> int:
    return int.from_bytes(code, "little")


# D3DFORMAT -> DDS pixel format
D3D_FORMATS: dict[int, PixelFormat] = {
    21: PixelFormat(
        "A8R8G8B8", DDPF_RGB | DDPF_ALPHAPIXELS, bit_count=32,
        r_mask=0x00FF0000, g_mask=0x0000FF00, b_mask=0x000000FF, a_mask=0xFF000000,
    ),
    22: PixelFormat(
        "X8R8G8B8", DDPF_RGB, bit_count=32,
        r_mask=0x00FF0000, g_mask=0x0000FF00, b_mask=0x000000FF,
    ),
    23: PixelFormat(
        "R5G6B5", DDPF_RGB, bit_count=16,
        r_mask=0xF800, g_mask=0x07E0, b_mask=0x001F,
    ),
    25: PixelFormat(
        "A1R5G5B5", DDPF_RGB | DDPF_ALPHAPIXELS, bit_count=16,
        r_mask=0x7C00, g_mask=0x03E0, b_mask=0x001F, a_mask=0x8000,
    ),
    26: PixelFormat(
        "A4R4G4B4", DDPF_RGB | DDPF_ALPHAPIXELS, bit_count=16,
        r_mask=0x0F00, g_mask=0x00F0, b_mask=0x000F, a_mask=0xF000,
    ),
    28: PixelFormat("A8", DDPF_ALPHA, bit_count=8, a_mask=0xFF),
    50: PixelFormat("L8", DDPF_LUMINANCE, bit_count=8, r_mask=0xFF),
    51: PixelFormat(
        "A8L8", DDPF_LUMINANCE | DDPF_ALPHAPIXELS, bit_count=16, r_mask=0x00FF, a_mask=0xFF00,
    ),
    52: PixelFormat(
        "A4L4", DDPF_LUMINANCE | DDPF_ALPHAPIXELS, bit_count=8, r_mask=0x0F, a_mask=0xF0,
    ),
    60: PixelFormat("V8U8", DDPF_BUMPDUDV, bit_count=16, r_mask=0x00FF, g_mask=0xFF00),
    _d3dfmt_fourcc(b"DXT1"): _fourcc(b"DXT1", 8),
    _d3dfmt_fourcc(b"DXT2"): _fourcc(b"DXT2", 16),
    _d3dfmt_fourcc(b"DXT3"): _fourcc(b"DXT3", 16),
    _d3dfmt_fourcc(b"DXT4"): _fourcc(b"DXT4", 16),
    _d3dfmt_fourcc(b"DXT5"): _fourcc(b"DXT5", 16),
}


@dataclass(frozen=True)
class DDSHeader:
    """The 124-byte DDS_HEADER (plus magic) for one texture format."""

    height: int
    width: int
    depth: int
    mipmap_count: int
    pixel_format: PixelFormat

    @classmethod
    def new(
        cls, height: int, width: int, depth: int, pixel_format: PixelFormat, mipmap_count: int
    ) -> DDSHeader:
        """Validate dimensions and build a header.

        Raises :class:`UnsupportedFormat` when the dimensions cannot be
        described by a DDS header.
        """
        if width <= 0 or height <= 0:
            raise UnsupportedFormat(f"invalid texture dimensions {width}x{height}")
        if mipmap_count > 1 and max(width, height) >> (mipmap_count - 1) == 0:
            raise UnsupportedFormat(
                f"{mipmap_count} mip levels do not fit a {width}x{height} texture"
            )
        return cls(
            height=height,
            width=width,
            depth=max(depth, 1),
            mipmap_count=max(mipmap_count, 1),
            pixel_format=pixel_format,
        )

    def level_dimensions(self, level: int) -> tuple[int, int, int]:
        return (
            max(1, self.width >> level),
            max(1, self.height >> level),
            max(1, self.depth >> level),
        )

    def level_size(self, level: int) -> int:
        w, h, d = self.level_dimensions(level)
        return self.pixel_format.surface_size(w, h) * d

    def level_offset(self, level: int) -> int:
        return sum(self.level_size(i) for i in range(level))

    @property
    def data_size(self) -> int:
        return self.level_offset(self.mipmap_count)

    def to_bytes(self) -> bytes:
        fmt = self.pixel_format
        flags = DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT
        caps = DDSCAPS_TEXTURE
        caps2 = 0

        if fmt.compressed:
            flags |= DDSD_LINEARSIZE
            pitch_or_linear = fmt.surface_size(self.width, self.height)
        else:
            flags |= DDSD_PITCH
            pitch_or_linear = (self.width * fmt.bit_count + 7) // 8

        if self.mipmap_count > 1:
            flags |= DDSD_MIPMAPCOUNT
            caps |= DDSCAPS_COMPLEX | DDSCAPS_MIPMAP
        if self.depth > 1:
            flags |= DDSD_DEPTH
            caps |= DDSCAPS_COMPLEX
            caps2 |= DDSCAPS2_VOLUME

        header = struct.pack(
            "<7I44x",
            DDS_HEADER_SIZE,
            flags,
            self.height,
            self.width,
            pitch_or_linear,
            self.depth if self.depth > 1 else 0,
            self.mipmap_count,
        )
        header += fmt.pack()
        header += struct.pack("<4I4x", caps, caps2, 0, 0)
        return DDS_MAGIC + header


@dataclass(frozen=True)
class DDSImage:
    """A complete DDS file: header plus pixel data for every mip level."""

    header: DDSHeader
    data: bytes

    def to_bytes(self) -> bytes:
        return self.header.to_bytes() + self.data


def build_image_container(header: DDSHeader, payload: bytes) -> DDSImage:
    """Assemble a DDS image, checking that the payload covers the top level."""
    needed = header.level_size(0)
    if len(payload) < needed:
        raise UnsupportedFormat(
            f"{header.pixel_format.name} {header.width}x{header.height} needs {needed} bytes, "
            f"payload has {len(payload)}"
        )
    return DDSImage(header=header, data=payload)


def decode_to_raster(image: DDSImage, mip_level: int = 0) -> Image.Image:
    """Decode one mip level of ``image`` into a PIL Image.

    The level is cut out and re-wrapped as a single-level DDS so Pillow
    only ever sees a plain 2D surface.
    """
    header = image.header
    if not 0 <= mip_level < header.mipmap_count:
        raise DecodeFailure(f"mip level {mip_level} out of range (0-{header.mipmap_count - 1})")

    width, height, _depth = header.level_dimensions(mip_level)
    offset = header.level_offset(mip_level)
    size = header.pixel_format.surface_size(width, height)
    surface = image.data[offset : offset + size]
    if len(surface) < size:
        raise DecodeFailure(
            f"mip level {mip_level} needs {size} bytes at offset {offset}, "
            f"only {len(surface)} available"
        )

    level = DDSHeader(
        height=height,
        width=width,
        depth=1,
        mipmap_count=1,
        pixel_format=header.pixel_format,
    )
    try:
        img = Image.open(io.BytesIO(level.to_bytes() + surface))
        img.load()
    except (OSError, ValueError, NotImplementedError) as e:
        raise DecodeFailure(f"{header.pixel_format.name}: {e}") from e
    return img
