"""Upload normalization: decode, bound, flatten onto white, re-encode as JPEG."""

import asyncio
import io
import logging
from pathlib import Path

from fastapi import UploadFile
from PIL import Image, ImageOps, UnidentifiedImageError

from viavo.config import JPEG_QUALITY, MAX_DIMENSION, MAX_UPLOAD_BYTES
from viavo.datauri import to_data_uri
from viavo.errors import (
    CanvasError, DecodeError, EmptyFrameError,
    SizeLimitError, UnsupportedFormatError, UnsupportedTypeError,
)

logger = logging.getLogger(__name__)

RASTER_EXTENSIONS = {
    ".jpg", ".jpeg", ".jpe", ".jfif", ".png", ".gif", ".bmp",
    ".webp", ".tif", ".tiff", ".ico",
}

# ISO-BMFF brands used by HEIC/HEIF phone photos
_HEIF_BRANDS = {b"heic", b"heix", b"hevc", b"hevx", b"heim", b"heis", b"mif1", b"msf1"}


def check_file_type(filename: str | None, content_type: str | None) -> None:
    """Reject files that look like neither an image by MIME type nor by extension."""
    if content_type and content_type.lower().startswith("image/"):
        return
    ext = Path(filename).suffix.lower() if filename else ""
    if ext in RASTER_EXTENSIONS:
        return
    raise UnsupportedTypeError(
        f"'{filename or 'upload'}' is not an image. Please choose a JPEG, PNG or WebP photo."
    )


def check_file_size(size: int, limit: int = MAX_UPLOAD_BYTES) -> None:
    if size > limit:
        raise SizeLimitError(
            f"File size exceeds {limit // (1024 * 1024)}MB limit. Please choose a smaller photo."
        )


async def read_upload(file: UploadFile, limit: int = MAX_UPLOAD_BYTES) -> bytes:
    """Read an upload, stopping one byte past the limit so huge files are never buffered."""
    data = await file.read(limit + 1)
    check_file_size(len(data), limit)
    return data


def target_dimensions(width: int, height: int, cap: int = MAX_DIMENSION) -> tuple[int, int]:
    """Scale (width, height) down so neither side exceeds cap, keeping the aspect ratio."""
    if width <= cap and height <= cap:
        return width, height
    ratio = min(cap / width, cap / height)
    return max(1, int(width * ratio + 0.5)), max(1, int(height * ratio + 0.5))


def _looks_like_heif(data: bytes) -> bool:
    return data[4:8] == b"ftyp" and data[8:12] in _HEIF_BRANDS


def _decode(data: bytes) -> Image.Image:
    if not data:
        raise DecodeError("The selected file is empty. Please choose another photo.")
    try:
        img = Image.open(io.BytesIO(data))
        try:
            img.load()
        except BaseException:
            img.close()
            raise
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        if _looks_like_heif(data):
            raise UnsupportedFormatError(
                "HEIC/HEIF photos are not supported. Please export the photo as JPEG or PNG."
            ) from e
        raise DecodeError(
            "This image could not be read. It may be corrupt or in an unsupported format."
        ) from e

    oriented = ImageOps.exif_transpose(img)
    if oriented is not img:
        img.close()
    return oriented


def check_frame(img: Image.Image) -> None:
    if img.width == 0 or img.height == 0:
        raise EmptyFrameError("This image has no visible pixels. Please choose another photo.")


def _composite(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Draw img scaled to size on an opaque white surface."""
    try:
        surface = Image.new("RGB", size, (255, 255, 255))
    except (MemoryError, ValueError) as e:
        raise CanvasError("Could not prepare the image for upload. Please try again.") from e

    try:
        with img.convert("RGBA") as rgba:
            if rgba.size == size:
                surface.paste(rgba, (0, 0), rgba)
            else:
                with rgba.resize(size, Image.LANCZOS) as scaled:
                    surface.paste(scaled, (0, 0), scaled)
    except BaseException:
        surface.close()
        raise
    return surface


def _encode(surface: Image.Image, quality: int) -> bytes:
    buf = io.BytesIO()
    surface.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


async def normalize(
    data: bytes,
    filename: str | None = None,
    content_type: str | None = None,
    max_dimension: int = MAX_DIMENSION,
    quality: int = JPEG_QUALITY,
) -> str:
    """Turn raw upload bytes into a bounded, opaque JPEG data URI.

    Raises an ``InputError`` before decoding for non-image or oversized files,
    and a ``DecodeError`` subclass when the bytes cannot become a usable frame.
    Every intermediate image is closed before returning.
    """
    check_file_type(filename, content_type)
    check_file_size(len(data))

    img = await asyncio.to_thread(_decode, data)
    try:
        check_frame(img)
        size = target_dimensions(img.width, img.height, max_dimension)
        surface = await asyncio.to_thread(_composite, img, size)
        try:
            encoded = await asyncio.to_thread(_encode, surface, quality)
        finally:
            surface.close()
        logger.info(
            "normalized %s: %dx%d -> %dx%d (%d bytes)",
            filename or "upload", img.width, img.height, size[0], size[1], len(encoded),
        )
    finally:
        img.close()

    return to_data_uri(encoded, "image/jpeg")
