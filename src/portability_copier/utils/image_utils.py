"""Image metadata readers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

import piexif
from PIL import Image
from pillow_heif import register_heif_opener

register_heif_opener()

MIME_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
    "WEBP": "image/webp",
    "HEIF": "image/heic",
}


def get_image_resolution(path: Path, logger=None) -> Optional[Tuple[int, int]]:
    try:
        with Image.open(path) as image:
            return image.size
    except Exception as exc:
        if logger is not None:
            logger.warning(f"Cannot read resolution: {path} ({exc})")
        return None


def get_media_type(path: Path, logger=None) -> Optional[str]:
    try:
        with Image.open(path) as image:
            return MIME_TYPES.get(str(image.format or "").upper())
    except Exception as exc:
        if logger is not None:
            logger.warning(f"Cannot read image format: {path} ({exc})")
        return None


def get_exif_datetime_original(path: Path, logger=None) -> Optional[str]:
    try:
        with Image.open(path) as image:
            exif_bytes = image.info.get("exif")
            if not exif_bytes:
                return None
        exif_dict = piexif.load(exif_bytes)
        value = exif_dict.get("Exif", {}).get(piexif.ExifIFD.DateTimeOriginal)
        if value is None:
            value = exif_dict.get("0th", {}).get(piexif.ImageIFD.DateTime)
    except Exception as exc:
        if logger is not None:
            logger.warning(f"Cannot read EXIF: {path} ({exc})")
        return None
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    return str(value)


def format_exif_time(value: str) -> Optional[str]:
    try:
        parsed = datetime.strptime(value.strip(), "%Y:%m:%d %H:%M:%S")
    except ValueError:
        return None
    return parsed.strftime("%Y-%m-%d %H:%M:%S")
