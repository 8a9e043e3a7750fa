# adstudio/lib/media.py
from __future__ import annotations
import base64
import binascii
import io
import re
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from adstudio.errors import UnreadableMedia
from adstudio.logger import get_logger
from adstudio.schemas import AspectRatio, ImageResolution, MediaAttachment

log = get_logger(__name__)

_DATAURL_RE = re.compile(r"^data:([\w.+-]+/[\w.+-]+);base64,(.*)$", re.IGNORECASE | re.DOTALL)

# Pillow format name -> MIME
_FORMAT_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
}

def _sniff_mime_from_bytes(data: bytes) -> str:
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    if data.startswith(b"GIF87a") or data.startswith(b"GIF89a"):
        return "image/gif"
    # WEBP: RIFF....WEBP
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return ""

def _open_image(data: bytes) -> Image.Image:
    if not data:
        raise UnreadableMedia("Image is empty.")
    try:
        img = Image.open(io.BytesIO(data))
        img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise UnreadableMedia(f"Could not read the image: {e}")
    # verify() leaves the image unusable; reopen for size/format
    return Image.open(io.BytesIO(data))

def encode_media(data: bytes, mime_type: Optional[str] = None) -> MediaAttachment:
    """
    Turn raw image bytes into a MediaAttachment.
    The caller's MIME type wins; it is only sniffed when absent.
    Raises UnreadableMedia if Pillow cannot decode the bytes.
    """
    img = _open_image(data)
    mime = (mime_type or "").strip().lower()
    if not mime or mime == "application/octet-stream":
        mime = _FORMAT_MIME.get((img.format or "").upper()) or _sniff_mime_from_bytes(data)
    if not mime:
        raise UnreadableMedia("Unsupported image format.")
    return MediaAttachment(data=base64.b64encode(data).decode("ascii"), mime_type=mime)

def decode_base64_image(value: str) -> Tuple[bytes, Optional[str]]:
    """
    Returns (bytes, content_type or None). Supports 'data:image/png;base64,...' or raw base64.
    """
    if not value or not value.strip():
        raise UnreadableMedia("Empty image payload.")
    s = value.strip()
    content_type = None
    m = _DATAURL_RE.match(s)
    if m:
        content_type = m.group(1).lower()
        s = m.group(2)
    # Normalize whitespace and padding
    s = "".join(s.split())
    missing_padding = (-len(s)) % 4
    if missing_padding:
        s += "=" * missing_padding
    try:
        data = base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UnreadableMedia(f"Invalid base64 image: {e}")
    return data, content_type

def attachment_from_base64(value: Optional[str]) -> Optional[MediaAttachment]:
    if not value:
        return None
    data, content_type = decode_base64_image(value)
    return encode_media(data, content_type)

def attachment_bytes(attachment: MediaAttachment) -> bytes:
    return base64.b64decode(attachment.data)

def image_size(data: bytes) -> Tuple[int, int]:
    return _open_image(data).size

def suggest_aspect_ratio(data: bytes) -> Tuple[AspectRatio, ImageResolution]:
    """
    Pick the closest supported aspect ratio for a product photo.
    Unreadable images fall back to 1:1 / 2K.
    """
    try:
        width, height = image_size(data)
    except UnreadableMedia as e:
        log.warning(f"Could not load image to determine dimensions: {e}")
        return AspectRatio.SQUARE, ImageResolution.R2K

    ratio = width / height
    if 0.9 < ratio < 1.1:
        aspect = AspectRatio.SQUARE
    elif ratio >= 1.5:
        aspect = AspectRatio.LANDSCAPE_16_9
    elif ratio > 1.1:
        aspect = AspectRatio.LANDSCAPE_4_3
    elif ratio < 0.6:
        aspect = AspectRatio.PORTRAIT_9_16
    elif ratio < 0.9:
        aspect = AspectRatio.PORTRAIT_3_4
    else:
        aspect = AspectRatio.SQUARE
    return aspect, ImageResolution.R2K
