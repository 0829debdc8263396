"""Decoding of uploaded images.

The browser sends the image as a base64 data URI
(``data:image/png;base64,...``); bare base64 strings are accepted too.
Pillow identifies the format so the MIME type sent to vendors matches the
actual bytes rather than whatever the header claimed.
"""

import base64
import binascii
import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from deepfake_backend import config
from deepfake_backend.errors import MediaError


@dataclass
class DecodedImage:
    data: bytes
    format: str
    mime_type: str
    width: int
    height: int

    @property
    def filename(self):
        ext = "jpg" if self.format == "JPEG" else self.format.lower()
        return f"image.{ext}"

    def to_data_uri(self):
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def split_data_uri(media):
    """Return the base64 payload of ``media``, dropping a data URI header."""
    media = media.strip()
    if not media.startswith("data:"):
        return media

    header, sep, encoded = media.partition(",")
    if not sep:
        raise MediaError("Malformed data URI")
    if not header.startswith("data:image"):
        raise MediaError(f"Unsupported media type: {header[5:].split(';')[0] or 'unknown'}")
    return encoded


def decode_media(media):
    """Decode a data URI or base64 string into a validated :class:`DecodedImage`."""
    if not isinstance(media, str) or not media.strip():
        raise MediaError("No image provided")

    encoded = split_data_uri(media)
    try:
        image_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise MediaError("Image is not valid base64")

    if not image_bytes:
        raise MediaError("No image provided")
    if len(image_bytes) > config.MAX_IMAGE_BYTES:
        limit_mb = config.MAX_IMAGE_BYTES // (1024 * 1024)
        raise MediaError(f"Maximum file size is {limit_mb}MB", status_code=413)

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            fmt = img.format
            width, height = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise MediaError("Uploaded file is not a valid image")

    if fmt not in config.ALLOWED_FORMATS:
        raise MediaError("Please upload a JPG, PNG, GIF, or WebP image")

    return DecodedImage(
        data=image_bytes,
        format=fmt,
        mime_type=Image.MIME.get(fmt, "application/octet-stream"),
        width=width,
        height=height,
    )
