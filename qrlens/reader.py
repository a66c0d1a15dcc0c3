# -*- coding: utf-8 -*-
"""
QR image reader.

Turns uploaded image bytes into the text payload of the first QR symbol
found. Decoding is done by zbar (through pyzbar) on a grayscale copy of the
image; when nothing is found the inverted image (light-on-dark codes) and a
hard black/white threshold (low contrast photos) are tried as well.
"""

import logging
from io import BytesIO
from typing import Iterator, Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = frozenset({
    'image/png',
    'image/jpeg',
    'image/jpg',
    'image/webp',
    'image/bmp',
    'image/gif',
})


class QRReadError(Exception):
    """Base class for failures that stop a payload from being read."""


class UnsupportedImageType(QRReadError):
    def __init__(self, content_type: Optional[str]):
        super().__init__("Invalid file type. Supported formats: PNG, JPG, WEBP, BMP, GIF")
        self.content_type = content_type


class ImageDecodeError(QRReadError):
    pass


class QRNotFound(QRReadError):
    def __init__(self):
        super().__init__(
            "No QR code found in the image. Please ensure the image contains a clear QR code."
        )


def check_content_type(content_type: Optional[str]) -> None:
    if (content_type or '').lower() not in ACCEPTED_CONTENT_TYPES:
        raise UnsupportedImageType(content_type)


def load_image(data: bytes) -> Image.Image:
    """Open raw bytes as a PIL image, fully loaded."""
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as ex:
        raise ImageDecodeError(f"Error decoding image: {ex}") from ex
    return img


def _candidates(img: Image.Image) -> Iterator[Image.Image]:
    if img.mode in ('RGBA', 'LA', 'P'):
        # Transparent pixels count as white
        background = Image.new('RGBA', img.size, (255, 255, 255, 255))
        img = Image.alpha_composite(background, img.convert('RGBA'))
    gray = img.convert('L')
    yield gray

    arr = np.asarray(gray, dtype=np.uint8)
    yield Image.fromarray(255 - arr)

    threshold = arr.mean()
    yield Image.fromarray(np.where(arr > threshold, 255, 0).astype(np.uint8))


def decode_qr_text(img: Image.Image) -> str:
    """
    Return the payload of the first QR symbol found in ``img``.

    Raises:
        QRNotFound: If no variant of the image contains a readable symbol
    """
    from pyzbar.pyzbar import ZBarSymbol, decode

    for attempt, candidate in enumerate(_candidates(img)):
        decoded = decode(candidate, symbols=[ZBarSymbol.QRCODE])
        if decoded:
            if attempt:
                logger.info(f"QR symbol found on image variant #{attempt}")
            return decoded[0].data.decode('utf-8', errors='ignore')
    raise QRNotFound()


def read_qr(data: bytes, content_type: Optional[str]) -> str:
    """Validate, open and decode an uploaded image in one go."""
    check_content_type(content_type)
    return decode_qr_text(load_image(data))
