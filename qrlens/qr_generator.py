# -*- coding: utf-8 -*-
"""
QR Code Generator Module

This module wraps segno to build QR symbols and render them as PNG images of
a requested pixel size, ready to be embedded in HTML as base64 data URIs or
sent as downloads.

Functions:
    make_qr: Generate a QR code symbol for a text payload
    render_png: Render a symbol to PNG bytes of an exact pixel size
    normalize_ecc: Normalize a user supplied error correction level
    parse_size: Parse a user supplied image size
"""

import base64
import re
from io import BytesIO
from typing import Optional, Union

import segno
from PIL import Image

ECC_LEVELS = ('L', 'M', 'Q', 'H')
DEFAULT_ECC = 'M'
DEFAULT_SIZE = 256
MAX_SIZE = 2048
DEFAULT_BORDER = 4

_POSITIVE_INT = re.compile(r'[0-9]+')


def normalize_ecc(value: Optional[str], default: str = DEFAULT_ECC) -> str:
    """Return ``value`` as one of L, M, Q, H (case-insensitive) or ``default``."""
    level = (value or '').strip().upper()
    return level if level in ECC_LEVELS else default


def parse_size(value: Optional[Union[str, int]], default: int = DEFAULT_SIZE,
               maximum: int = MAX_SIZE) -> int:
    """
    Parse the requested image width/height in pixels.

    Anything that is not a positive integer falls back to ``default``;
    oversized requests are capped at ``maximum``.
    """
    if isinstance(value, int):
        size = value
    else:
        text = (value or '').strip()
        if not _POSITIVE_INT.fullmatch(text):
            return default
        size = int(text)
    if size <= 0:
        return default
    return min(size, maximum)


def make_qr(
    text: str,
    ecc: str = DEFAULT_ECC,
    version: Optional[Union[int, str]] = None,
    micro: bool = False
) -> segno.QRCode:
    """
    Generate a QR code symbol for ``text``.

    The error correction level is used as given; segno's automatic boosting
    is disabled so the symbol matches what the user asked for.

    Args:
        text (str): The data to encode
        ecc (str): Error correction level ('L', 'M', 'Q', 'H')
            - L: ~7% recovery capability
            - M: ~15% recovery capability
            - Q: ~25% recovery capability
            - H: ~30% recovery capability
        version (Optional[Union[int, str]]): QR code version (1-40) or 'auto'
        micro (bool): Allow Micro QR symbols

    Returns:
        segno.QRCode: Generated QR code object

    Raises:
        ValueError: If ``text`` is empty or the parameters are invalid
        segno.DataOverflowError: If the data doesn't fit (a ValueError)
    """
    if not text:
        raise ValueError("Cannot encode an empty payload")

    ver_arg = None if (version in (None, 'auto')) else int(version)

    return segno.make(
        text,
        error=normalize_ecc(ecc),
        version=ver_arg,
        micro=bool(micro),
        boost_error=False
    )


def render_png(qr: segno.QRCode, size: int = DEFAULT_SIZE, border: int = DEFAULT_BORDER) -> bytes:
    """
    Render ``qr`` as a black-on-white PNG ``size`` pixels wide and high.

    The symbol is drawn at the largest integer module scale that fits and
    then stretched with nearest-neighbour sampling to the exact size, so
    module edges stay sharp. A size smaller than the symbol itself yields
    one pixel per module instead.
    """
    width, _ = qr.symbol_size(scale=1, border=border)
    scale = max(1, size // width)

    buf = BytesIO()
    qr.save(buf, kind='png', scale=scale, border=border, light='white', dark='black')
    if width * scale == size or size < width:
        return buf.getvalue()

    buf.seek(0)
    im = Image.open(buf).convert('L').resize((size, size), Image.NEAREST)
    out = BytesIO()
    im.save(out, format='PNG')
    return out.getvalue()


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')
