# -*- coding: utf-8 -*-
"""
QR Lens - Core Module

QR code generation (plain text and TOTP enrollment) and reading, with a
classifier that explains well-known payload formats.

Modules:
    payloads: Payload classification and field extraction
    qr_generator: QR symbol creation and PNG rendering
    reader: Image loading and QR decoding
    totp: TOTP enrollment URI construction
    config: Environment based settings
"""

__version__ = "1.0.0"

from .payloads import Category, ClassificationResult, Field, classify
from .qr_generator import make_qr, render_png
from .reader import QRReadError, read_qr
from .totp import build_totp_uri, parse_period

__all__ = [
    'Category',
    'ClassificationResult',
    'Field',
    'classify',
    'make_qr',
    'render_png',
    'QRReadError',
    'read_qr',
    'build_totp_uri',
    'parse_period',
]
