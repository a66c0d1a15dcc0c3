"""
Tests for QR generation and PNG rendering
"""
from io import BytesIO

import pytest
import segno
from PIL import Image

from qrlens.qr_generator import make_qr, normalize_ecc, parse_size, render_png, to_base64


def test_make_qr_keeps_requested_ecc():
    qr = make_qr("hello", ecc='L')
    assert isinstance(qr, segno.QRCode)
    assert qr.error == 'L'


def test_make_qr_rejects_empty_text():
    with pytest.raises(ValueError):
        make_qr("")


def test_make_qr_overflow_is_value_error():
    with pytest.raises(ValueError):
        make_qr("x" * 200, ecc='H', version=1)


@pytest.mark.parametrize("value, expected", [
    ("l", 'L'), ("Q", 'Q'), (" h ", 'H'), ("", 'M'), (None, 'M'), ("X", 'M'),
])
def test_normalize_ecc(value, expected):
    assert normalize_ecc(value) == expected


@pytest.mark.parametrize("value, expected", [
    ("300", 300), (512, 512), ("", 256), (None, 256), ("abc", 256),
    ("0", 256), ("-10", 256), ("99999", 2048),
])
def test_parse_size(value, expected):
    assert parse_size(value) == expected


@pytest.mark.parametrize("size", [256, 300, 100])
def test_render_png_exact_size(size):
    png = render_png(make_qr("https://example.com"), size=size, border=4)
    im = Image.open(BytesIO(png))
    assert im.format == 'PNG'
    assert im.size == (size, size)


def test_render_png_too_small_uses_one_pixel_per_module():
    qr = make_qr("hello")
    width, _ = qr.symbol_size(scale=1, border=4)
    im = Image.open(BytesIO(render_png(qr, size=5, border=4)))
    assert im.size == (width, width)


def test_to_base64():
    assert to_base64(b"\x89PNG") == "iVBORw=="
