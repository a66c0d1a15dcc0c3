"""
Pytest configuration and fixtures
"""
from io import BytesIO

import pytest
import segno


@pytest.fixture
def flask_app():
    from app import app
    app.config.update(TESTING=True)
    yield app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def qr_png():
    """Return a factory producing PNG bytes of a QR code for the given text."""
    def _make(text, scale=8, dark='black', light='white'):
        buf = BytesIO()
        segno.make(text, error='M').save(buf, kind='png', scale=scale, border=4,
                                         dark=dark, light=light)
        return buf.getvalue()
    return _make
