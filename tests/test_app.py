"""
Tests for the Flask routes
"""
import base64
import re
from io import BytesIO

import pytest
from PIL import Image


def _upload(client, data, filename="qr.png", content_type="image/png"):
    return client.post(
        "/read-qr",
        data={"qr_image": (BytesIO(data), filename, content_type)},
        content_type="multipart/form-data",
    )


def test_pages_render(client):
    for path in ("/", "/generate", "/reading"):
        response = client.get(path)
        assert response.status_code == 200, path
        assert b"QR" in response.data


def test_generate_prefilled_from_query(client):
    response = client.get("/generate?text=hello%20there&size=300&ec=h")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "hello there" in body
    assert 'value="H" selected' in body
    match = re.search(r'data:image/png;base64,([A-Za-z0-9+/=]+)', body)
    im = Image.open(BytesIO(base64.b64decode(match.group(1))))
    assert im.size == (300, 300)


def test_generate_post_requires_text(client):
    response = client.post("/generate", data={"text": "   "})
    assert response.status_code == 400
    assert b"Please enter text" in response.data


def test_totp_qr(client):
    response = client.post("/generate-qr", data={
        "name": "Example", "user": "jane", "secret": "JBSWY3DPEHPK3PXP", "period": "60",
    })
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "data:image/png;base64," in body
    assert "every 60 seconds" in body


@pytest.mark.parametrize("period, shown", [("", "30"), ("-1", "30"), ("abc", "30")])
def test_totp_qr_invalid_period_keeps_default(client, period, shown):
    response = client.post("/generate-qr", data={
        "name": "Example", "user": "jane", "secret": "S", "period": period,
    })
    assert f"every {shown} seconds" in response.get_data(as_text=True)


def test_totp_qr_missing_fields(client):
    response = client.post("/generate-qr", data={"name": "Example", "user": "jane"})
    assert response.status_code == 400
    assert response.get_data(as_text=True) == "Name, User, and Secret are required"


def test_totp_qr_get_not_allowed(client):
    assert client.get("/generate-qr").status_code == 405
    assert client.get("/read-qr").status_code == 405


def test_export_png(client):
    response = client.get("/export/png?text=hello&size=128")
    assert response.status_code == 200
    assert response.mimetype == "image/png"
    assert "qr.png" in response.headers["Content-Disposition"]
    assert Image.open(BytesIO(response.data)).size == (128, 128)


def test_export_png_requires_text(client):
    assert client.get("/export/png").status_code == 400


def test_read_qr_without_file(client):
    response = client.post("/read-qr", data={}, content_type="multipart/form-data")
    assert b"no file was uploaded" in response.data


def test_read_qr_rejects_type(client):
    response = _upload(client, b"hello", filename="notes.txt", content_type="text/plain")
    body = response.get_data(as_text=True)
    assert "Invalid file type" in body
    assert "base64," not in body


def test_read_qr_undecodable_image(client):
    response = _upload(client, b"garbage bytes")
    body = response.get_data(as_text=True)
    assert "Error decoding image" in body
    assert "base64," in body


def test_read_qr_too_large(flask_app, client):
    flask_app.config["MAX_CONTENT_LENGTH"] = 1024 * 1024
    try:
        response = _upload(client, b"\0" * (2 * 1024 * 1024))
    finally:
        flask_app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024
    assert response.status_code == 413
    assert b"too large" in response.data


def test_read_qr_classifies_payload(client, qr_png):
    pytest.importorskip("pyzbar.pyzbar")
    response = _upload(client, qr_png("mailto:a@b.com?subject=Hi&body=Hello"))
    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "mailto:a@b.com?subject=Hi&amp;body=Hello" in body
    assert "Parsed content (email)" in body
    for label, value in [("Address", "a@b.com"), ("Subject", "Hi"), ("Body", "Hello")]:
        assert f'<span class="parsed-key">{label}:</span>' in body
        assert f'<span class="parsed-value">{value}</span>' in body
    assert "/generate?text=" in body


def test_read_qr_plain_text_has_no_parsed_section(client, qr_png):
    pytest.importorskip("pyzbar.pyzbar")
    body = _upload(client, qr_png("just words")).get_data(as_text=True)
    assert "just words" in body
    assert "Parsed content" not in body


def test_generate_textarea_keeps_leading_newline(client):
    body = client.get("/generate?text=%0Ahello").get_data(as_text=True)
    assert '<textarea name="text" rows="4">\n\nhello</textarea>' in body
