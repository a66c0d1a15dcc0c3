#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
QR Lens - Flask Web Application

- /generate      QR from arbitrary text (size + ECC), prefilled from the query string
- /generate-qr   TOTP enrollment QR
- /reading       upload a QR image, see its raw text and what it means
- /export/png    download a generated QR as PNG
"""

import logging
from io import BytesIO
from typing import Tuple

from flask import Flask, render_template, request, send_file, url_for

from qrlens.config import load_settings
from qrlens.payloads import classify
from qrlens.qr_generator import make_qr, normalize_ecc, parse_size, render_png, to_base64
from qrlens.reader import QRReadError, UnsupportedImageType, read_qr
from qrlens.totp import build_totp_uri, parse_period

settings = load_settings()

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger(__name__)

app = Flask(__name__, template_folder='templates')
app.config.from_mapping(settings.flask_config())


def _read_params(values) -> Tuple[str, int, str]:
    """Extract text, size and ECC for the text generator from form or query values."""
    text = values.get('text') or ""
    size = parse_size(values.get('size'), default=app.config['QR_SIZE'],
                      maximum=app.config['QR_MAX_SIZE'])
    ecc = normalize_ecc(values.get('ec'), default=app.config['QR_ECC'])
    return text, size, ecc


@app.route('/', methods=['GET'])
def home():
    return render_template('home.html')


@app.route('/generate', methods=['GET', 'POST'])
def generate():
    text, size, ecc = _read_params(request.values)
    qr_view = None
    error = None

    if request.method == 'POST' and not text.strip():
        error = "Please enter text to generate a QR code"
    elif text.strip():
        try:
            logger.info(f"Generating text QR code: ecc={ecc}, size={size}, length={len(text)}")
            qr = make_qr(text, ecc=ecc)
            png = render_png(qr, size=size, border=app.config['QR_BORDER'])
            qr_view = {
                'img_b64': to_base64(png),
                'version': qr.designator,
                'download_link': url_for('export_png', text=text, size=size, ec=ecc),
            }
        except ValueError as ex:
            error = f"Error generating QR code: {ex}"
            logger.error(f"QR generation failed: {ex}")

    status = 400 if error and request.method == 'POST' else 200
    return render_template(
        'generate.html', text=text, size=size, ecc=ecc, qr=qr_view, error=error
    ), status


@app.route('/generate-qr', methods=['POST'])
def generate_totp_qr():
    name = request.form.get('name') or ""
    user = request.form.get('user') or ""
    secret = request.form.get('secret') or ""
    period = parse_period(request.form.get('period'), default=app.config['QR_DEFAULT_PERIOD'])

    if not name or not user or not secret:
        return "Name, User, and Secret are required", 400

    uri = build_totp_uri(name, user, secret, period)
    try:
        qr = make_qr(uri, ecc='M')
        png = render_png(qr, size=app.config['QR_SIZE'], border=app.config['QR_BORDER'])
    except ValueError as ex:
        logger.error(f"TOTP QR generation failed: {ex}")
        return "Error generating QR code", 500

    logger.info(f"Generated TOTP QR code for issuer={name!r}, period={period}")
    return render_template('qr_result.html', name=name, user=user, period=period,
                           img_b64=to_base64(png))


@app.route('/export/png', methods=['GET'])
def export_png():
    text, size, ecc = _read_params(request.args)
    if not text.strip():
        return "Missing text", 400
    try:
        qr = make_qr(text, ecc=ecc)
    except ValueError as ex:
        logger.error(f"PNG export failed: {ex}")
        return f"Error generating QR code: {ex}", 400
    buf = BytesIO(render_png(qr, size=size, border=app.config['QR_BORDER']))
    return send_file(buf, as_attachment=True, download_name='qr.png', mimetype='image/png')


@app.route('/reading', methods=['GET'])
def reading():
    return render_template('reading.html')


@app.route('/read-qr', methods=['POST'])
def read_qr_upload():
    file = request.files.get('qr_image')
    if file is None or not file.filename:
        return render_template(
            'qr_read_result.html',
            error="Error reading uploaded file: no file was uploaded"
        )

    data = file.read()
    try:
        raw_text = read_qr(data, file.mimetype)
    except UnsupportedImageType as ex:
        logger.info(f"Rejected upload {file.filename!r} with type {ex.content_type!r}")
        return render_template('qr_read_result.html', error=str(ex))
    except QRReadError as ex:
        logger.warning(f"No payload read from {file.filename!r}: {ex}")
        return render_template('qr_read_result.html', error=str(ex), img_b64=to_base64(data))

    result = classify(raw_text)
    logger.info(f"Decoded QR payload ({len(raw_text)} chars) classified as {result.category.value}")

    return render_template(
        'qr_read_result.html',
        raw_text=raw_text,
        result=result,
        img_b64=to_base64(data),
        generate_link=url_for('generate', text=raw_text),
    )


@app.errorhandler(413)
def upload_too_large(error):
    logger.warning("Rejected upload above MAX_CONTENT_LENGTH")
    limit_mb = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
    return render_template(
        'qr_read_result.html',
        error=f"Uploaded file is too large (limit {limit_mb} MB)"
    ), 413


if __name__ == "__main__":
    app.run(host=settings.host, port=settings.port, debug=settings.debug)
