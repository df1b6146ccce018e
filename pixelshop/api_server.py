#!/usr/bin/env python3
"""
pixelshop HTTP API.
Exposes one shared image registry: upload images under a name, run editing
operations between names, download results and their histograms.
"""

import os
import logging
import uuid
from io import BytesIO
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.utils import secure_filename

from .models.errors import (
    DecodeError, EncodeError, InvalidArgumentError, NotFoundError,
)
from .pipeline.commands import Command, execute
from .pipeline.script_parser import build
from .services.image_service import ImageService

logger = logging.getLogger(__name__)

# Configuration
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "data/temp_uploads")
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100")) * 1024 * 1024

# Verbs that read or write server-side paths are not exposed over HTTP.
BLOCKED_VERBS = {"load", "save", "run"}

MIMETYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "bmp": "image/bmp",
    "ppm": "image/x-portable-pixmap",
}


def _operation_args(operation: str, src: str, body: dict) -> List[str]:
    """Order JSON parameters the way the script language expects them."""
    dest = str(body.get("dest") or src)
    if operation in ("brighten", "darken"):
        if "amount" not in body:
            raise InvalidArgumentError(f"'{operation}' requires 'amount'")
        return [str(body["amount"]), src, dest]
    if operation == "downsize":
        missing = [k for k in ("width_percent", "height_percent") if k not in body]
        if missing:
            raise InvalidArgumentError(f"'downsize' requires {', '.join(missing)}")
        return [str(body["width_percent"]), str(body["height_percent"]), src, dest]
    return [src, dest]


def create_app(image_service: Optional[ImageService] = None,
               upload_folder: str = UPLOAD_FOLDER) -> Flask:
    """Build the Flask app around *image_service* (a fresh one by default)."""
    image_service = image_service if image_service is not None else ImageService()

    app = Flask(__name__)
    CORS(app)  # Enable CORS for frontend communication
    app.config['UPLOAD_FOLDER'] = upload_folder
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
    Path(upload_folder).mkdir(parents=True, exist_ok=True)

    def _error(err: Exception, status: int):
        return jsonify({'success': False, 'message': str(err)}), status

    @app.errorhandler(NotFoundError)
    def not_found(e):
        return _error(e, 404)

    @app.errorhandler(InvalidArgumentError)
    def invalid_argument(e):
        return _error(e, 400)

    @app.errorhandler(DecodeError)
    def decode_failed(e):
        return _error(e, 400)

    @app.errorhandler(EncodeError)
    def encode_failed(e):
        logger.error(f"Encode error: {e}")
        return _error(e, 500)

    @app.errorhandler(413)
    def too_large(e):
        """Handle file too large error."""
        return jsonify({'success': False, 'message': 'File too large.'}), 413

    @app.route('/api/health', methods=['GET'])
    def health_check():
        return jsonify({
            'status': 'healthy',
            'message': 'pixelshop API is running',
            'images': len(image_service.names()),
        })

    @app.route('/api/images', methods=['GET'])
    def list_images():
        return jsonify({'success': True, 'images': image_service.names()})

    @app.route('/api/images/<name>', methods=['POST'])
    def upload_image(name):
        """Load an uploaded file into the registry under *name*."""
        if 'image' not in request.files:
            return jsonify({'success': False, 'message': 'No image provided'}), 400

        file = request.files['image']
        if file.filename == '':
            return jsonify({'success': False, 'message': 'No file selected'}), 400
        if not image_service.image_repository.is_supported(file.filename):
            return jsonify({'success': False, 'message': f'Unsupported file type: {file.filename}'}), 400

        filename = secure_filename(file.filename)
        temp_path = Path(app.config['UPLOAD_FOLDER']) / f"{uuid.uuid4().hex}_{filename}"
        file.save(str(temp_path))
        try:
            image_service.load(temp_path, name)
        finally:
            # Clean up temp file
            if temp_path.exists():
                temp_path.unlink()

        image = image_service.get_image(name)
        return jsonify({
            'success': True,
            'name': name,
            'width': image.width,
            'height': image.height,
        })

    @app.route('/api/images/<name>', methods=['GET'])
    def download_image(name):
        fmt = request.args.get('format', 'png').lower()
        if not image_service.image_repository.is_supported(f"{name}.{fmt}"):
            raise InvalidArgumentError(f"Unsupported download format '{fmt}'")
        data = image_service.image_repository.encode(image_service.get_image(name), fmt)
        return send_file(
            BytesIO(data),
            mimetype=MIMETYPES.get(fmt, 'application/octet-stream'),
            download_name=f"{name}.{fmt}",
        )

    @app.route('/api/images/<name>/histogram', methods=['GET'])
    def image_histogram(name):
        histogram = image_service.histogram(name)
        return jsonify({'success': True, 'name': name, 'histogram': histogram.to_dict()})

    @app.route('/api/images/<src>/<operation>', methods=['POST'])
    def run_operation(src, operation):
        """Apply one editing operation from *src* into body['dest'] (default: src)."""
        operation = operation.lower()
        if operation in BLOCKED_VERBS:
            raise InvalidArgumentError(f"'{operation}' is not available over HTTP")

        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            raise InvalidArgumentError("Request body must be a JSON object")
        args = _operation_args(operation, src, body)
        command = build(operation, args)
        if not isinstance(command, Command):
            raise InvalidArgumentError(f"'{operation}' is not an image operation")

        execute(command, image_service)
        dest = args[-1]
        result = image_service.get_image(dest)
        logger.info(f"{operation}: '{src}' -> '{dest}'")
        return jsonify({
            'success': True,
            'operation': operation,
            'dest': dest,
            'width': result.width,
            'height': result.height,
        })

    return app


def main():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    app = create_app()
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "5000"))
    logger.info(f"Starting pixelshop API on {host}:{port} (uploads: {UPLOAD_FOLDER})")
    app.run(host=host, port=port, threaded=True)


if __name__ == '__main__':
    main()
