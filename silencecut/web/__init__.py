"""Flask application factory for the silencecut worker."""

import hmac
import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from silencecut.config import WorkerConfig
from silencecut.errors import SilenceCutError
from silencecut.pipeline import SilencePipeline
from silencecut.scratch import ScratchDir

logger = logging.getLogger(__name__)

# Paths reachable without a bearer token.
PUBLIC_PATHS = {"/"}


def create_app(
    config: WorkerConfig | None = None,
    pipeline: SilencePipeline | None = None,
) -> Flask:
    config = config or WorkerConfig.from_env()

    app = Flask(__name__)
    app.config["WORKER"] = config
    app.config["SCRATCH"] = ScratchDir(config.scratch_dir)
    app.config["PIPELINE"] = pipeline or SilencePipeline.from_config(config)
    app.config["MAX_CONTENT_LENGTH"] = config.max_upload_bytes

    from silencecut.web.routes import bp
    app.register_blueprint(bp)

    @app.before_request
    def require_api_key():
        if config.api_key is None or request.path in PUBLIC_PATHS:
            return None
        expected = f"Bearer {config.api_key}"
        supplied = request.headers.get("Authorization", "")
        if not hmac.compare_digest(supplied.encode(), expected.encode()):
            return jsonify({"status": "error", "reason": "unauthorized", "error": "Unauthorized"}), 401
        return None

    @app.errorhandler(SilenceCutError)
    def handle_pipeline_error(error: SilenceCutError):
        if error.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.path, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({"status": "error", "reason": "file_too_large", "error": "File too large"}), 413

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("%s %s crashed", request.method, request.path)
        body = {"status": "error", "reason": "internal_error", "error": "Internal server error"}
        return jsonify(body), 500

    return app
