# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from authapi.infrastructure.container import Container
from authapi.infrastructure.db import init_db
from authapi.shared.config import load_config
from authapi.shared.logging import logger, setup_logging
from authapi.shared.middleware.error_handler import configure_error_handling
from authapi.shared.middleware.request_logger import configure_request_logging

# Request bodies are small JSON documents.
MAX_CONTENT_LENGTH = 10 * 1024


def create_app(container: Container | None = None) -> Flask:
    config = load_config()
    setup_logging("DEBUG" if config.debug_logging else None)
    init_db()

    container = container or Container(config)

    app = Flask(__name__)
    app.config.update(MAX_CONTENT_LENGTH=MAX_CONTENT_LENGTH)
    configure_error_handling(app)
    configure_request_logging(app)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())
    app.extensions["authapi.container"] = container

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


def main() -> None:
    config = load_config()
    create_app().run(host="0.0.0.0", port=config.port, debug=not config.is_production())


if __name__ == "__main__":
    main()
