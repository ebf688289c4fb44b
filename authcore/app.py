# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from flask import Flask, Response
from flask_cors import CORS

from authcore.infrastructure.container import Container
from authcore.infrastructure.db import init_db
from authcore.shared.config import load_config
from authcore.shared.logging import logger, setup_logging
from authcore.shared.middleware.error_handler import configure_error_handling
from authcore.shared.middleware.request_logger import (REQUEST_ID_HEADER,
                                                     configure_request_logging)


def create_app(container: Container | None = None) -> Flask:
    config = load_config()
    setup_logging(config.logging)

    container = container or Container(config)
    # Fail at startup, not on the first login: a missing JWT_SECRET raises ConfigError here.
    _ = container.token_service
    _ = container.password_hasher
    _ = container.hashing_executor

    init_db()

    app = Flask(__name__)
    configure_error_handling(app, debug=config.logging.debug)
    configure_request_logging(app, debug=config.logging.debug)

    # Bearer tokens only, so no credentialed (cookie) CORS.
    CORS(
        app,
        resources={r"/api/*": {"origins": config.security.allowed_origins}},
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    _config = load_config()
    create_app().run(host=_config.host, port=_config.port)
