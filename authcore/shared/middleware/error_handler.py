# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask

from authcore.shared.config import load_config
from authcore.shared.errors import register_error_handler


def configure_error_handling(app: Flask, *, debug: bool | None = None) -> None:
    """JSON error bodies for every failure; tracebacks logged only in debug mode."""
    if debug is None:
        debug = load_config().logging.debug
    register_error_handler(app, debug=debug)
