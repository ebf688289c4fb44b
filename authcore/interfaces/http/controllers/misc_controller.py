# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping

from flask import Blueprint, Response, jsonify

from authcore.infrastructure.health import HealthCheck, run_checks


class MiscController:
    def __init__(self, *, checks: Mapping[str, HealthCheck]) -> None:
        self._checks = checks

    def index(self) -> Response:
        return jsonify({"ok": True, "message": "Hello world!"})

    def health(self) -> tuple[Response, int]:
        healthy, results = run_checks(self._checks)
        return jsonify({"ok": healthy, **results}), 200 if healthy else 503

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp
