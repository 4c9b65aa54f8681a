from __future__ import annotations

from flask import Flask

from ..common.web import api_view, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/kiosk/production", methods=["POST"], endpoint="kiosk_production")
    @api_view
    def kiosk_production():
        data = json_body()
        worker = container.auth_service.authenticate_worker(data.get("pin", ""))
        logs = container.production_service.log_production(worker.worker_id, data.get("entries") or [])
        return ok(201, logs=[container.production_service.to_view(l) for l in logs])
