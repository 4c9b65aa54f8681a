from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_duration
from ..common.web import api_view, current_worker_id, json_body, login_required, ok
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    punches = container.punch_service

    # Kiosk actions carry the PIN on every call; there is no kiosk session.
    @app.route("/api/kiosk/clock-in", methods=["POST"], endpoint="kiosk_clock_in")
    @api_view
    def kiosk_clock_in():
        worker = auth.authenticate_worker(json_body().get("pin", ""))
        punch = punches.clock_in(worker.worker_id)
        return ok(punch=punches.punch_view(punch))

    @app.route("/api/kiosk/clock-out", methods=["POST"], endpoint="kiosk_clock_out")
    @api_view
    def kiosk_clock_out():
        worker = auth.authenticate_worker(json_body().get("pin", ""))
        punch, worked_ms = punches.clock_out(worker.worker_id)
        return ok(
            punch=punches.punch_view(punch),
            time_worked=format_duration(worked_ms),
            time_worked_ms=worked_ms,
        )

    @app.route("/api/me/status", methods=["GET"], endpoint="my_status")
    @login_required
    @api_view
    def my_status():
        return ok(**punches.status_view(current_worker_id()))

    @app.route("/api/me/history", methods=["GET"], endpoint="my_history")
    @login_required
    @api_view
    def my_history():
        try:
            days = int(request.args.get("days", DEFAULT_HISTORY_DAYS))
        except ValueError:
            raise ValidationError("days must be a number.")
        pairs = punches.history(current_worker_id(), days=days)
        return ok(history=[punches.pair_view(pp) for pp in pairs])

    @app.route("/api/me/weekly-hours", methods=["GET"], endpoint="my_weekly_hours")
    @login_required
    @api_view
    def my_weekly_hours():
        return ok(**punches.weekly_hours(current_worker_id()))
