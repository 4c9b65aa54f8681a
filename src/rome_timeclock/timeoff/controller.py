from __future__ import annotations

from flask import Flask

from ..common.web import api_view, current_role, current_worker_id, json_body, login_required, ok, roles_required
from ..core.enums import MANAGER_ROLES
from ..container import Container
from .service import TimeOffService


def register(app: Flask, container: Container) -> None:
    timeoff = container.timeoff_service

    @app.route("/api/time-off", methods=["GET"], endpoint="my_time_off")
    @login_required
    @api_view
    def my_time_off():
        return ok(requests=[TimeOffService.to_view(r) for r in timeoff.my_requests(current_worker_id())])

    @app.route("/api/time-off", methods=["POST"], endpoint="submit_time_off")
    @login_required
    @api_view
    def submit_time_off():
        data = json_body()
        created = timeoff.submit(
            worker_id=current_worker_id(),
            request_type=data.get("type", ""),
            start_date=data.get("start_date", ""),
            end_date=data.get("end_date", ""),
            paid_hours=data.get("paid_hours", 0),
            unpaid_hours=data.get("unpaid_hours", 0),
            comments=data.get("comments"),
        )
        return ok(201, request=TimeOffService.to_view(created))

    @app.route("/api/manager/time-off/pending", methods=["GET"], endpoint="manager_pending_time_off")
    @roles_required(*MANAGER_ROLES)
    @api_view
    def manager_pending_time_off():
        items = timeoff.pending(current_role=current_role())
        return ok(requests=[TimeOffService.to_view(r) for r in items])

    @app.route("/api/manager/time-off", methods=["GET"], endpoint="manager_all_time_off")
    @roles_required(*MANAGER_ROLES)
    @api_view
    def manager_all_time_off():
        items = timeoff.all_requests(current_role=current_role())
        return ok(requests=[TimeOffService.to_view(r) for r in items])

    @app.route("/api/manager/time-off/<int:request_id>/approve", methods=["POST"], endpoint="approve_time_off")
    @roles_required(*MANAGER_ROLES)
    @api_view
    def approve_time_off(request_id: int):
        decided = timeoff.approve(
            current_role=current_role(),
            request_id=request_id,
            reviewer_id=current_worker_id(),
        )
        return ok(request=TimeOffService.to_view(decided))

    @app.route("/api/manager/time-off/<int:request_id>/deny", methods=["POST"], endpoint="deny_time_off")
    @roles_required(*MANAGER_ROLES)
    @api_view
    def deny_time_off(request_id: int):
        decided = timeoff.deny(
            current_role=current_role(),
            request_id=request_id,
            reviewer_id=current_worker_id(),
            reason=json_body().get("reason"),
        )
        return ok(request=TimeOffService.to_view(decided))
