from __future__ import annotations

from flask import Flask, session

from ..common.security import mask_email
from ..common.web import (
    api_view,
    current_role,
    current_worker_id,
    fail,
    has_valid_session,
    json_body,
    login_required,
    ok,
    pending_required,
    pending_worker_id,
    roles_required,
    session_info,
    set_pending_login,
    start_session,
)
from ..core.constants import VERIFICATION_RESEND_COOLDOWN_SECONDS
from ..core.enums import MANAGER_ROLES, Role
from ..core.exceptions import AuthorizationError
from ..container import Container
from .service import WorkerService


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    workers = container.worker_service

    # -------- Kiosk --------
    @app.route("/api/kiosk/auth", methods=["POST"], endpoint="kiosk_auth")
    @api_view
    def kiosk_auth():
        result = auth.authenticate_kiosk(json_body().get("pin", ""))
        if result.is_admin:
            return ok(worker=None, is_admin=True, status=None)
        return ok(
            worker=WorkerService.to_view(result.worker),
            is_admin=False,
            status=container.punch_service.status_view(result.worker.worker_id),
        )

    @app.route("/api/kiosk/workers", methods=["POST"], endpoint="kiosk_add_worker")
    @api_view
    def kiosk_add_worker():
        data = json_body()
        if not auth.is_kiosk_admin_pin(data.get("admin_pin", "")):
            raise AuthorizationError("Admin PIN required.")

        worker = workers.create_worker(
            current_role=Role.ADMIN,
            pin=data.get("pin", ""),
            full_name=data.get("full_name", ""),
            role=data.get("role") or Role.WORKER.value,
            email=data.get("email"),
            phone=data.get("phone"),
        )
        return ok(201, worker=WorkerService.to_view(worker))

    # -------- Dashboard login --------
    @app.route("/api/auth/pin", methods=["POST"], endpoint="auth_pin")
    @api_view
    def auth_pin():
        login = auth.authenticate_dashboard(json_body().get("pin", ""))
        session.clear()
        set_pending_login(login.worker)
        return ok(
            worker={
                "id": login.worker.worker_id,
                "full_name": login.worker.full_name,
                "email": mask_email(login.worker.email),
            },
            has_passkeys=login.has_passkeys,
        )

    @app.route("/api/auth/send-code", methods=["POST"], endpoint="auth_send_code")
    @pending_required
    @api_view
    def auth_send_code():
        worker = auth.get_active_worker(pending_worker_id())
        expires_at = container.verification_service.send_code(
            worker_id=worker.worker_id,
            email=worker.email,
            worker_name=worker.full_name,
        )
        return ok(
            email=mask_email(worker.email),
            expires_at=expires_at.isoformat(),
            resend_after_seconds=VERIFICATION_RESEND_COOLDOWN_SECONDS,
        )

    @app.route("/api/auth/verify", methods=["POST"], endpoint="auth_verify")
    @pending_required
    @api_view
    def auth_verify():
        worker_id = pending_worker_id()
        container.verification_service.verify_code(worker_id=worker_id, code=json_body().get("code", ""))
        worker = auth.get_active_worker(worker_id)
        return ok(session=start_session(worker, days=app.config["SESSION_DAYS"]))

    @app.route("/api/auth/session", methods=["GET"], endpoint="auth_session")
    def auth_session():
        if not has_valid_session():
            return ok(authenticated=False, session=None)
        return ok(authenticated=True, session=session_info())

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return ok()

    # -------- Self-service profile --------
    @app.route("/api/me/profile", methods=["GET"], endpoint="my_profile")
    @login_required
    @api_view
    def my_profile():
        return ok(profile=workers.get_profile(current_worker_id()))

    @app.route("/api/me/email", methods=["POST"], endpoint="my_email")
    @login_required
    @api_view
    def my_email():
        workers.update_email(current_worker_id(), json_body().get("email", ""))
        profile = workers.get_profile(current_worker_id())
        session["email"] = profile["email"]
        return ok(profile=profile)

    @app.route("/api/me/phone", methods=["POST"], endpoint="my_phone")
    @login_required
    @api_view
    def my_phone():
        workers.update_phone(current_worker_id(), json_body().get("phone"))
        return ok(profile=workers.get_profile(current_worker_id()))

    @app.route("/api/me/notifications", methods=["POST"], endpoint="my_notifications")
    @login_required
    @api_view
    def my_notifications():
        data = json_body()
        if not isinstance(data.get("enabled"), bool):
            return fail("enabled must be true or false.")
        workers.update_notification_preference(current_worker_id(), data["enabled"])
        return ok(profile=workers.get_profile(current_worker_id()))

    # -------- Manager: workers --------
    @app.route("/api/manager/workers", methods=["GET"], endpoint="manager_workers")
    @roles_required(*MANAGER_ROLES)
    @api_view
    def manager_workers():
        return ok(workers=workers.list_workers())

    @app.route("/api/manager/workers", methods=["POST"], endpoint="manager_create_worker")
    @roles_required(*MANAGER_ROLES)
    @api_view
    def manager_create_worker():
        data = json_body()
        worker = workers.create_worker(
            current_role=current_role(),
            pin=data.get("pin", ""),
            full_name=data.get("full_name", ""),
            role=data.get("role") or Role.WORKER.value,
            email=data.get("email"),
            phone=data.get("phone"),
        )
        return ok(201, worker=WorkerService.to_view(worker))

    @app.route("/api/manager/workers/<int:worker_id>/activate", methods=["POST"], endpoint="manager_activate_worker")
    @roles_required(*MANAGER_ROLES)
    @api_view
    def manager_activate_worker(worker_id: int):
        workers.set_active(current_role=current_role(), worker_id=worker_id, is_active=True)
        return ok()

    @app.route(
        "/api/manager/workers/<int:worker_id>/deactivate", methods=["POST"], endpoint="manager_deactivate_worker"
    )
    @roles_required(*MANAGER_ROLES)
    @api_view
    def manager_deactivate_worker(worker_id: int):
        if worker_id == current_worker_id():
            return fail("You cannot deactivate yourself.")
        workers.set_active(current_role=current_role(), worker_id=worker_id, is_active=False)
        return ok()
