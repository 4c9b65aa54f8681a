from __future__ import annotations

from flask import Flask

from ..common.web import (
    api_view,
    current_worker_id,
    fail,
    json_body,
    login_required,
    ok,
    pending_required,
    pending_worker_id,
    start_session,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    passkeys = container.passkey_service
    auth = container.auth_service

    @app.route("/api/passkey/register-options", methods=["POST"], endpoint="passkey_register_options")
    @login_required
    @api_view
    def passkey_register_options():
        worker = auth.get_active_worker(current_worker_id())
        return ok(options=passkeys.registration_options(worker))

    @app.route("/api/passkey/register-verify", methods=["POST"], endpoint="passkey_register_verify")
    @login_required
    @api_view
    def passkey_register_verify():
        data = json_body()
        if not isinstance(data.get("response"), dict):
            return fail("Missing required fields")
        passkeys.verify_registration(current_worker_id(), data["response"], data.get("device_name"))
        return ok(passkeys=passkeys.list_passkeys(current_worker_id()))

    @app.route("/api/passkey/auth-options", methods=["POST"], endpoint="passkey_auth_options")
    @pending_required
    @api_view
    def passkey_auth_options():
        return ok(options=passkeys.authentication_options(pending_worker_id()))

    @app.route("/api/passkey/auth-verify", methods=["POST"], endpoint="passkey_auth_verify")
    @pending_required
    @api_view
    def passkey_auth_verify():
        data = json_body()
        if not isinstance(data.get("response"), dict):
            return fail("Missing required fields")
        worker_id = pending_worker_id()
        passkeys.verify_authentication(worker_id, data["response"])
        worker = auth.get_active_worker(worker_id)
        return ok(session=start_session(worker, days=app.config["SESSION_DAYS"]))

    @app.route("/api/passkey/list", methods=["GET"], endpoint="passkey_list")
    @login_required
    @api_view
    def passkey_list():
        return ok(passkeys=passkeys.list_passkeys(current_worker_id()))

    @app.route("/api/passkey/delete", methods=["POST"], endpoint="passkey_delete")
    @login_required
    @api_view
    def passkey_delete():
        passkeys.delete(current_worker_id(), json_body().get("credential_id", ""))
        return ok()
