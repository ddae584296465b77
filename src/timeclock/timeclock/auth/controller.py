from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.auth import ADMIN_SESSION_KEY
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/verify", methods=["POST"], endpoint="verify_admin")
    def verify_admin():
        container.admin_auth_service.verify(json_body().get("password"))
        session.permanent = True
        session[ADMIN_SESSION_KEY] = True
        return jsonify({"success": True})

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="change_password")
    def change_password():
        data = json_body()
        container.admin_auth_service.change_password(data.get("currentPassword"), data.get("newPassword"))
        return jsonify({"success": True, "message": "パスワードを変更しました"})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})
