from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email"), data.get("password"))

        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        session["linked_id"] = s_user.linked_id

        return jsonify(
            {
                "success": True,
                "user": {
                    "id": s_user.user_id,
                    "name": s_user.name,
                    "email": s_user.email,
                    "role": s_user.role.value,
                    "linkedId": s_user.linked_id,
                },
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    def me():
        if "user_id" not in session:
            return jsonify({"success": False, "error": "AUTHENTICATION_FAILED", "message": "Not logged in"}), 401
        return jsonify(
            {
                "id": session["user_id"],
                "name": session.get("name"),
                "role": session.get("role"),
                "linkedId": session.get("linked_id"),
            }
        )

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="api_change_password")
    def change_password():
        data = json_body()
        container.auth_service.change_password(
            data.get("userId") or session.get("user_id"),
            current_password=data.get("currentPassword"),
            new_password=data.get("newPassword"),
        )
        return jsonify({"success": True, "message": "Password changed successfully"})
