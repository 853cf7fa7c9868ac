from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_value
from ..container import Container
from .model import Notification


def notification_json(n: Notification) -> dict:
    return {
        "id": n.notification_id,
        "userId": n.user_id,
        "title": n.title,
        "message": n.message,
        "type": n.type,
        "isRead": n.is_read,
        "createdAt": json_value(n.created_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications/<user_id>", methods=["GET"], endpoint="api_notifications")
    def list_notifications(user_id: str):
        unread_only = request.args.get("unreadOnly", "").lower() in {"1", "true", "yes"}
        rows = container.notification_service.list_for_user(user_id, unread_only=unread_only)
        return jsonify([notification_json(n) for n in rows])

    @app.route("/api/notifications/<notification_id>/read", methods=["PUT"], endpoint="api_notification_read")
    def mark_read(notification_id: str):
        n = container.notification_service.mark_read(notification_id)
        return jsonify({"success": True, "notification": notification_json(n)})

    @app.route("/api/notifications/read-all/<user_id>", methods=["PUT"], endpoint="api_notifications_read_all")
    def mark_all_read(user_id: str):
        count = container.notification_service.mark_all_read(user_id)
        return jsonify({"success": True, "message": "All notifications marked as read", "updated": count})
