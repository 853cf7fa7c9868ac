from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import build_container
from .middlewares.error_handler import register_error_handlers
from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .fees.controller import register as register_fees
from .leaves.controller import register as register_leaves
from .marks.controller import register as register_marks
from .notifications.controller import register as register_notifications
from .qr_sessions.controller import register as register_qr_sessions
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    container = build_container(
        qr_valid_minutes=int(getattr(settings, "QR_VALID_MINUTES", 15)),
        qr_extend_minutes=int(getattr(settings, "QR_EXTEND_MINUTES", 10)),
        fee_due_days=int(getattr(settings, "FEE_DUE_DAYS", 30)),
        low_attendance_threshold=float(getattr(settings, "LOW_ATTENDANCE_THRESHOLD", 75.0)),
        seed=bool(getattr(settings, "AUTO_SEED_DB", False)),
    )
    app.extensions["campus_container"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_qr_sessions(app, container)
    register_fees(app, container)
    register_leaves(app, container)
    register_marks(app, container)
    register_notifications(app, container)
    register_dashboard(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def health():
        return jsonify({"status": "ok", "tables": container.store.table_sizes()})

    logger.info("Campus system started (settings=%s)", settings_module)
    return app
