from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .core.constants import (
    DEFAULT_FACE_MATCH_THRESHOLD,
    DEFAULT_GEOFENCE_RADIUS_M,
    DEFAULT_SESSION_DAYS,
    FACE_DESCRIPTOR_SIZE,
)
from .database.bootstrap import apply_schema, list_tables

from .container import build_container
from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .faces.controller import register as register_faces
from .requests.controller import register as register_requests
from .results.controller import register as register_results
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_CONTENT_LENGTH", 5 * 1024 * 1024))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.permanent_session_lifetime = timedelta(days=app.config["SESSION_DAYS"])

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        geofence_radius_m=float(getattr(settings, "GEOFENCE_RADIUS_M", DEFAULT_GEOFENCE_RADIUS_M)),
        face_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD", DEFAULT_FACE_MATCH_THRESHOLD)),
        descriptor_size=int(getattr(settings, "FACE_DESCRIPTOR_SIZE", FACE_DESCRIPTOR_SIZE)),
        detection_model=str(getattr(settings, "FACE_DETECTION_MODEL", "hog")),
    )
    app.extensions["attendify"] = container

    register_users(app, container)
    register_faces(app, container)
    register_classes(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_results(app, container)

    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        return "ATTENDIFY Backend Running"

    return app
