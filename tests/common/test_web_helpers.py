from __future__ import annotations

import base64

import cv2
import numpy as np
import pytest
from flask import Flask

from src.attendify.common.images import b64_to_rgb, face_input
from src.attendify.common.web import domain_error_response, roles_required, server_error_response
from src.attendify.core.enums import Role
from src.attendify.core.exceptions import (
    AuthorizationError,
    ClassLocationMissingError,
    FaceNotRecognizedError,
    NoFaceDetectedError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture()
def app():
    app = Flask(__name__)
    app.secret_key = "test-secret"
    return app


@pytest.mark.parametrize(
    "error, status, code",
    [
        (ValidationError("bad"), 400, "invalid"),
        (AuthorizationError("no"), 403, "forbidden"),
        (NotFoundError("missing"), 404, "not_found"),
        (NoFaceDetectedError("retake"), 422, "no_face"),
        (ClassLocationMissingError("no fence"), 409, "class_location_missing"),
        (FaceNotRecognizedError("who?"), 404, "not_recognized"),
    ],
)
def test_domain_errors_map_to_status_and_code(app, error, status, code):
    with app.app_context():
        resp, got_status = domain_error_response(error)

    assert got_status == status
    assert resp.get_json() == {"success": False, "code": code, "message": str(error)}


def test_not_recognized_carries_nearest_distance(app):
    with app.app_context():
        resp, _ = domain_error_response(FaceNotRecognizedError("Face not recognized", distance=0.612345))

    assert resp.get_json()["distance"] == 0.6123


def test_server_error_is_generic(app):
    with app.app_context():
        resp, status = server_error_response("marking attendance")

    assert status == 500
    assert resp.get_json()["code"] == "server_error"


def test_roles_required_checks_session(app):
    @app.route("/staff-only")
    @roles_required(Role.OWNER, Role.STAFF)
    def staff_only():
        return "ok"

    client = app.test_client()
    assert client.get("/staff-only").status_code == 401

    with client.session_transaction() as sess:
        sess["user_id"] = 7
        sess["role"] = "student"
    assert client.get("/staff-only").status_code == 403

    with client.session_transaction() as sess:
        sess["role"] = "staff"
    assert client.get("/staff-only").status_code == 200


def _png_data_url(bgr: np.ndarray) -> str:
    ok, buf = cv2.imencode(".png", bgr)
    assert ok
    return "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode("ascii")


def test_b64_to_rgb_swaps_channels():
    bgr = np.zeros((4, 4, 3), dtype=np.uint8)
    bgr[:, :, 0] = 255  # blue in OpenCV order

    rgb = b64_to_rgb(_png_data_url(bgr))

    assert rgb.shape == (4, 4, 3)
    assert rgb.dtype == np.uint8
    assert rgb[0, 0].tolist() == [0, 0, 255]
    assert rgb.flags["C_CONTIGUOUS"]


def test_b64_to_rgb_accepts_grayscale():
    rgb = b64_to_rgb(_png_data_url(np.full((3, 5), 128, dtype=np.uint8)))
    assert rgb.shape == (3, 5, 3)


@pytest.mark.parametrize("data", ["", "data:image/png;base64,", "bm90IGFuIGltYWdl"])
def test_b64_to_rgb_rejects_garbage(data):
    with pytest.raises(ValidationError):
        b64_to_rgb(data)


def test_face_input_prefers_descriptor_over_image():
    image, descriptor = face_input({"descriptor": "[0.1, 0.2]", "image": "ignored"}, None)

    assert image is None
    assert descriptor == [0.1, 0.2]


def test_face_input_requires_something():
    with pytest.raises(ValidationError):
        face_input({}, None)
