from __future__ import annotations

from flask import Flask, request

from ..common.images import face_input
from ..common.web import current_user_id, domain_error_response, login_required, ok, request_payload, server_error_response
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/me/face", methods=["POST"], endpoint="enroll_face")
    @login_required
    def enroll_face():
        """Add one face descriptor (photo or client-side descriptor) to my gallery."""

        try:
            image, descriptor = face_input(request_payload(), request.files)
            user_id = current_user_id()
            descriptor_id = container.face_service.enroll(user_id=user_id, image=image, descriptor=descriptor)
            return ok(
                201,
                descriptor_id=descriptor_id,
                faces_enrolled=container.face_service.enrolled_count(user_id),
                message="Face enrolled",
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("enrolling the face")

    @app.route("/me/face", methods=["DELETE"], endpoint="reset_face")
    @login_required
    def reset_face():
        try:
            removed = container.face_service.reset(user_id=current_user_id())
            return ok(removed=removed)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("removing face data")
