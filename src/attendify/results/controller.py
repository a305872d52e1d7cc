from __future__ import annotations

from flask import Flask

from ..common.web import (
    current_role,
    current_user_id,
    domain_error_response,
    json_body,
    login_required,
    ok,
    roles_required,
    server_error_response,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/results/marks", methods=["POST"], endpoint="enter_marks")
    @roles_required(Role.OWNER, Role.STAFF)
    def enter_marks():
        try:
            data = json_body()
            mark_id = container.result_service.enter_marks(
                current_role=current_role(),
                user_id=data.get("user_id"),
                semester=data.get("semester"),
                subject_code=data.get("subject_code", ""),
                subject_name=data.get("subject_name", ""),
                credits=data.get("credits"),
                marks_obtained=data.get("marks"),
                max_marks=data.get("max_marks", 100),
            )
            return ok(mark_id=mark_id, message="Marks saved")
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("saving marks")

    @app.route("/results/me", methods=["GET"], endpoint="my_results")
    @login_required
    def my_results():
        try:
            return ok(**container.result_service.results_for(current_user_id()).to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading results")

    @app.route("/results/<int:user_id>", methods=["GET"], endpoint="student_results")
    @roles_required(Role.OWNER, Role.STAFF)
    def student_results(user_id: int):
        try:
            return ok(**container.result_service.results_for(user_id).to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading results")
