from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    current_role,
    current_user_id,
    domain_error_response,
    login_required,
    ok,
    roles_required,
    server_error_response,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    def _note() -> str:
        data = request.get_json(silent=True) or {}
        return str(data.get("note", "")) if isinstance(data, dict) else ""

    @app.route("/requests", methods=["GET"], endpoint="my_requests")
    @login_required
    def my_requests():
        try:
            return ok(requests=list(container.request_service.list_mine(user_id=current_user_id())))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("listing requests")

    @app.route("/admin/requests", methods=["GET"], endpoint="admin_requests")
    @roles_required(Role.OWNER, Role.STAFF)
    def admin_requests():
        try:
            rows = container.request_service.list_pending(
                current_role=current_role(),
                class_id=request.args.get("class_id", type=int),
            )
            return ok(requests=list(rows))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("listing pending requests")

    @app.route("/admin/requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_request")
    @roles_required(Role.OWNER, Role.STAFF)
    def approve_request(request_id: int):
        try:
            req = container.request_service.approve(
                current_role=current_role(),
                reviewer_id=current_user_id(),
                request_id=request_id,
                note=_note(),
            )
            return ok(request=req.to_dict(), message="Request approved")
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("approving the request")

    @app.route("/admin/requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_request")
    @roles_required(Role.OWNER, Role.STAFF)
    def reject_request(request_id: int):
        try:
            req = container.request_service.reject(
                current_role=current_role(),
                reviewer_id=current_user_id(),
                request_id=request_id,
                note=_note(),
            )
            return ok(request=req.to_dict(), message="Request rejected")
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("rejecting the request")
