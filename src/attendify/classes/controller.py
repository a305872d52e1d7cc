from __future__ import annotations

from flask import Flask

from ..common.web import (
    current_role,
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
    @app.route("/classes", methods=["GET"], endpoint="list_classes")
    @login_required
    def list_classes():
        try:
            return ok(classes=[c.to_dict() for c in container.class_service.list_all()])
        except Exception:
            return server_error_response("listing classes")

    @app.route("/classes/<int:class_id>", methods=["GET"], endpoint="get_class")
    @login_required
    def get_class(class_id: int):
        try:
            return ok(**{"class": container.class_service.get(class_id).to_dict()})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading the class")

    @app.route("/classes", methods=["POST"], endpoint="create_class")
    @roles_required(Role.OWNER, Role.STAFF)
    def create_class():
        try:
            data = json_body()
            class_id = container.class_service.create_class(
                current_role=current_role(),
                name=data.get("name", ""),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                radius_m=data.get("radius_m"),
            )
            return ok(201, **{"class": container.class_service.get(class_id).to_dict()})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("creating the class")

    @app.route("/classes/<int:class_id>/location", methods=["PUT"], endpoint="update_class_location")
    @roles_required(Role.OWNER, Role.STAFF)
    def update_class_location(class_id: int):
        try:
            data = json_body()
            cls = container.class_service.update_location(
                current_role=current_role(),
                class_id=class_id,
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                radius_m=data.get("radius_m"),
            )
            return ok(**{"class": cls.to_dict()})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("updating the class location")
