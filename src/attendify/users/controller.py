from __future__ import annotations

from flask import Flask, request, session

from ..common.web import (
    current_role,
    current_user_id,
    domain_error_response,
    fail,
    json_body,
    login_required,
    ok,
    roles_required,
    server_error_response,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from .service import SessionUser


def register(app: Flask, container: Container) -> None:
    def _start_session(s_user: SessionUser) -> None:
        session.clear()
        session.permanent = True
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        session["roll_number"] = s_user.roll_number

    @app.route("/auth/check-email", methods=["POST"], endpoint="check_email")
    def check_email():
        try:
            data = json_body()
            if not data.get("email"):
                return fail("Email required")
            return ok(exists=container.auth_service.check_email(data["email"]))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("checking the email")

    @app.route("/signup", methods=["POST"], endpoint="signup")
    def signup():
        try:
            data = json_body()
            s_user = container.auth_service.signup(
                name=data.get("name", ""),
                email=data.get("email", ""),
                roll_number=data.get("rollNumber", ""),
                password=data.get("password", ""),
            )
            _start_session(s_user)
            return ok(201, user=s_user.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("signing up")

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        try:
            data = json_body()
            s_user = container.auth_service.login(data.get("loginId", ""), data.get("password", ""))
            _start_session(s_user)
            return ok(user=s_user.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("logging in")

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            user = container.user_service.get_profile(current_user_id())
            return ok(
                user=user.to_public_dict(),
                faces_enrolled=container.face_service.enrolled_count(user.user_id),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("loading the profile")

    @app.route("/me", methods=["PUT"], endpoint="update_me")
    @login_required
    def update_me():
        try:
            data = json_body()
            allowed = {k: data[k] for k in ("name", "phone", "class_id") if k in data}
            user = container.user_service.update_profile(user_id=current_user_id(), **allowed)
            session["name"] = user.name
            return ok(user=user.to_public_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("updating the profile")

    @app.route("/users", methods=["GET"], endpoint="list_users")
    @roles_required(Role.OWNER, Role.STAFF)
    def list_users():
        try:
            class_id = request.args.get("class_id", type=int)
            users = container.user_service.list_users(current_role=current_role(), class_id=class_id)
            return ok(users=[u.to_public_dict() for u in users])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("listing users")

    @app.route("/users/<int:user_id>/role", methods=["PUT"], endpoint="assign_role")
    @roles_required(Role.OWNER)
    def assign_role(user_id: int):
        try:
            data = json_body()
            try:
                role = Role(data.get("role", ""))
            except ValueError:
                raise ValidationError("Role must be staff or student")

            container.user_service.assign_role(
                current_role=current_role(),
                current_user_id=current_user_id(),
                user_id=user_id,
                role=role,
            )
            return ok(message="Role updated")
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("assigning the role")

    @app.route("/users/<int:user_id>/active", methods=["PUT"], endpoint="set_user_active")
    @roles_required(Role.OWNER)
    def set_user_active(user_id: int):
        try:
            data = json_body()
            if not isinstance(data.get("is_active"), bool):
                raise ValidationError("is_active must be true or false")

            container.user_service.set_active(
                current_role=current_role(),
                current_user_id=current_user_id(),
                user_id=user_id,
                is_active=data["is_active"],
            )
            return ok(message="Account updated")
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return server_error_response("updating the account")
