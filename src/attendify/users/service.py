from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..classes.repository import ClassRepository
from ..common.validators import require_email, require_int, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session and echo back after signup/login."""

    user_id: int
    name: str
    role: Role
    roll_number: str
    class_id: Optional[int]

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.user_id,
            name=user.name,
            role=user.role,
            roll_number=user.roll_number,
            class_id=user.class_id,
        )

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "rollNumber": self.roll_number,
            "class_id": self.class_id,
        }


class AuthService:
    """Use case: signup, login and the email availability check."""

    def __init__(self, users: UserRepository, *, min_password_length: int = MIN_PASSWORD_LENGTH):
        self._users = users
        self._min_password_length = int(min_password_length)

    def check_email(self, email: str) -> bool:
        return self._users.get_by_email(require_email(email)) is not None

    def signup(self, *, name: str, email: str, roll_number: str, password: str) -> SessionUser:
        if not name or not email or not roll_number or not password:
            raise ValidationError("Missing fields")

        name = require_non_empty(name, "Name")
        email = require_email(email)
        roll_number = require_non_empty(roll_number, "Roll number")
        require_min_length(password, "Password", self._min_password_length)

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")
        if self._users.get_by_roll_number(roll_number):
            raise ValidationError("Roll number already exists")

        # the very first account bootstraps the institution
        role = Role.OWNER if self._users.count_all() == 0 else Role.STUDENT

        user_id = self._users.create_user(
            name=name,
            email=email,
            roll_number=roll_number,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Signed up user %s (%s) as %s", user_id, roll_number, role.value)
        return SessionUser(user_id=user_id, name=name, role=role, roll_number=roll_number, class_id=None)

    def login(self, login_id: str, password: str) -> SessionUser:
        if not login_id or not password:
            raise ValidationError("Missing fields")

        user = self._users.find_by_login(login_id.strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser.from_user(user)


class UserService:
    """Use case: profiles and role management."""

    def __init__(self, users: UserRepository, classes: ClassRepository):
        self._users = users
        self._classes = classes

    def get_profile(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(
        self,
        *,
        user_id: int,
        name: Any = _UNSET,
        phone: Any = _UNSET,
        class_id: Any = _UNSET,
    ) -> User:
        """Partial update; email and roll number are immutable here."""

        user = self.get_profile(user_id)

        new_name = user.name if name is _UNSET else require_non_empty(name, "Name")
        new_phone = user.phone if phone is _UNSET else ((phone or "").strip() or None)
        new_class_id = user.class_id
        if class_id is not _UNSET:
            new_class_id = None if class_id in (None, "") else require_int(class_id, "Class", minimum=1)
            if new_class_id is not None and not self._classes.get_by_id(new_class_id):
                raise NotFoundError("Class not found")

        if not self._users.update_profile(user.user_id, name=new_name, phone=new_phone, class_id=new_class_id):
            raise ValidationError("Updating the profile failed")
        return self.get_profile(user.user_id)

    def assign_role(self, *, current_role: Role, current_user_id: int, user_id: int, role: Role) -> None:
        if current_role != Role.OWNER:
            raise AuthorizationError("Only the owner can assign roles")
        if role == Role.OWNER:
            raise ValidationError("There can only be one owner")
        if int(user_id) == int(current_user_id):
            raise ValidationError("The owner cannot change their own role")

        user = self.get_profile(user_id)
        if user.role == Role.OWNER:
            raise ValidationError("The owner's role cannot be changed")

        if not self._users.set_role(user.user_id, role=role):
            raise ValidationError("Assigning the role failed")
        logger.info("User %s role %s -> %s", user.user_id, user.role.value, role.value)

    def set_active(self, *, current_role: Role, current_user_id: int, user_id: int, is_active: bool) -> None:
        if current_role != Role.OWNER:
            raise AuthorizationError("Only the owner can (de)activate accounts")
        if int(user_id) == int(current_user_id):
            raise ValidationError("You cannot deactivate your own account")

        user = self.get_profile(user_id)
        if not self._users.set_active(user.user_id, is_active=bool(is_active)):
            raise ValidationError("Updating the account failed")

    def list_users(self, *, current_role: Role, class_id: Optional[int] = None) -> Sequence[User]:
        if current_role not in {Role.OWNER, Role.STAFF}:
            raise AuthorizationError("You do not have permission")
        return self._users.list_users(class_id=class_id)
