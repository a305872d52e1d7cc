from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_roll_number(self, roll_number: str) -> Optional[User]:
        raise NotImplementedError

    def find_by_login(self, login_id: str) -> Optional[User]:
        """Match on lowercase email, exact roll number, or exact name (in that order)."""

        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        roll_number: str,
        password_hash: str,
        role: Role,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, phone: Optional[str], class_id: Optional[int]) -> bool:
        raise NotImplementedError

    def set_role(self, user_id: int, *, role: Role) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_users(self, *, class_id: Optional[int] = None) -> Sequence[User]:
        raise NotImplementedError
