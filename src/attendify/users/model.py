from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a student, staff member or the owner.

    Plain data object, no DB access here.
    """

    user_id: int
    name: str
    email: str
    roll_number: str
    password_hash: str
    role: Role
    class_id: Optional[int] = None
    phone: Optional[str] = None
    is_active: bool = True

    def to_public_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "roll_number": self.roll_number,
            "role": self.role.value,
            "class_id": self.class_id,
            "phone": self.phone,
            "is_active": self.is_active,
        }
