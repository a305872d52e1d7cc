from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, email, roll_number, password_hash, role, class_id, phone, is_active"


def _user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        roll_number=row["roll_number"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        class_id=row.get("class_id"),
        phone=row.get("phone"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_where(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_where("user_id=%s", (int(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_where("email=%s", (email.lower(),))

    def get_by_roll_number(self, roll_number: str) -> Optional[User]:
        return self._get_where("roll_number=%s", (roll_number,))

    def find_by_login(self, login_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM users
                WHERE email=%s OR roll_number=%s OR name=%s
                ORDER BY (email=%s) DESC, (roll_number=%s) DESC, user_id
                LIMIT 1
                """,
                (login_id.lower(), login_id, login_id, login_id.lower(), login_id),
            )
            row = fetchone(cur)
            return _user(row) if row else None

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users")
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create_user(
        self,
        *,
        name: str,
        email: str,
        roll_number: str,
        password_hash: str,
        role: Role,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, roll_number, password_hash, role, is_active)
                    VALUES(%s,%s,%s,%s,%s,1)
                    """,
                    (name, email.lower(), roll_number, password_hash, role.value),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError:
            # lost a race against a concurrent signup with the same email/roll
            raise ValidationError("Email or roll number already exists")

    def update_profile(self, user_id: int, *, name: str, phone: Optional[str], class_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET name=%s, phone=%s, class_id=%s WHERE user_id=%s",
                (name, phone, class_id, int(user_id)),
            )
            return cur.rowcount > 0

    def set_role(self, user_id: int, *, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET role=%s WHERE user_id=%s", (role.value, int(user_id)))
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def list_users(self, *, class_id: Optional[int] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if class_id is None:
                cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY role, name")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE class_id=%s ORDER BY roll_number",
                    (int(class_id),),
                )
            return [_user(r) for r in fetchall(cur)]
