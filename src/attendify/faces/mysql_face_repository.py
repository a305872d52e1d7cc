from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_vector, fetchall, load_vector
from .model import GalleryEntry
from .repository import FaceGalleryRepository


def _entry(r: dict) -> GalleryEntry:
    return GalleryEntry(
        descriptor_id=int(r["descriptor_id"]),
        user_id=int(r["user_id"]),
        vector=load_vector(r["vector"]),
        created_at=r.get("created_at"),
    )


class MySQLFaceGalleryRepository(FaceGalleryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add_descriptor(self, *, user_id: int, vector: Sequence[float]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO face_descriptors(user_id, vector) VALUES(%s,%s)",
                (int(user_id), dump_vector(vector)),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int) -> Sequence[GalleryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT descriptor_id, user_id, vector, created_at
                FROM face_descriptors
                WHERE user_id=%s
                ORDER BY descriptor_id
                """,
                (int(user_id),),
            )
            return [_entry(r) for r in fetchall(cur)]

    def list_for_class(self, class_id: int) -> Sequence[GalleryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT f.descriptor_id, f.user_id, f.vector, f.created_at
                FROM face_descriptors f
                JOIN users u ON u.user_id = f.user_id
                WHERE u.class_id=%s AND u.is_active=1 AND u.role='student'
                ORDER BY f.descriptor_id
                """,
                (int(class_id),),
            )
            return [_entry(r) for r in fetchall(cur)]

    def clear_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM face_descriptors WHERE user_id=%s", (int(user_id),))
            return int(cur.rowcount)
