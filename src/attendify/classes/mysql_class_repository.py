from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float
from .model import ClassLocation
from .repository import ClassRepository


def _class(r: dict) -> ClassLocation:
    return ClassLocation(
        class_id=int(r["class_id"]),
        name=r["name"],
        latitude=optional_float(r.get("latitude")),
        longitude=optional_float(r.get("longitude")),
        radius_m=float(r["radius_m"]),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[ClassLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, name, latitude, longitude, radius_m FROM classes WHERE class_id=%s",
                (int(class_id),),
            )
            r = fetchone(cur)
            return _class(r) if r else None

    def get_by_name(self, name: str) -> Optional[ClassLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, name, latitude, longitude, radius_m FROM classes WHERE name=%s",
                (name,),
            )
            r = fetchone(cur)
            return _class(r) if r else None

    def list_all(self) -> Sequence[ClassLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id, name, latitude, longitude, radius_m FROM classes ORDER BY name")
            return [_class(r) for r in fetchall(cur)]

    def create_class(
        self,
        *,
        name: str,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_m: float,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(name, latitude, longitude, radius_m) VALUES(%s,%s,%s,%s)",
                (name, latitude, longitude, float(radius_m)),
            )
            return int(cur.lastrowid)

    def update_location(self, class_id: int, *, latitude: float, longitude: float, radius_m: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET latitude=%s, longitude=%s, radius_m=%s WHERE class_id=%s",
                (float(latitude), float(longitude), float(radius_m), int(class_id)),
            )
            return cur.rowcount > 0
