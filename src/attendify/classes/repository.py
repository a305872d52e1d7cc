from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassLocation


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[ClassLocation]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[ClassLocation]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ClassLocation]:
        raise NotImplementedError

    def create_class(
        self,
        *,
        name: str,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_m: float,
    ) -> int:
        raise NotImplementedError

    def update_location(self, class_id: int, *, latitude: float, longitude: float, radius_m: float) -> bool:
        raise NotImplementedError
