from __future__ import annotations

from typing import Protocol, Sequence

from .model import GalleryEntry


class FaceGalleryRepository(Protocol):
    def add_descriptor(self, *, user_id: int, vector: Sequence[float]) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[GalleryEntry]:
        raise NotImplementedError

    def list_for_class(self, class_id: int) -> Sequence[GalleryEntry]:
        """Descriptors of active students enrolled in the class, ordered by descriptor_id."""

        raise NotImplementedError

    def clear_for_user(self, user_id: int) -> int:
        raise NotImplementedError
