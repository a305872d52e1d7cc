from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Protocol, Sequence


@dataclass(frozen=True)
class GalleryEntry:
    """One enrolled face descriptor owned by a student."""

    descriptor_id: int
    user_id: int
    vector: Sequence[float]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FaceMatch:
    user_id: int
    descriptor_id: int
    distance: float

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "distance": round(self.distance, 4)}


class DescriptorEncoder(Protocol):
    """Turns an RGB image into a face descriptor (see ``encoder.FaceEncoder``)."""

    def encode(self, rgb_image: Any) -> list[float]:
        raise NotImplementedError
