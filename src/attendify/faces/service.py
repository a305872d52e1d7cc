from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD, FACE_DESCRIPTOR_SIZE
from ..core.exceptions import FaceNotRecognizedError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .matcher import match_face, nearest_face
from .model import DescriptorEncoder, FaceMatch
from .repository import FaceGalleryRepository

logger = logging.getLogger(__name__)


class FaceService:
    """Use case: enroll face descriptors and identify a student from a photo."""

    def __init__(
        self,
        gallery: FaceGalleryRepository,
        users: UserRepository,
        encoder: DescriptorEncoder,
        *,
        threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
        descriptor_size: int = FACE_DESCRIPTOR_SIZE,
    ):
        self._gallery = gallery
        self._users = users
        self._encoder = encoder
        self._threshold = float(threshold)
        self._descriptor_size = int(descriptor_size)

    @property
    def threshold(self) -> float:
        return self._threshold

    def _check_descriptor(self, values: Any) -> list[float]:
        if not isinstance(values, (list, tuple)):
            raise ValidationError("Face descriptor must be a list of numbers")
        if len(values) != self._descriptor_size:
            raise ValidationError(f"Face descriptor must have {self._descriptor_size} values")
        try:
            vector = [float(x) for x in values]
        except (TypeError, ValueError):
            raise ValidationError("Face descriptor must be a list of numbers")
        if any(x != x for x in vector):
            raise ValidationError("Face descriptor contains NaN")
        return vector

    def descriptor_from(self, *, image: Any = None, descriptor: Optional[Sequence[float]] = None) -> list[float]:
        """Probe vector from a client-computed descriptor or from an RGB image."""

        if descriptor is not None:
            return self._check_descriptor(descriptor)
        if image is not None:
            return self._check_descriptor(self._encoder.encode(image))
        raise ValidationError("A photo or a face descriptor is required")

    def enroll(self, *, user_id: int, image: Any = None, descriptor: Optional[Sequence[float]] = None) -> int:
        """Append one descriptor to the user's gallery (several sessions are allowed)."""

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

        vector = self.descriptor_from(image=image, descriptor=descriptor)
        descriptor_id = self._gallery.add_descriptor(user_id=int(user_id), vector=vector)
        logger.info("Enrolled face descriptor %s for user %s", descriptor_id, user_id)
        return descriptor_id

    def enrolled_count(self, user_id: int) -> int:
        return len(self._gallery.list_for_user(int(user_id)))

    def reset(self, *, user_id: int) -> int:
        removed = self._gallery.clear_for_user(int(user_id))
        logger.info("Removed %d face descriptors for user %s", removed, user_id)
        return removed

    def identify(self, *, class_id: int, image: Any = None, descriptor: Optional[Sequence[float]] = None) -> FaceMatch:
        """Identify a student enrolled in ``class_id``.

        Raises NoFaceDetectedError (from the encoder) when the photo has no
        face, and FaceNotRecognizedError when the nearest descriptor is above
        the threshold or nobody in the class is enrolled.
        """

        probe = self.descriptor_from(image=image, descriptor=descriptor)
        gallery = self._gallery.list_for_class(int(class_id))

        match = match_face(probe, gallery, threshold=self._threshold)
        if match is not None:
            return match

        # only for the distance reported back
        best = nearest_face(probe, gallery)
        if best is None:
            logger.info("Face not recognized: class %s has no enrolled faces", class_id)
            raise FaceNotRecognizedError("Face not recognized")
        logger.info("Face not recognized in class %s (nearest %.4f > %.2f)", class_id, best.distance, self._threshold)
        raise FaceNotRecognizedError("Face not recognized", distance=best.distance)
