from __future__ import annotations

import logging

import face_recognition
import numpy as np

from ..core.exceptions import NoFaceDetectedError

logger = logging.getLogger(__name__)


def _box_area(box: tuple[int, int, int, int]) -> int:
    top, right, bottom, left = box
    return max(0, bottom - top) * max(0, right - left)


class FaceEncoder:
    """Wraps the dlib models behind ``face_recognition``.

    Constructed once by the container and shared; the models are loaded when
    ``face_recognition`` is imported.
    """

    def __init__(self, *, detection_model: str = "hog", num_jitters: int = 1, landmarks_model: str = "small"):
        self._detection_model = detection_model
        self._num_jitters = int(num_jitters)
        self._landmarks_model = landmarks_model

    def encode(self, rgb_image: np.ndarray) -> list[float]:
        boxes = face_recognition.face_locations(rgb_image, model=self._detection_model)
        if not boxes:
            raise NoFaceDetectedError("No face detected in the photo, please retake it")

        if len(boxes) > 1:
            logger.info("Found %d faces, using the largest", len(boxes))
        box = max(boxes, key=_box_area)

        encodings = face_recognition.face_encodings(
            rgb_image,
            known_face_locations=[box],
            num_jitters=self._num_jitters,
            model=self._landmarks_model,
        )
        if not encodings:
            raise NoFaceDetectedError("No face detected in the photo, please retake it")
        return [float(x) for x in encodings[0]]
