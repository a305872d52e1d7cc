"""Nearest-neighbour face matching over enrolled descriptors.

Distances are Euclidean, the same metric ``face_recognition.face_distance``
uses for its 128-d dlib embeddings. The scan is linear over the gallery.

Tie-break: the gallery is ordered by ``descriptor_id`` before the scan and the
first minimum wins, so among equidistant descriptors the earliest enrolled one
is returned.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np

from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD
from .model import FaceMatch, GalleryEntry


def _as_vector(values: Sequence[float], *, what: str) -> np.ndarray:
    vec = np.asarray(values, dtype=np.float64)
    if vec.ndim != 1 or vec.size == 0:
        raise ValueError(f"{what} must be a non-empty 1-D vector")
    return vec


def nearest_face(probe: Sequence[float], gallery: Iterable[GalleryEntry]) -> Optional[FaceMatch]:
    """Nearest gallery entry to ``probe`` regardless of any threshold."""

    entries = sorted(gallery, key=lambda e: e.descriptor_id)
    if not entries:
        return None

    probe_vec = _as_vector(probe, what="Probe descriptor")
    for e in entries:
        if len(e.vector) != probe_vec.size:
            raise ValueError(
                f"Descriptor {e.descriptor_id} has length {len(e.vector)}, probe has {probe_vec.size}"
            )

    known = np.asarray([e.vector for e in entries], dtype=np.float64)
    distances = np.linalg.norm(known - probe_vec, axis=1)
    best = int(np.argmin(distances))

    winner = entries[best]
    return FaceMatch(user_id=winner.user_id, descriptor_id=winner.descriptor_id, distance=float(distances[best]))


def match_face(
    probe: Sequence[float],
    gallery: Iterable[GalleryEntry],
    *,
    threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
) -> Optional[FaceMatch]:
    """Nearest owner if its distance is within ``threshold``, else ``None``."""

    best = nearest_face(probe, gallery)
    if best is None or best.distance > threshold:
        return None
    return best
