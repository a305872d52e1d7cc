from __future__ import annotations

import base64
import binascii
import json
from typing import Optional

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError


def b64_to_rgb(data_url: str) -> np.ndarray:
    """Decode a base64 image (optionally a ``data:image/...;base64,`` URL) to RGB."""

    payload = (data_url or "").strip()
    if not payload:
        raise ValidationError("Image is required")
    if "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        img_bytes = base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        raise ValidationError("Image is not valid base64")

    nparr = np.frombuffer(img_bytes, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED) if nparr.size else None
    if img is None:
        raise ValidationError("Image could not be decoded")

    # PNG with alpha or grayscale uploads -> BGR first
    if len(img.shape) == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    elif len(img.shape) == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    # dlib requires a contiguous uint8 buffer
    return np.ascontiguousarray(rgb, dtype=np.uint8)


def upload_to_rgb(file_storage) -> np.ndarray:
    """Open a multipart upload (werkzeug FileStorage) as an RGB array."""

    try:
        img = Image.open(file_storage.stream).convert("RGB")
    except (UnidentifiedImageError, OSError):
        raise ValidationError("Uploaded file is not an image")
    return np.ascontiguousarray(np.array(img), dtype=np.uint8)


def face_input(payload: dict, files) -> tuple[Optional[np.ndarray], Optional[list]]:
    """(rgb_image, descriptor) from a multipart file, a descriptor list or a base64 image."""

    if files and "image" in files:
        return upload_to_rgb(files["image"]), None
    descriptor = payload.get("descriptor")
    if isinstance(descriptor, str):
        # multipart forms carry the descriptor as a JSON string
        try:
            descriptor = json.loads(descriptor)
        except ValueError:
            raise ValidationError("Face descriptor must be a JSON list of numbers")
    if descriptor is not None:
        return None, descriptor
    if payload.get("image"):
        return b64_to_rgb(payload["image"]), None
    raise ValidationError("A photo or a face descriptor is required")
