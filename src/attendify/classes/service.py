from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import require_float, require_non_empty
from ..core.constants import DEFAULT_GEOFENCE_RADIUS_M
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ClassLocationMissingError, NotFoundError, ValidationError
from ..geo.model import Coordinates
from .model import ClassLocation
from .repository import ClassRepository

logger = logging.getLogger(__name__)

_MANAGERS = {Role.OWNER, Role.STAFF}


class ClassService:
    """Use case: administer classes and their geofences (owner/staff)."""

    def __init__(self, classes: ClassRepository, *, default_radius_m: float = DEFAULT_GEOFENCE_RADIUS_M):
        self._classes = classes
        self._default_radius_m = self._check_radius(default_radius_m)

    @staticmethod
    def _check_radius(value: Any) -> float:
        radius = require_float(value, "Radius")
        if radius <= 0:
            raise ValidationError("Radius must be greater than 0 meters")
        return radius

    def create_class(
        self,
        *,
        current_role: Role,
        name: str,
        latitude: Any = None,
        longitude: Any = None,
        radius_m: Any = None,
    ) -> int:
        if current_role not in _MANAGERS:
            raise AuthorizationError("Only owner or staff can create classes")

        name = require_non_empty(name, "Class name")
        if self._classes.get_by_name(name):
            raise ValidationError("A class with this name already exists")

        radius = self._default_radius_m if radius_m is None else self._check_radius(radius_m)
        coords: Optional[Coordinates] = None
        if latitude is not None or longitude is not None:
            coords = Coordinates.parse(latitude, longitude)

        class_id = self._classes.create_class(
            name=name,
            latitude=coords.latitude if coords else None,
            longitude=coords.longitude if coords else None,
            radius_m=radius,
        )
        logger.info("Class %s created (id=%s, located=%s)", name, class_id, coords is not None)
        return class_id

    def update_location(
        self,
        *,
        current_role: Role,
        class_id: int,
        latitude: Any,
        longitude: Any,
        radius_m: Any = None,
    ) -> ClassLocation:
        if current_role not in _MANAGERS:
            raise AuthorizationError("Only owner or staff can change a class location")

        existing = self.get(class_id)
        coords = Coordinates.parse(latitude, longitude)
        radius = existing.radius_m if radius_m is None else self._check_radius(radius_m)

        if not self._classes.update_location(
            existing.class_id, latitude=coords.latitude, longitude=coords.longitude, radius_m=radius
        ):
            raise ValidationError("Updating the class location failed")

        return ClassLocation(
            class_id=existing.class_id,
            name=existing.name,
            latitude=coords.latitude,
            longitude=coords.longitude,
            radius_m=radius,
        )

    def get(self, class_id: int) -> ClassLocation:
        cls = self._classes.get_by_id(int(class_id))
        if not cls:
            raise NotFoundError("Class not found")
        return cls

    def require_location(self, class_id: int) -> ClassLocation:
        cls = self.get(class_id)
        if not cls.has_location:
            raise ClassLocationMissingError(f"Class {cls.name} has no registered location")
        return cls

    def list_all(self) -> Sequence[ClassLocation]:
        return self._classes.list_all()
