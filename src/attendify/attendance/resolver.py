"""Automatic attendance resolution.

Combines a face match (who) with a geofence check (where):

- face accepted and inside the fence  -> Present, marked_by=auto
  (and any pending request for that day is closed as approved)
- face accepted but outside the fence -> pending request for a reviewer
- face not accepted                   -> FaceNotRecognizedError, nothing written

The face-less path (``submit_geo``) trusts the logged-in student's identity
and applies the same inside/outside split.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..classes.model import ClassLocation
from ..classes.service import ClassService
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, MarkedBy, RequestStatus, ResolutionOutcome
from ..core.exceptions import NotFoundError, ValidationError
from ..faces.model import FaceMatch
from ..faces.service import FaceService
from ..geo.geofence import evaluate_geofence
from ..geo.model import Coordinates, GeofenceResult
from ..requests.repository import RequestRepository
from ..users.repository import UserRepository
from .model import Resolution
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceResolver:
    def __init__(
        self,
        attendance: AttendanceRepository,
        requests: RequestRepository,
        users: UserRepository,
        classes: ClassService,
        faces: FaceService,
    ):
        self._attendance = attendance
        self._requests = requests
        self._users = users
        self._classes = classes
        self._faces = faces

    def submit_face(
        self,
        *,
        class_id: int,
        coordinates: Coordinates,
        image: Any = None,
        descriptor: Optional[Sequence[float]] = None,
        now: Optional[datetime] = None,
    ) -> Resolution:
        now = now or now_local()

        # location config is checked before any face work
        cls = self._classes.require_location(class_id)
        match = self._faces.identify(class_id=cls.class_id, image=image, descriptor=descriptor)
        geo = evaluate_geofence(coordinates, cls)

        return self._resolve(user_id=match.user_id, cls=cls, coordinates=coordinates, geo=geo, face=match, now=now)

    def submit_geo(
        self,
        *,
        user_id: int,
        class_id: int,
        coordinates: Coordinates,
        now: Optional[datetime] = None,
    ) -> Resolution:
        now = now or now_local()

        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise NotFoundError("User not found")

        cls = self._classes.require_location(class_id)
        if user.class_id != cls.class_id:
            raise ValidationError("You are not enrolled in this class")

        geo = evaluate_geofence(coordinates, cls)
        return self._resolve(user_id=user.user_id, cls=cls, coordinates=coordinates, geo=geo, face=None, now=now)

    def _resolve(
        self,
        *,
        user_id: int,
        cls: ClassLocation,
        coordinates: Coordinates,
        geo: GeofenceResult,
        face: Optional[FaceMatch],
        now: datetime,
    ) -> Resolution:
        today = now.date()

        if geo.inside:
            record_id = self._attendance.put(
                user_id=user_id,
                class_id=cls.class_id,
                work_date=today,
                status=AttendanceStatus.PRESENT,
                marked_by=MarkedBy.AUTO,
                distance_m=geo.distance_m,
            )
            logger.info(
                "User %s present in class %s (%.1fm of %.1fm)", user_id, cls.class_id, geo.distance_m, geo.radius_m
            )
            self._close_pending(user_id=user_id, class_id=cls.class_id, work_date=today)
            return Resolution(
                outcome=ResolutionOutcome.PRESENT,
                user_id=user_id,
                class_id=cls.class_id,
                work_date=today,
                geofence=geo,
                face=face,
                record_id=record_id,
            )

        existing = self._requests.find_pending(user_id=user_id, class_id=cls.class_id, work_date=today)
        if existing:
            request_id = existing.request_id
        else:
            request_id = self._requests.create(
                user_id=user_id,
                class_id=cls.class_id,
                work_date=today,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                distance_m=geo.distance_m,
                face_distance=face.distance if face else None,
            )
        logger.info(
            "User %s outside class %s fence (%.1fm > %.1fm), request %s pending",
            user_id,
            cls.class_id,
            geo.distance_m,
            geo.radius_m,
            request_id,
        )
        return Resolution(
            outcome=ResolutionOutcome.PENDING,
            user_id=user_id,
            class_id=cls.class_id,
            work_date=today,
            geofence=geo,
            face=face,
            request_id=request_id,
        )

    def _close_pending(self, *, user_id: int, class_id: int, work_date: date) -> None:
        """A verified check-in settles any open request for the same day."""

        pending = self._requests.find_pending(user_id=user_id, class_id=class_id, work_date=work_date)
        if not pending:
            return
        if self._requests.decide(
            request_id=pending.request_id,
            status=RequestStatus.APPROVED,
            decided_by=None,
            reviewer_note="Closed by automatic check-in",
        ):
            logger.info("Request %s closed by automatic check-in", pending.request_id)
