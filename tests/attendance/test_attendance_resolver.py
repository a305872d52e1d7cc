from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.attendify.attendance.model import AttendanceRecord
from src.attendify.attendance.resolver import AttendanceResolver
from src.attendify.classes.model import ClassLocation
from src.attendify.classes.service import ClassService
from src.attendify.core.enums import AttendanceStatus, MarkedBy, RequestStatus, ResolutionOutcome, Role
from src.attendify.core.exceptions import (
    ClassLocationMissingError,
    FaceNotRecognizedError,
    NoFaceDetectedError,
    NotFoundError,
    ValidationError,
)
from src.attendify.faces.model import GalleryEntry
from src.attendify.faces.service import FaceService
from src.attendify.geo.model import Coordinates
from src.attendify.requests.model import AttendanceRequest
from src.attendify.requests.service import RequestService
from src.attendify.users.model import User

CAMPUS = (12.9716, 77.5946)
METERS_PER_DEGREE = 111_194.93
NOW = datetime(2026, 3, 2, 9, 15, 0)


def _north_of_campus(meters: float) -> Coordinates:
    return Coordinates(latitude=CAMPUS[0] + meters / METERS_PER_DEGREE, longitude=CAMPUS[1])


class FakeUsersRepo:
    def __init__(self, users):
        self._users = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self._users.get(int(user_id))


class FakeClassesRepo:
    def __init__(self, classes):
        self._classes = {c.class_id: c for c in classes}

    def get_by_id(self, class_id):
        return self._classes.get(int(class_id))


class FakeGalleryRepo:
    def __init__(self, entries):
        self._entries = entries

    def list_for_class(self, class_id):
        return list(self._entries)


class FakeEncoder:
    def __init__(self, descriptor=None):
        self._descriptor = descriptor

    def encode(self, rgb_image):
        if self._descriptor is None:
            raise NoFaceDetectedError("No face detected in the photo, please retake it")
        return list(self._descriptor)


class FakeAttendanceRepo:
    """Keyed by (user_id, class_id, work_date): last write wins."""

    def __init__(self):
        self._next_id = 1
        self.records: dict[tuple, AttendanceRecord] = {}

    def put(self, *, user_id, class_id, work_date, status, marked_by, distance_m=None, note=None):
        key = (int(user_id), int(class_id), work_date)
        existing = self.records.get(key)
        attendance_id = existing.attendance_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self.records[key] = AttendanceRecord(
            attendance_id=attendance_id,
            user_id=int(user_id),
            class_id=int(class_id),
            work_date=work_date,
            status=status,
            marked_by=marked_by,
            distance_m=distance_m,
            note=note,
        )
        return attendance_id


class FakeRequestsRepo:
    def __init__(self):
        self._next_id = 1
        self.requests: dict[int, AttendanceRequest] = {}

    def create(self, *, user_id, class_id, work_date, latitude, longitude, distance_m, face_distance=None):
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = AttendanceRequest(
            request_id=rid,
            user_id=int(user_id),
            class_id=int(class_id),
            work_date=work_date,
            latitude=latitude,
            longitude=longitude,
            distance_m=distance_m,
            status=RequestStatus.PENDING,
            created_at=NOW,
            face_distance=face_distance,
        )
        return rid

    def find_pending(self, *, user_id, class_id, work_date):
        for r in self.requests.values():
            if (r.user_id, r.class_id, r.work_date, r.status) == (user_id, class_id, work_date, RequestStatus.PENDING):
                return r
        return None

    def get(self, request_id):
        return self.requests.get(int(request_id))

    def decide(self, *, request_id, status, decided_by, reviewer_note=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(
            req, status=status, decided_by=decided_by, decided_at=NOW, reviewer_note=reviewer_note
        )
        return True


def _student(user_id, class_id=1):
    return User(
        user_id=user_id,
        name=f"Student {user_id}",
        email=f"s{user_id}@college.edu",
        roll_number=f"R{user_id:03d}",
        password_hash="x",
        role=Role.STUDENT,
        class_id=class_id,
    )


def _build(*, probe=(0.3, 0.0, 0.0, 0.0), located=True, radius_m=50.0):
    cls = ClassLocation(
        class_id=1,
        name="CSE-A",
        latitude=CAMPUS[0] if located else None,
        longitude=CAMPUS[1] if located else None,
        radius_m=radius_m,
    )
    users = FakeUsersRepo([_student(7), _student(8, class_id=2)])
    gallery = FakeGalleryRepo([GalleryEntry(descriptor_id=1, user_id=7, vector=[0.0, 0.0, 0.0, 0.0])])
    faces = FaceService(gallery, users, FakeEncoder(probe), threshold=0.55, descriptor_size=4)
    attendance = FakeAttendanceRepo()
    requests = FakeRequestsRepo()
    resolver = AttendanceResolver(attendance, requests, users, ClassService(FakeClassesRepo([cls])), faces)
    return resolver, attendance, requests


def test_recognized_face_inside_fence_is_marked_present():
    resolver, attendance, requests = _build()

    res = resolver.submit_face(class_id=1, coordinates=_north_of_campus(10), image=object(), now=NOW)

    assert res.outcome == ResolutionOutcome.PRESENT
    assert res.user_id == 7
    assert res.face.distance == pytest.approx(0.3)
    assert res.geofence.inside is True
    assert res.geofence.distance_m == pytest.approx(10.0, abs=0.05)

    rec = attendance.records[(7, 1, date(2026, 3, 2))]
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.marked_by == MarkedBy.AUTO
    assert res.record_id == rec.attendance_id
    assert requests.requests == {}


def test_recognized_face_outside_fence_creates_pending_request():
    resolver, attendance, requests = _build()

    res = resolver.submit_face(class_id=1, coordinates=_north_of_campus(80), image=object(), now=NOW)

    assert res.outcome == ResolutionOutcome.PENDING
    assert res.record_id is None
    assert attendance.records == {}

    req = requests.requests[res.request_id]
    assert req.status == RequestStatus.PENDING
    assert req.user_id == 7
    assert req.distance_m == pytest.approx(80.0, abs=0.1)
    assert req.face_distance == pytest.approx(0.3)


def test_second_outside_submission_reuses_pending_request():
    resolver, _, requests = _build()

    first = resolver.submit_face(class_id=1, coordinates=_north_of_campus(80), image=object(), now=NOW)
    second = resolver.submit_face(class_id=1, coordinates=_north_of_campus(90), image=object(), now=NOW)

    assert first.request_id == second.request_id
    assert len(requests.requests) == 1


def test_check_in_inside_fence_closes_the_pending_request():
    resolver, attendance, requests = _build()
    pending = resolver.submit_face(class_id=1, coordinates=_north_of_campus(80), image=object(), now=NOW)

    res = resolver.submit_face(
        class_id=1, coordinates=_north_of_campus(10), image=object(), now=NOW.replace(hour=10)
    )

    assert res.outcome == ResolutionOutcome.PRESENT
    closed = requests.requests[pending.request_id]
    assert closed.status == RequestStatus.APPROVED
    assert closed.decided_by is None

    with pytest.raises(ValidationError):
        RequestService(requests).reject(current_role=Role.STAFF, reviewer_id=2, request_id=pending.request_id)
    rec = attendance.records[(7, 1, date(2026, 3, 2))]
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.marked_by == MarkedBy.AUTO

def test_class_radius_override_is_used():
    resolver, attendance, _ = _build(radius_m=100.0)

    res = resolver.submit_face(class_id=1, coordinates=_north_of_campus(80), image=object(), now=NOW)

    assert res.outcome == ResolutionOutcome.PRESENT
    assert res.geofence.radius_m == 100.0
    assert len(attendance.records) == 1


def test_class_without_location_is_a_configuration_error():
    resolver, attendance, requests = _build(located=False)

    with pytest.raises(ClassLocationMissingError):
        resolver.submit_face(class_id=1, coordinates=_north_of_campus(0), image=object(), now=NOW)
    assert attendance.records == {}
    assert requests.requests == {}


def test_unknown_class():
    resolver, _, _ = _build()
    with pytest.raises(NotFoundError):
        resolver.submit_face(class_id=99, coordinates=_north_of_campus(0), image=object(), now=NOW)


def test_unrecognized_face_writes_nothing():
    resolver, attendance, requests = _build(probe=(0.9, 0.0, 0.0, 0.0))

    with pytest.raises(FaceNotRecognizedError):
        resolver.submit_face(class_id=1, coordinates=_north_of_campus(5), image=object(), now=NOW)
    assert attendance.records == {}
    assert requests.requests == {}


def test_photo_without_face_writes_nothing():
    resolver, attendance, requests = _build(probe=None)

    with pytest.raises(NoFaceDetectedError):
        resolver.submit_face(class_id=1, coordinates=_north_of_campus(5), image=object(), now=NOW)
    assert attendance.records == {}
    assert requests.requests == {}


def test_resubmission_overwrites_the_single_record():
    resolver, attendance, _ = _build()

    first = resolver.submit_face(class_id=1, coordinates=_north_of_campus(10), image=object(), now=NOW)
    second = resolver.submit_face(
        class_id=1, coordinates=_north_of_campus(20), image=object(), now=NOW.replace(hour=10)
    )

    assert first.record_id == second.record_id
    assert len(attendance.records) == 1
    assert attendance.records[(7, 1, date(2026, 3, 2))].distance_m == pytest.approx(20.0, abs=0.05)


def test_client_descriptor_skips_the_encoder():
    resolver, attendance, _ = _build(probe=None)

    res = resolver.submit_face(
        class_id=1, coordinates=_north_of_campus(10), descriptor=[0.1, 0.0, 0.0, 0.0], now=NOW
    )

    assert res.outcome == ResolutionOutcome.PRESENT
    assert len(attendance.records) == 1


def test_geo_only_inside_fence_is_present():
    resolver, attendance, _ = _build()

    res = resolver.submit_geo(user_id=7, class_id=1, coordinates=_north_of_campus(30), now=NOW)

    assert res.outcome == ResolutionOutcome.PRESENT
    assert res.face is None
    assert attendance.records[(7, 1, date(2026, 3, 2))].marked_by == MarkedBy.AUTO


def test_geo_only_outside_fence_is_pending_without_face_distance():
    resolver, _, requests = _build()

    res = resolver.submit_geo(user_id=7, class_id=1, coordinates=_north_of_campus(500), now=NOW)

    assert res.outcome == ResolutionOutcome.PENDING
    assert requests.requests[res.request_id].face_distance is None


def test_geo_only_requires_enrollment_in_the_class():
    resolver, attendance, _ = _build()

    with pytest.raises(ValidationError):
        resolver.submit_geo(user_id=8, class_id=1, coordinates=_north_of_campus(0), now=NOW)
    assert attendance.records == {}


def test_resolution_to_dict_shape():
    resolver, _, _ = _build()

    data = resolver.submit_face(class_id=1, coordinates=_north_of_campus(10), image=object(), now=NOW).to_dict()

    assert data["outcome"] == "present"
    assert data["date"] == "2026-03-02"
    assert data["face"] == {"user_id": 7, "distance": 0.3}
    assert data["geofence"]["inside"] is True
    assert data["request_id"] is None
