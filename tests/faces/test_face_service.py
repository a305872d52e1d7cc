from __future__ import annotations

import pytest

from src.attendify.core.enums import Role
from src.attendify.core.exceptions import (
    FaceNotRecognizedError,
    NoFaceDetectedError,
    NotFoundError,
    ValidationError,
)
from src.attendify.faces.model import GalleryEntry
from src.attendify.faces.service import FaceService
from src.attendify.users.model import User


class FakeUsersRepo:
    def __init__(self, users):
        self._users = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self._users.get(int(user_id))


class FakeGalleryRepo:
    def __init__(self, users_repo):
        self._users_repo = users_repo
        self._next_id = 1
        self.entries: list[GalleryEntry] = []

    def add_descriptor(self, *, user_id, vector):
        did = self._next_id
        self._next_id += 1
        self.entries.append(GalleryEntry(descriptor_id=did, user_id=int(user_id), vector=list(vector)))
        return did

    def list_for_user(self, user_id):
        return [e for e in self.entries if e.user_id == int(user_id)]

    def list_for_class(self, class_id):
        out = []
        for e in self.entries:
            u = self._users_repo.get_by_id(e.user_id)
            if u and u.class_id == int(class_id) and u.is_active and u.role == Role.STUDENT:
                out.append(e)
        return out

    def clear_for_user(self, user_id):
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.user_id != int(user_id)]
        return before - len(self.entries)


class FakeEncoder:
    """Returns a canned descriptor, or raises when the "photo" has no face."""

    def __init__(self, descriptor=None):
        self._descriptor = descriptor

    def encode(self, rgb_image):
        if self._descriptor is None:
            raise NoFaceDetectedError("No face detected in the photo, please retake it")
        return list(self._descriptor)


def _student(user_id, class_id=1, **kw):
    return User(
        user_id=user_id,
        name=f"Student {user_id}",
        email=f"s{user_id}@college.edu",
        roll_number=f"R{user_id:03d}",
        password_hash="x",
        role=Role.STUDENT,
        class_id=class_id,
        **kw,
    )


def _service(users, encoder=None, threshold=0.55):
    users_repo = FakeUsersRepo(users)
    gallery = FakeGalleryRepo(users_repo)
    svc = FaceService(gallery, users_repo, encoder or FakeEncoder(), threshold=threshold, descriptor_size=4)
    return svc, gallery


def test_enroll_appends_descriptors():
    svc, gallery = _service([_student(1)])

    svc.enroll(user_id=1, descriptor=[0.1, 0.2, 0.3, 0.4])
    svc.enroll(user_id=1, descriptor=[0.1, 0.2, 0.3, 0.5])

    assert svc.enrolled_count(1) == 2
    assert [e.descriptor_id for e in gallery.entries] == [1, 2]


def test_enroll_from_image_uses_encoder():
    svc, gallery = _service([_student(1)], encoder=FakeEncoder([0.0, 0.0, 0.0, 1.0]))

    svc.enroll(user_id=1, image=object())

    assert gallery.entries[0].vector == [0.0, 0.0, 0.0, 1.0]


def test_enroll_unknown_user():
    svc, _ = _service([])
    with pytest.raises(NotFoundError):
        svc.enroll(user_id=99, descriptor=[0.0, 0.0, 0.0, 0.0])


@pytest.mark.parametrize(
    "descriptor",
    [
        [0.0, 0.0, 0.0],
        "0,0,0,0",
        [0.0, "x", 0.0, 0.0],
        [0.0, float("nan"), 0.0, 0.0],
    ],
)
def test_enroll_rejects_malformed_descriptor(descriptor):
    svc, gallery = _service([_student(1)])

    with pytest.raises(ValidationError):
        svc.enroll(user_id=1, descriptor=descriptor)
    assert gallery.entries == []


def test_enroll_requires_photo_or_descriptor():
    svc, _ = _service([_student(1)])
    with pytest.raises(ValidationError):
        svc.enroll(user_id=1)


def test_no_face_in_photo_propagates():
    svc, gallery = _service([_student(1)], encoder=FakeEncoder(None))

    with pytest.raises(NoFaceDetectedError):
        svc.enroll(user_id=1, image=object())
    assert gallery.entries == []


def test_identify_returns_nearest_student_in_class():
    svc, _ = _service([_student(1), _student(2)])
    svc.enroll(user_id=1, descriptor=[0.0, 0.0, 0.0, 0.0])
    svc.enroll(user_id=2, descriptor=[1.0, 0.0, 0.0, 0.0])

    match = svc.identify(class_id=1, descriptor=[0.9, 0.0, 0.0, 0.0])

    assert match.user_id == 2
    assert match.distance == pytest.approx(0.1)


def test_identify_ignores_other_classes_and_inactive_students():
    svc, _ = _service([_student(1, class_id=2), _student(2, is_active=False), _student(3)])
    svc.enroll(user_id=1, descriptor=[0.0, 0.0, 0.0, 0.0])
    svc.enroll(user_id=2, descriptor=[0.0, 0.0, 0.0, 0.0])
    svc.enroll(user_id=3, descriptor=[0.5, 0.0, 0.0, 0.0])

    match = svc.identify(class_id=1, descriptor=[0.0, 0.0, 0.0, 0.0])

    assert match.user_id == 3


def test_identify_above_threshold_reports_distance():
    svc, _ = _service([_student(1)])
    svc.enroll(user_id=1, descriptor=[0.0, 0.0, 0.0, 0.0])

    with pytest.raises(FaceNotRecognizedError) as exc:
        svc.identify(class_id=1, descriptor=[0.6, 0.0, 0.0, 0.0])
    assert exc.value.distance == pytest.approx(0.6)


def test_identify_accepts_distance_equal_to_threshold():
    svc, _ = _service([_student(1)], threshold=0.5)
    svc.enroll(user_id=1, descriptor=[0.0, 0.0, 0.0, 0.0])

    match = svc.identify(class_id=1, descriptor=[0.5, 0.0, 0.0, 0.0])

    assert match.user_id == 1
    assert match.distance == pytest.approx(0.5)

def test_identify_with_nobody_enrolled():
    svc, _ = _service([_student(1)])

    with pytest.raises(FaceNotRecognizedError) as exc:
        svc.identify(class_id=1, descriptor=[0.0, 0.0, 0.0, 0.0])
    assert exc.value.distance is None


def test_reset_removes_only_that_users_descriptors():
    svc, _ = _service([_student(1), _student(2)])
    svc.enroll(user_id=1, descriptor=[0.0, 0.0, 0.0, 0.0])
    svc.enroll(user_id=1, descriptor=[0.1, 0.0, 0.0, 0.0])
    svc.enroll(user_id=2, descriptor=[1.0, 0.0, 0.0, 0.0])

    assert svc.reset(user_id=1) == 2
    assert svc.enrolled_count(1) == 0
    assert svc.enrolled_count(2) == 1
