from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.report import AttendanceReportService
from .attendance.resolver import AttendanceResolver
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.service import ClassService
from .core.constants import DEFAULT_FACE_MATCH_THRESHOLD, DEFAULT_GEOFENCE_RADIUS_M, FACE_DESCRIPTOR_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .faces.model import DescriptorEncoder
from .faces.mysql_face_repository import MySQLFaceGalleryRepository
from .faces.service import FaceService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.service import RequestService
from .results.mysql_marks_repository import MySQLMarksRepository
from .results.service import ResultService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    classes_repo: MySQLClassRepository
    faces_repo: MySQLFaceGalleryRepository
    attendance_repo: MySQLAttendanceRepository
    requests_repo: MySQLRequestRepository
    marks_repo: MySQLMarksRepository

    auth_service: AuthService
    user_service: UserService
    class_service: ClassService
    face_service: FaceService
    attendance_service: AttendanceService
    attendance_resolver: AttendanceResolver
    report_service: AttendanceReportService
    request_service: RequestService
    result_service: ResultService


def build_container(
    *,
    db_config: dict,
    geofence_radius_m: float = DEFAULT_GEOFENCE_RADIUS_M,
    face_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
    descriptor_size: int = FACE_DESCRIPTOR_SIZE,
    detection_model: str = "hog",
    encoder: Optional[DescriptorEncoder] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    if encoder is None:
        # dlib models load on import
        from .faces.encoder import FaceEncoder

        encoder = FaceEncoder(detection_model=detection_model)

    users_repo = MySQLUserRepository(conn)
    classes_repo = MySQLClassRepository(conn)
    faces_repo = MySQLFaceGalleryRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    requests_repo = MySQLRequestRepository(conn)
    marks_repo = MySQLMarksRepository(conn)

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, classes_repo)
    class_service = ClassService(classes_repo, default_radius_m=geofence_radius_m)
    face_service = FaceService(
        faces_repo,
        users_repo,
        encoder,
        threshold=face_threshold,
        descriptor_size=descriptor_size,
    )
    attendance_service = AttendanceService(attendance_repo, users_repo, classes_repo)
    attendance_resolver = AttendanceResolver(
        attendance_repo,
        requests_repo,
        users_repo,
        class_service,
        face_service,
    )
    report_service = AttendanceReportService(attendance_repo)
    request_service = RequestService(requests_repo)
    result_service = ResultService(marks_repo, users_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        classes_repo=classes_repo,
        faces_repo=faces_repo,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        marks_repo=marks_repo,
        auth_service=auth_service,
        user_service=user_service,
        class_service=class_service,
        face_service=face_service,
        attendance_service=attendance_service,
        attendance_resolver=attendance_resolver,
        report_service=report_service,
        request_service=request_service,
        result_service=result_service,
    )
