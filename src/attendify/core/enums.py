from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    OWNER = "owner"
    STAFF = "staff"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Closed set of statuses stored on an attendance record."""

    PRESENT = "Present"
    ABSENT = "Absent"
    ON_DUTY = "On Duty"
    LEAVE = "Leave"


class RequestStatus(str, Enum):
    """Lifecycle of a pending attendance request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MarkedBy(str, Enum):
    """Who (or what) produced an attendance record."""

    AUTO = "auto"
    MANUAL = "manual"
    REQUEST = "request"


class ResolutionOutcome(str, Enum):
    """Result of an automatic attendance submission."""

    PRESENT = "present"
    PENDING = "pending"
