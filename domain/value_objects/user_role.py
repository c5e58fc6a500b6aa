from enum import Enum


class UserRole(str, Enum):
    """Roles known to the user directory."""

    STUDENT = "Student"
    LECTURER = "Lecturer"
    HOD = "HoD"
    ADMIN = "Admin"
