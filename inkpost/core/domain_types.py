"""Domain Types — enums shared by models, request schemas and services.

Invariants:
    - All valid states encoded as Enums — no raw string matching in services
    - Values are the upper-case strings stored in the database and sent on the wire

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


CategoryId = NewType("CategoryId", UUID)
TagId = NewType("TagId", UUID)
ActivityLogId = NewType("ActivityLogId", UUID)
UserId = NewType("UserId", UUID)


class ActivityAction(str, Enum):
    """What an audited request did."""
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    REGISTER = "REGISTER"
    RESET_PASSWORD = "RESET_PASSWORD"
    VERIFY_EMAIL = "VERIFY_EMAIL"


class LogSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    AUTHOR = "AUTHOR"
    USER = "USER"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def enum_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    """Enum values as a choices tuple for validation rules."""
    return tuple(member.value for member in enum_cls)
