"""Domain Types — enum values stored in the database and sent on the wire."""

from uuid import uuid4

from inkpost.core.domain_types import (
    ActivityAction, CategoryId, HttpMethod, LogSeverity, SortOrder, TagId,
    UserId, UserRole,
    enum_values,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert CategoryId(uid) == uid
    assert TagId(uid) == uid


def test_activity_actions_are_upper_case():
    assert all(a.value == a.value.upper() for a in ActivityAction)
    assert ActivityAction.CREATE.value == "CREATE"


def test_enum_values_preserve_declaration_order():
    assert enum_values(SortOrder) == ("asc", "desc")
    assert enum_values(LogSeverity) == ("INFO", "WARNING", "ERROR", "CRITICAL")


def test_http_methods_cover_crud():
    assert {"GET", "POST", "PATCH", "DELETE"} <= set(enum_values(HttpMethod))


def test_str_enums_compare_to_strings():
    assert LogSeverity.INFO == "INFO"


def test_user_roles():
    assert enum_values(UserRole) == ("ADMIN", "AUTHOR", "USER")
    assert UserId(uuid4()) is not None
