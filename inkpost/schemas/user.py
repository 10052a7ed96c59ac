"""User Schemas — rule lists for user account requests.

Invariants:
    - Create requires username and email; update requires nothing
    - Usernames: 3-30 letters, digits or underscores
    - Emails normalized to lower case before the format check
    - isActive arrives as text in queries and is coerced to bool
"""

from inkpost.core.domain_types import SortOrder, UserRole, enum_values
from inkpost.core.validation_rules import FieldType, RequestSchema, ValidationRule
from inkpost.schemas.common import (
    id_params_schema, limit_rule, page_rule, search_rule, sort_by_rule,
    sort_order_rule,
)

USER_SORT_FIELDS = ("createdAt", "username", "name")
USERNAME_PATTERN = r"[a-zA-Z0-9_]+"


def username_rule(required: bool) -> ValidationRule:
    return ValidationRule(
        "username",
        required=required,
        strip=True,
        min_length=3,
        max_length=30,
        pattern=USERNAME_PATTERN,
        messages={
            "pattern": "Username can only contain letters, numbers, and underscores",
        },
    )


def _role_rule() -> ValidationRule:
    return ValidationRule(
        "role", choices=enum_values(UserRole),
        messages={"choices": "Invalid user role. Must be ADMIN, AUTHOR, or USER"},
    )


def _profile_rules(required: bool) -> list[ValidationRule]:
    return [
        username_rule(required),
        ValidationRule(
            "email", FieldType.EMAIL, required=required, strip=True,
            lowercase=True, max_length=255,
        ),
        ValidationRule(
            "name", strip=True, min_length=1, max_length=100, nullable=True,
        ),
        ValidationRule("bio", strip=True, max_length=500, nullable=True),
        ValidationRule("location", strip=True, max_length=100, nullable=True),
        ValidationRule(
            "avatar_url", strip=True, max_length=500, nullable=True,
            pattern=r"https?://\S+", label="Avatar URL",
            messages={"pattern": "Invalid avatar URL format"},
        ),
        _role_rule(),
    ]


CREATE_USER = RequestSchema("create user", _profile_rules(required=True))

UPDATE_USER = RequestSchema(
    "update user",
    [
        *_profile_rules(required=False),
        ValidationRule("is_active", FieldType.BOOLEAN),
    ],
)

USER_LIST_QUERY = RequestSchema(
    "user list query",
    [
        page_rule(),
        limit_rule(),
        _role_rule(),
        ValidationRule("is_active", FieldType.BOOLEAN, empty_as_absent=True),
        search_rule(),
        sort_by_rule(USER_SORT_FIELDS, default="createdAt"),
        sort_order_rule(default=SortOrder.DESC.value),
    ],
)

USER_ID_PARAMS = id_params_schema("User")

USERNAME_PARAMS = RequestSchema(
    "username params", [username_rule(required=True)],
)
