"""Common Rules — reusable rule builders shared by resource schemas.

Invariants:
    - Slugs are lowercase alphanumerics separated by single hyphens
    - page >= 1 (default 1); 1 <= limit <= 100
    - sortOrder is exactly "asc" or "desc" (case-sensitive)
"""

from inkpost.core.domain_types import SortOrder, enum_values
from inkpost.core.validation_rules import FieldType, RequestSchema, ValidationRule

SLUG_PATTERN = r"[a-z0-9]+(?:-[a-z0-9]+)*"
MAX_PAGE_SIZE = 100


def page_rule() -> ValidationRule:
    return ValidationRule("page", FieldType.INTEGER, minimum=1, default=1)


def limit_rule(default: int = 10) -> ValidationRule:
    return ValidationRule(
        "limit", FieldType.INTEGER, minimum=1, maximum=MAX_PAGE_SIZE,
        default=default,
    )


def search_rule() -> ValidationRule:
    return ValidationRule("search", strip=True, max_length=200, empty_as_absent=True)


def sort_by_rule(choices: tuple[str, ...], default: str) -> ValidationRule:
    return ValidationRule(
        "sort_by", choices=choices, default=default, label="Sort by",
    )


def sort_order_rule(default: str = SortOrder.ASC.value) -> ValidationRule:
    return ValidationRule(
        "sort_order", choices=enum_values(SortOrder), default=default,
    )


def slug_rule(max_length: int, required: bool) -> ValidationRule:
    return ValidationRule(
        "slug",
        required=required,
        strip=True,
        min_length=1,
        max_length=max_length,
        pattern=SLUG_PATTERN,
        messages={
            "pattern": "Slug can only contain lowercase letters, numbers, and hyphens",
        },
    )


def name_rule(max_length: int, required: bool) -> ValidationRule:
    return ValidationRule(
        "name", required=required, strip=True, min_length=1, max_length=max_length,
    )


def description_rule() -> ValidationRule:
    return ValidationRule("description", strip=True, max_length=500, nullable=True)


def meta_rules() -> list[ValidationRule]:
    return [
        ValidationRule("meta_title", strip=True, max_length=60, nullable=True),
        ValidationRule(
            "meta_description", strip=True, max_length=160, nullable=True,
        ),
    ]


def id_params_schema(resource: str) -> RequestSchema:
    """Path params schema for /{id} routes of one resource."""
    return RequestSchema(
        f"{resource} id params",
        [
            ValidationRule(
                "id", FieldType.UUID, required=True, label="ID",
                messages={"type": f"Invalid {resource.lower()} ID format"},
            ),
        ],
    )


SLUG_PARAMS = RequestSchema(
    "slug params",
    [
        ValidationRule(
            "slug", required=True, min_length=1,
            messages={"min_length": "Slug is required"},
        ),
    ],
)
