"""Category Schemas — rule lists for category requests.

Invariants:
    - Create requires name and slug; update requires nothing
    - Body schemas pass extra fields through (multipart form with a file part)
    - parentId: UUID or null (null clears it); an empty form value counts as absent
    - orderPosition coerced to int >= 0
"""

from inkpost.core.validation_rules import FieldType, RequestSchema, ValidationRule
from inkpost.schemas.common import (
    description_rule, id_params_schema, limit_rule, meta_rules, name_rule,
    page_rule, search_rule, slug_rule, sort_by_rule, sort_order_rule,
)

CATEGORY_SORT_FIELDS = ("name", "orderPosition", "createdAt")


def _category_body_rules(required: bool) -> list[ValidationRule]:
    return [
        name_rule(100, required),
        slug_rule(100, required),
        description_rule(),
        ValidationRule(
            "parent_id", FieldType.UUID, nullable=True, empty_as_absent=True,
            label="Parent ID", messages={"type": "Invalid parent ID format"},
        ),
        *meta_rules(),
        ValidationRule("icon_url", strip=True, max_length=500, nullable=True, label="Icon URL"),
        ValidationRule("order_position", FieldType.INTEGER, minimum=0),
    ]


CREATE_CATEGORY = RequestSchema(
    "create category", _category_body_rules(required=True), allow_extra=True,
)

UPDATE_CATEGORY = RequestSchema(
    "update category", _category_body_rules(required=False), allow_extra=True,
)

CATEGORY_LIST_QUERY = RequestSchema(
    "category list query",
    [
        page_rule(),
        limit_rule(),
        search_rule(),
        ValidationRule("parent_id", strip=True, max_length=64, label="Parent ID"),
        sort_by_rule(CATEGORY_SORT_FIELDS, default="orderPosition"),
        sort_order_rule(),
    ],
)

CATEGORY_ID_PARAMS = id_params_schema("Category")
