"""Activity Log Schemas — rule lists for audit-trail queries and admin edits.

Invariants:
    - action, severity, method accept only the upper-case enum values
    - success arrives as a query string and is coerced to bool
    - startDate/endDate coerced to datetime; default limit is 20
"""

from inkpost.core.domain_types import (
    ActivityAction, HttpMethod, LogSeverity, SortOrder, enum_values,
)
from inkpost.core.validation_rules import FieldType, RequestSchema, ValidationRule
from inkpost.schemas.common import (
    id_params_schema, limit_rule, page_rule, search_rule, sort_by_rule,
    sort_order_rule,
)

ACTIVITY_LOG_SORT_FIELDS = ("createdAt", "action", "entity", "severity", "duration")


def _date_range_rules() -> list[ValidationRule]:
    return [
        ValidationRule("start_date", FieldType.DATETIME, empty_as_absent=True),
        ValidationRule("end_date", FieldType.DATETIME, empty_as_absent=True),
    ]


def _entity_rule() -> ValidationRule:
    return ValidationRule("entity", strip=True, max_length=50, empty_as_absent=True)


ACTIVITY_LOG_LIST_QUERY = RequestSchema(
    "activity log list query",
    [
        page_rule(),
        limit_rule(default=20),
        ValidationRule("action", choices=enum_values(ActivityAction)),
        _entity_rule(),
        ValidationRule(
            "entity_id", strip=True, max_length=64, empty_as_absent=True,
            label="Entity ID",
        ),
        ValidationRule("success", FieldType.BOOLEAN),
        ValidationRule("severity", choices=enum_values(LogSeverity)),
        ValidationRule("method", choices=enum_values(HttpMethod)),
        *_date_range_rules(),
        search_rule(),
        sort_by_rule(ACTIVITY_LOG_SORT_FIELDS, default="createdAt"),
        sort_order_rule(default=SortOrder.DESC.value),
    ],
)

ACTIVITY_LOG_STATS_QUERY = RequestSchema(
    "activity log stats query",
    [_entity_rule(), *_date_range_rules()],
)

UPDATE_ACTIVITY_LOG = RequestSchema(
    "update activity log",
    [
        ValidationRule("severity", choices=enum_values(LogSeverity)),
        ValidationRule("description", strip=True, min_length=1, max_length=1000),
        ValidationRule("error_message", strip=True, max_length=2000, nullable=True),
    ],
)

ACTIVITY_LOG_ID_PARAMS = id_params_schema("Activity log")
