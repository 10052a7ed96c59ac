"""Schema Validator — validates one request segment and returns a normalized copy.

Invariants:
    - Pure function of (schema, raw input): same input → same value and same errors
    - Never mutates the raw input; the normalized value is a new dict
    - Success → value with coerced types and no errors; failure → value None
    - At most one FieldError per field path, in schema error order
    - Absent optional fields stay absent unless the rule declares a default
    - Unknown fields dropped unless the schema allows pass-through

Design Decisions:
    - Returns ValidationOutcome instead of raising: the HTTP dependency decides
      how to halt (ADR: core has no knowledge of requests or responses)
    - Output keyed by snake_case rule names; error paths use wire (camelCase) names
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import ValidationError

from inkpost.core.validation_rules import (
    CUSTOM_ERROR_PREFIX, FieldError, FieldType, RequestSchema, Segment,
)

_OBJECT_TYPE_ERRORS = frozenset({"model_type", "model_attributes_type", "dict_type"})


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one segment."""
    value: dict[str, Any] | None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_segment(
    schema: RequestSchema,
    raw: Any,
    segment: Segment | str = Segment.BODY,
) -> ValidationOutcome:
    """Validate and coerce one request segment against its schema."""
    segment = Segment(segment)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        return ValidationOutcome(
            None,
            [FieldError(segment.value, f"Request {segment.value} must be an object")],
        )

    prepared = _drop_empty_values(schema, raw)
    try:
        parsed = schema.model.model_validate(prepared)
    except ValidationError as exc:
        return ValidationOutcome(None, translate_errors(schema, exc))

    value = parsed.model_dump(exclude_unset=True)
    _fill_defaults(schema, value)
    return ValidationOutcome(value)


def translate_errors(
    schema: RequestSchema, exc: ValidationError,
) -> list[FieldError]:
    """Map pydantic errors to {field, message} pairs using each rule's wording."""
    errors: list[FieldError] = []
    seen: set[str] = set()
    for err in exc.errors(include_url=False):
        path = ".".join(str(part) for part in err["loc"])
        if path in seen:
            continue
        seen.add(path)
        errors.append(FieldError(path, _message_for(schema, err)))
    return errors


def _message_for(schema: RequestSchema, err: Mapping[str, Any]) -> str:
    error_type = err["type"]
    if error_type.startswith(CUSTOM_ERROR_PREFIX):
        return err["msg"]
    rule = schema.rule_at(err["loc"])
    if rule is None:
        return err["msg"]
    if error_type == "missing":
        return rule.message_for("required")
    if error_type in _OBJECT_TYPE_ERRORS and rule.type is not FieldType.OBJECT:
        return err["msg"]
    return rule.message_for("type")


def _drop_empty_values(
    schema: RequestSchema, raw: Mapping[str, Any],
) -> dict[str, Any]:
    """Copy raw input, removing "" for rules that treat empty as absent.

    Keys spelled like a rule's snake_case name (not its wire alias) are
    dropped: output is keyed by rule name, so a pass-through extra under
    that key would reach callers unvalidated.
    """
    prepared = dict(raw)
    for rule in schema.rules:
        if rule.name != rule.alias:
            prepared.pop(rule.name, None)
        if rule.alias not in prepared:
            continue
        current = prepared[rule.alias]
        if rule.empty_as_absent and current == "":
            del prepared[rule.alias]
        elif rule.fields is not None and isinstance(current, Mapping):
            prepared[rule.alias] = _drop_empty_values(rule.fields, current)
    return prepared


def _fill_defaults(schema: RequestSchema, value: dict[str, Any]) -> None:
    for rule in schema.rules:
        if rule.name not in value:
            if rule.has_default:
                value[rule.name] = rule.default_value()
        elif rule.fields is not None and isinstance(value[rule.name], dict):
            _fill_defaults(rule.fields, value[rule.name])
