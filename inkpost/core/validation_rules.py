"""Validation Rules — declarative per-field rules compiled once into pydantic models.

Invariants:
    - Field names (and their camelCase wire aliases) are unique within one RequestSchema
    - A RequestSchema compiles its pydantic model exactly once, at construction
    - Constraint checks run after type coercion; at most one violation per field
    - Numeric bounds inclusive, enum membership exact and case-sensitive,
      patterns must match the whole value

Design Decisions:
    - pydantic lax mode does the coercion ("5" → 5, "true" → True) instead of a
      hand-rolled parser (ADR: query strings and form fields arrive as text)
    - Constraints raised as PydanticCustomError so the user-facing message is
      the rule's own wording, not pydantic's default text
    - Rules are snake_case, wire is lowerCamelCase via pydantic's to_camel
"""

import copy
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Annotated, Any, NamedTuple, Optional, Sequence

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, create_model
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


CUSTOM_ERROR_PREFIX = "inkpost_"

# Marks a rule without a default; None is a valid default
_UNSET: Any = object()


class Segment(str, Enum):
    """Request parts validated independently."""
    BODY = "body"
    QUERY = "query"
    PARAMS = "params"


class FieldType(str, Enum):
    """Primitive types a rule can declare."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    EMAIL = "email"
    UUID = "uuid"
    DATETIME = "datetime"
    OBJECT = "object"


class FieldError(NamedTuple):
    """One failed constraint. field is a dot path for nested values."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


_PYTHON_TYPES: dict[FieldType, type] = {
    FieldType.STRING: str,
    FieldType.INTEGER: int,
    FieldType.NUMBER: float,
    FieldType.BOOLEAN: bool,
    FieldType.EMAIL: str,
    FieldType.UUID: uuid.UUID,
    FieldType.DATETIME: datetime,
}

_TYPE_NOUNS: dict[FieldType, str] = {
    FieldType.STRING: "a string",
    FieldType.INTEGER: "an integer",
    FieldType.NUMBER: "a number",
    FieldType.BOOLEAN: "a boolean",
    FieldType.UUID: "a valid UUID",
    FieldType.DATETIME: "a valid date",
    FieldType.OBJECT: "an object",
}


def _format_bound(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class ValidationRule:
    """Expected shape of one field in a request segment."""
    name: str
    type: FieldType = FieldType.STRING
    required: bool = False
    default: Any = _UNSET
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[str, ...] | None = None
    strip: bool = False
    lowercase: bool = False
    empty_as_absent: bool = False
    nullable: bool = False
    fields: "RequestSchema | None" = None
    label: str | None = None
    messages: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def alias(self) -> str:
        return to_camel(self.name)

    @property
    def display_name(self) -> str:
        return self.label or self.name.replace("_", " ").capitalize()

    @property
    def has_default(self) -> bool:
        return self.default is not _UNSET

    def default_value(self) -> Any:
        return copy.deepcopy(self.default)

    def message_for(self, kind: str) -> str:
        """User-facing message for a violated constraint kind."""
        if kind in self.messages:
            return self.messages[kind]
        name = self.display_name
        if kind == "required":
            return f"{name} is required"
        if kind in ("type", "email") and self.type is FieldType.EMAIL:
            return "Invalid email format"
        if kind == "type":
            return f"{name} must be {_TYPE_NOUNS[self.type]}"
        if kind == "min_length":
            if self.min_length == 1:
                return f"{name} must not be empty"
            return f"{name} must be at least {self.min_length} characters long"
        if kind == "max_length":
            return f"{name} must be at most {self.max_length} characters long"
        if kind == "pattern":
            return f"{name} has an invalid format"
        if kind == "minimum":
            return f"{name} must be at least {_format_bound(self.minimum)}"
        if kind == "maximum":
            return f"{name} must be at most {_format_bound(self.maximum)}"
        if kind == "choices":
            return f"{name} must be one of: {', '.join(self.choices)}"
        raise KeyError(f"Unknown constraint kind: {kind}")


def _fail(rule: ValidationRule, kind: str):
    raise PydanticCustomError(CUSTOM_ERROR_PREFIX + kind, rule.message_for(kind))


def _check_constraints(rule: ValidationRule, value: Any) -> Any:
    """Normalize then check one already-coerced value against its rule."""
    if isinstance(value, str):
        if rule.strip:
            value = value.strip()
        if rule.lowercase:
            value = value.lower()
        if rule.min_length is not None and len(value) < rule.min_length:
            _fail(rule, "min_length")
        if rule.max_length is not None and len(value) > rule.max_length:
            _fail(rule, "max_length")
        if rule.type is FieldType.EMAIL:
            try:
                validate_email(value, check_deliverability=False)
            except EmailNotValidError:
                _fail(rule, "email")
        if rule.pattern is not None and re.fullmatch(rule.pattern, value) is None:
            _fail(rule, "pattern")
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        if rule.minimum is not None and value < rule.minimum:
            _fail(rule, "minimum")
        if rule.maximum is not None and value > rule.maximum:
            _fail(rule, "maximum")
    if rule.choices is not None and value not in rule.choices:
        _fail(rule, "choices")
    return value


def _annotation_for(rule: ValidationRule) -> Any:
    if rule.type is FieldType.OBJECT:
        base = rule.fields.model
    else:
        base = _PYTHON_TYPES[rule.type]
    annotation = Annotated[base, AfterValidator(partial(_check_constraints, rule))]
    if rule.nullable:
        return Optional[annotation]
    return annotation


def _model_name(schema_name: str) -> str:
    words = re.split(r"[^0-9A-Za-z]+", schema_name)
    return "".join(w[:1].upper() + w[1:] for w in words if w) or "RequestSegment"


class RequestSchema:
    """Declarative rule list for one request segment, compiled to a pydantic model."""

    def __init__(
        self,
        name: str,
        rules: Sequence[ValidationRule],
        *,
        allow_extra: bool = False,
    ):
        self.name = name
        self.rules = tuple(rules)
        self.allow_extra = allow_extra
        self._check_rules()
        self._by_alias = {rule.alias: rule for rule in self.rules}
        self.model = self._compile()

    def _check_rules(self) -> None:
        seen_names: set[str] = set()
        seen_aliases: set[str] = set()
        for rule in self.rules:
            if rule.name in seen_names or rule.alias in seen_aliases:
                raise ValueError(
                    f"Duplicate field '{rule.name}' in schema '{self.name}'",
                )
            seen_names.add(rule.name)
            seen_aliases.add(rule.alias)
            if rule.pattern is not None:
                re.compile(rule.pattern)
            if (rule.type is FieldType.OBJECT) != (rule.fields is not None):
                raise ValueError(
                    f"Field '{rule.name}' in schema '{self.name}': nested "
                    "fields are required for object rules and only for them",
                )

    def _compile(self) -> type[BaseModel]:
        definitions = {
            rule.name: (
                _annotation_for(rule),
                Field(... if rule.required else None, alias=rule.alias),
            )
            for rule in self.rules
        }
        config = ConfigDict(extra="allow" if self.allow_extra else "ignore")
        return create_model(
            _model_name(self.name), __config__=config, **definitions,
        )

    def rule_for_alias(self, alias: str) -> ValidationRule | None:
        return self._by_alias.get(alias)

    def rule_at(self, loc: Sequence[Any]) -> ValidationRule | None:
        """Resolve a pydantic error location (wire aliases) to its rule."""
        schema: RequestSchema | None = self
        rule = None
        for part in loc:
            if schema is None:
                break
            rule = schema.rule_for_alias(str(part))
            if rule is None:
                return None
            schema = rule.fields
        return rule

    def __repr__(self) -> str:
        return f"RequestSchema({self.name!r}, {len(self.rules)} rules)"
