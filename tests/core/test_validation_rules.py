"""Validation Rules — rule messages, aliases and compiled models.

Tests:
    - Wire alias is lowerCamelCase of the rule name
    - Default messages per constraint kind; explicit messages win
    - Defaults are deep-copied (no shared mutable state across requests)
    - rule_at resolves nested error locations
"""

import pytest

from inkpost.core.validation_rules import (
    FieldType, RequestSchema, ValidationRule,
)


def test_alias_is_lower_camel_case():
    assert ValidationRule("meta_description").alias == "metaDescription"
    assert ValidationRule("id").alias == "id"


def test_display_name_uses_label_when_given():
    assert ValidationRule("parent_id").display_name == "Parent id"
    assert ValidationRule("parent_id", label="Parent ID").display_name == "Parent ID"


@pytest.mark.parametrize("rule,kind,message", [
    (ValidationRule("name"), "required", "Name is required"),
    (ValidationRule("page", FieldType.INTEGER), "type", "Page must be an integer"),
    (ValidationRule("ok", FieldType.BOOLEAN), "type", "Ok must be a boolean"),
    (ValidationRule("email", FieldType.EMAIL), "type", "Invalid email format"),
    (ValidationRule("name", min_length=3), "min_length", "Name must be at least 3 characters long"),
    (ValidationRule("name", min_length=1), "min_length", "Name must not be empty"),
    (ValidationRule("price", FieldType.NUMBER, minimum=0.5), "minimum", "Price must be at least 0.5"),
    (ValidationRule("order", choices=("asc", "desc")), "choices", "Order must be one of: asc, desc"),
])
def test_default_messages(rule, kind, message):
    assert rule.message_for(kind) == message


def test_explicit_message_overrides_default():
    rule = ValidationRule("slug", pattern="[a-z]+", messages={"pattern": "Bad slug"})
    assert rule.message_for("pattern") == "Bad slug"


def test_unknown_kind_raises():
    with pytest.raises(KeyError):
        ValidationRule("name").message_for("nonsense")


def test_default_value_is_a_fresh_copy():
    rule = ValidationRule("tags", FieldType.STRING, default=[])
    first = rule.default_value()
    first.append("x")
    assert rule.default_value() == []


def test_model_compiled_once_per_schema():
    schema = RequestSchema("one", [ValidationRule("name")])
    assert schema.model is schema.model
    assert schema.model.__name__ == "One"


def test_rule_at_resolves_nested_location():
    inner = ValidationRule("city")
    schema = RequestSchema(
        "user",
        [ValidationRule(
            "home_address", FieldType.OBJECT,
            fields=RequestSchema("address", [inner]),
        )],
    )
    assert schema.rule_at(("homeAddress", "city")) == inner
    assert schema.rule_at(("unknown",)) is None


def test_rule_without_default_has_none_declared():
    assert not ValidationRule("name").has_default
    assert ValidationRule("parent_id", default=None).has_default
    assert ValidationRule("page", FieldType.INTEGER, default=1).default_value() == 1
