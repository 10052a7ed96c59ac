"""Request Schemas — declarative rule lists per resource, plus envelope models for OpenAPI.

Invariants:
    - Every RequestSchema is built once at import time, never per request
    - Wire names are lowerCamelCase; rule names are snake_case

Design Decisions:
    - Rule lists over hand-written pydantic classes: one place defines field,
      constraints and user-facing messages (ADR: single canonical error shape)
"""
