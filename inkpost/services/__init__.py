"""Service Layer — ORM CRUD for categories, tags and activity logs.

Invariants:
    - Services receive already-normalized dicts (snake_case keys, coerced types)
    - Services raise InkpostError subclasses; they never build HTTP responses
"""
