"""Infrastructure Layer — database sessions and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All database failures mapped to typed errors (core/errors.py)
"""
