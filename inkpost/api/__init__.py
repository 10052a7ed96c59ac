"""API Layer — FastAPI routes, request validation dependency, envelopes, error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint answers with the canonical envelope (api/responses.py)

Design Decisions:
    - Thin routes delegate to services (ADR: impureim sandwich)
"""
