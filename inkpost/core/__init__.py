"""Core Layer — pure request/response plumbing, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (timestamps injectable)

Design Decisions:
    - Validation and envelope building live here so they can be tested without
      a running app (ADR: functional core, imperative shell)
"""
