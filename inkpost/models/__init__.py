"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before
      create_all or alembic autogenerate runs
"""

from inkpost.models.category import Category  # noqa: F401
from inkpost.models.tag import Tag  # noqa: F401
from inkpost.models.activity_log import ActivityLog  # noqa: F401
from inkpost.models.user import User  # noqa: F401
