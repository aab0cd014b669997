"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every row carries owner_id; all queries are scoped by it

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from closetmap.models.bag import Bag  # noqa: F401
from closetmap.models.cloth import Cloth  # noqa: F401
