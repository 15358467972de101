"""ORM Models — SQLAlchemy declarative models for persisted solves and custom events.

Invariants:
    - All models inherit from Base (db/base.py)
    - Rows are converted to core dataclasses at the repository boundary; the
      core never sees ORM objects

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from cubetimer.models.solve import SolveRecord  # noqa: F401
from cubetimer.models.custom_event import CustomEventRecord  # noqa: F401
