"""Database layer: declarative base, engine factory, session management.

The engine module builds its singleton from settings at import time, so it
is not re-exported here; import talentscope.db.engine where a live session
is needed.
"""

from talentscope.db.base import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
