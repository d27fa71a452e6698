from cargoflow.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from cargoflow.database.engine import async_session, engine

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "async_session",
    "engine",
]
