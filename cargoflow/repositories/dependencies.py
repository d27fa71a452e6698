"""FastAPI dependency that hands out the configured storage backend."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from cargoflow.config import settings
from cargoflow.database.engine import async_session
from cargoflow.repositories.interfaces import EntityStore, ProcessRepository
from cargoflow.repositories.memory import InMemoryEntityStore, InMemoryProcessRepository
from cargoflow.repositories.sql import SqlEntityStore, SqlProcessRepository

Stores = tuple[EntityStore, ProcessRepository]

# Process-local backend shared by every request when storage_backend == "memory"
_memory_entities = InMemoryEntityStore()
_memory_processes = InMemoryProcessRepository(_memory_entities)


async def get_stores() -> AsyncGenerator[Stores, None]:
    """Yield ``(entity_store, process_repository)`` for one request.

    The SQL backend shares one session between both stores; it commits when
    the handler returns and rolls back on any error.
    """
    if settings.storage_backend == "memory":
        yield _memory_entities, _memory_processes
        return

    async with async_session() as session:
        try:
            yield SqlEntityStore(session), SqlProcessRepository(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
