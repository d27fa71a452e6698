from cargoflow.repositories.interfaces import EntityStore, ProcessRepository, ProcessWithDetails
from cargoflow.repositories.memory import InMemoryEntityStore, InMemoryProcessRepository
from cargoflow.repositories.sql import SqlEntityStore, SqlProcessRepository

__all__ = [
    "EntityStore",
    "InMemoryEntityStore",
    "InMemoryProcessRepository",
    "ProcessRepository",
    "ProcessWithDetails",
    "SqlEntityStore",
    "SqlProcessRepository",
]
