from app.config import Settings
from app.storage.base import ExperimentStore
from app.storage.memory import InMemoryExperimentStore
from app.storage.sql import SqlExperimentStore


def build_store(settings: Settings) -> ExperimentStore:
    """Pick the storage strategy named by STORAGE_BACKEND."""
    if settings.storage_backend == "memory":
        return InMemoryExperimentStore()
    return SqlExperimentStore(settings.database_url)


__all__ = ["ExperimentStore", "InMemoryExperimentStore", "SqlExperimentStore", "build_store"]
