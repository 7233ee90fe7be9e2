from pharmacy.core.config import Settings
from pharmacy.storage.base import Storage
from pharmacy.storage.memory import MemoryStorage
from pharmacy.storage.sql import SqlStorage


def build_storage(settings: Settings) -> Storage:
    if settings.STORAGE_BACKEND == "sql":
        return SqlStorage(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    return MemoryStorage()


__all__ = ["Storage", "MemoryStorage", "SqlStorage", "build_storage"]
