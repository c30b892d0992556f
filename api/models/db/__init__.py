"""Database models."""
from api.models.db.storage import StorageEntry

__all__ = ["StorageEntry"]
