"""
Storage layer exports.
"""

from app.scraping.storage.base import BlobStorage, SnapshotStore
from app.scraping.storage.blob import LocalBlobStorage
from app.scraping.storage.sqlalchemy_storage import SQLAlchemySnapshotStore

__all__ = ["BlobStorage", "LocalBlobStorage", "SnapshotStore", "SQLAlchemySnapshotStore"]
