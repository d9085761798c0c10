"""
Database layer for Finsight.

Provides the per-user document schema, connection management and the
RecordStore implementations used by finance sessions.
"""

from .connection import db_session, get_db_manager, init_database, check_connection
from finsight.db import models  # noqa: F401
from .models import User, UserDocument
from .record_store import RecordStore, MemoryRecordStore, SqlRecordStore

__all__ = [
    # Connection utilities
    "db_session",
    "get_db_manager",
    "init_database",
    "check_connection",
    # Models
    "User",
    "UserDocument",
    # Stores
    "RecordStore",
    "MemoryRecordStore",
    "SqlRecordStore",
]
