"""
Database repository layer.

Provides data access patterns using the Repository Pattern.
"""

from finsight.db.repositories.base import BaseRepository
from finsight.db.repositories.document_repository import DocumentRepository
from finsight.db.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "DocumentRepository",
    "UserRepository",
]
