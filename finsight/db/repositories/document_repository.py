"""
User document repository.

Each user owns at most one row per document name; saving a document
overwrites that row's payload.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from finsight.db.models import UserDocument
from finsight.db.repositories.base import BaseRepository


class DocumentRepository(BaseRepository[UserDocument]):
    """Repository for UserDocument database operations."""

    def __init__(self, session: Session):
        super().__init__(UserDocument, session)

    def get_document(self, user_id: int, doc_name: str) -> Optional[UserDocument]:
        """
        Get a user's document by name.

        Returns:
            UserDocument instance or None if it was never saved
        """
        return (
            self.session.query(UserDocument)
            .filter(UserDocument.user_id == user_id, UserDocument.doc_name == doc_name)
            .first()
        )

    def get_payload(self, user_id: int, doc_name: str) -> Optional[Dict[str, Any]]:
        document = self.get_document(user_id, doc_name)
        return document.payload if document else None

    def upsert(self, user_id: int, doc_name: str, payload: Dict[str, Any], updated_at_ms: int) -> UserDocument:
        """
        Insert or overwrite a user's document.

        Args:
            user_id: Owner user ID
            doc_name: Document name (transactions, investments, debts, settings)
            payload: Complete JSON payload to store
            updated_at_ms: Client-visible write timestamp in epoch milliseconds

        Returns:
            The stored UserDocument
        """
        document = self.get_document(user_id, doc_name)
        if document is None:
            return self.create(user_id=user_id, doc_name=doc_name, payload=payload, updated_at_ms=updated_at_ms)

        document.payload = payload
        document.updated_at_ms = updated_at_ms
        self.session.flush()
        return document

    def list_names(self, user_id: int) -> List[str]:
        """Names of the documents a user has saved."""
        rows = self.session.query(UserDocument.doc_name).filter(UserDocument.user_id == user_id).all()
        return sorted(row[0] for row in rows)

    def delete_all(self, user_id: int) -> int:
        """
        Delete every document of a user.

        Returns:
            Number of deleted documents
        """
        count = self.session.query(UserDocument).filter(UserDocument.user_id == user_id).delete()
        self.session.flush()
        return count
