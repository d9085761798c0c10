"""
User repository for database operations.
"""

from typing import Optional

from sqlalchemy.orm import Session

from finsight.db.models import User
from finsight.db.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User database operations."""

    def __init__(self, session: Session):
        super().__init__(User, session)

    def get_by_clerk_id(self, clerk_id: str) -> Optional[User]:
        return self.session.query(User).filter(User.clerk_id == clerk_id).first()

    def get_or_create_default(self, user_id: int = 1) -> User:
        """
        Get the single-user-mode owner, creating it on first use.

        Args:
            user_id: Fixed ID of the default user
        """
        user = self.get_by_id(user_id)
        if user:
            return user
        return self.create(id=user_id, name="Default User", auth_provider="local")

    def get_or_create_by_clerk_id(self, clerk_id: str, email: Optional[str] = None) -> User:
        """
        Get existing user by clerk_id or create a new one.

        Args:
            clerk_id: Clerk user ID (from JWT 'sub' claim)
            email: Optional email from JWT
        """
        user = self.get_by_clerk_id(clerk_id)
        if user:
            return user

        # Auto-create user on first authentication
        return self.create(
            name=email or f"user_{clerk_id[:8]}",
            email=email,
            clerk_id=clerk_id,
            auth_provider="clerk",
        )
