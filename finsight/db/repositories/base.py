"""
Base repository pattern for database operations.

Provides common CRUD operations with SQLAlchemy ORM.
"""

from typing import TypeVar, Generic, Type, Optional, List

from sqlalchemy.orm import Session

from finsight.db.models import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Generic repository pattern that can be extended for specific models.
    """

    def __init__(self, model: Type[ModelType], session: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Database session
        """
        self.model = model
        self.session = session

    def create(self, **kwargs) -> ModelType:
        """
        Create a new record.

        Raises:
            IntegrityError: If unique constraint violation or foreign key error
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()  # Flush to get ID without committing
        return instance

    def get_by_id(self, id: int) -> Optional[ModelType]:
        return self.session.query(self.model).filter(self.model.id == id).first()

    def get_all(self, user_id: Optional[int] = None, limit: int = 100, offset: int = 0) -> List[ModelType]:
        """
        Get all records with optional user filtering and pagination.

        Args:
            user_id: Filter by user_id if provided
            limit: Maximum number of records to return
            offset: Number of records to skip
        """
        query = self.session.query(self.model)

        if user_id is not None and hasattr(self.model, "user_id"):
            query = query.filter(self.model.user_id == user_id)

        return query.limit(limit).offset(offset).all()

    def delete(self, id: int) -> bool:
        """
        Delete record by ID.

        Returns:
            True if deleted, False if not found
        """
        instance = self.get_by_id(id)
        if not instance:
            return False

        self.session.delete(instance)
        self.session.flush()
        return True

    def count(self, user_id: Optional[int] = None) -> int:
        query = self.session.query(self.model)

        if user_id is not None and hasattr(self.model, "user_id"):
            query = query.filter(self.model.user_id == user_id)

        return query.count()
