"""
SQLAlchemy ORM models for the Finsight record store.

Each user owns four JSON documents (transactions, investments, debts,
settings). A document is overwritten as a whole on every save; there is no
per-record table and no history.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import relationship

from finsight.core.constants import ALL_DOCUMENTS

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, unique=True)
    clerk_id = Column(Text, unique=True, index=True, nullable=True)
    auth_provider = Column(Text, default="clerk")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    is_active = Column(Boolean, default=True)

    # Relationships
    documents = relationship("UserDocument", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"


class UserDocument(Base):
    __tablename__ = "user_documents"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    doc_name = Column(Text, nullable=False)
    payload = Column(JSONB, nullable=False, server_default="{}")
    updated_at_ms = Column(BigInteger)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="documents")

    # Constraints
    __table_args__ = (
        UniqueConstraint("user_id", "doc_name", name="uq_user_document_name"),
        CheckConstraint(
            "doc_name IN (" + ", ".join(f"'{name}'" for name in ALL_DOCUMENTS) + ")",
            name="ck_user_document_name",
        ),
        Index("idx_user_documents_user_id", "user_id"),
    )

    def __repr__(self):
        return f"<UserDocument(id={self.id}, user_id={self.user_id}, doc_name='{self.doc_name}')>"
