"""
Seed demo data for the Finsight public showcase.

Creates a demo user (clerk_id="demo") whose documents hold the sample data
set. Idempotent: deletes the existing demo user and re-seeds from scratch.

Usage:
    python -m finsight.scripts.seed_demo_data
"""

from finsight.core.constants import EDocument, ETab, EView
from finsight.core.sample_data import sample_collections
from finsight.db.connection import get_db_manager
from finsight.db.models import User
from finsight.db.record_store import now_ms, wrap_document
from finsight.db.repositories import DocumentRepository, UserRepository

DEMO_CLERK_ID = "demo"


def delete_demo_data(session):
    """Delete the demo user and all of its documents."""
    demo_user = UserRepository(session).get_by_clerk_id(DEMO_CLERK_ID)
    if demo_user:
        # Cascade delete handles user_documents
        session.delete(demo_user)
        session.flush()
        print("Deleted existing demo user and all associated data.")


def seed_demo_data(session) -> User:
    """Create the demo user with the sample transactions, investments and debts."""
    user = UserRepository(session).create(
        name="Demo User",
        email="demo@finsight.example",
        clerk_id=DEMO_CLERK_ID,
        auth_provider="demo",
    )
    print(f"Created demo user (id={user.id})")

    repo = DocumentRepository(session)
    updated_at = now_ms()
    for name, items in sample_collections().items():
        repo.upsert(user.id, name, wrap_document(name, items, updated_at), updated_at)
        print(f"  Created {len(items)} {name}")

    settings = {"view": EView.MONTHLY.value, "activeTab": ETab.DASHBOARD}
    repo.upsert(user.id, EDocument.SETTINGS, wrap_document(EDocument.SETTINGS, settings, updated_at), updated_at)
    return user


def seed():
    """Full seed: delete existing demo data, then re-seed."""
    db_manager = get_db_manager()
    db_manager.create_all()

    with db_manager.session() as session:
        delete_demo_data(session)
        seed_demo_data(session)

    print("\nDemo data seeding complete.")


if __name__ == "__main__":
    seed()
