"""
Clerk JWT authentication for FastAPI.

Supports three modes:
1. Clerk mode: Verifies JWT tokens from Clerk (when CLERK_SECRET_KEY is set)
2. Demo mode: When Clerk IS configured but no token provided, returns demo user
3. Single-user mode: Falls back to user_id=1 for self-hosted usage
"""

import os
from typing import Optional

import jwt
from jwt import PyJWKClient
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from finsight.db.connection import get_db_session
from finsight.db.models import User
from finsight.db.repositories import UserRepository


# Clerk configuration from environment
CLERK_SECRET_KEY = os.getenv("CLERK_SECRET_KEY")
CLERK_ISSUER = os.getenv("CLERK_ISSUER")  # e.g., https://clerk.your-domain.com
CLERK_JWKS_URL = f"{CLERK_ISSUER}/.well-known/jwks.json" if CLERK_ISSUER else None

# Demo user convention: clerk_id="demo"
DEMO_CLERK_ID = "demo"

# Single-user mode owner
DEFAULT_USER_ID = 1

# Security scheme - optional so it doesn't fail when no auth is configured
security = HTTPBearer(auto_error=False)

# Cache JWKS client
_jwks_client: Optional[PyJWKClient] = None


def _get_jwks_client() -> PyJWKClient:
    """Get or create cached JWKS client."""
    global _jwks_client
    if _jwks_client is None and CLERK_JWKS_URL:
        _jwks_client = PyJWKClient(CLERK_JWKS_URL)
    return _jwks_client


def _verify_clerk_token(token: str) -> dict:
    """
    Verify a Clerk JWT token and return the decoded payload.

    Raises:
        HTTPException: If token is invalid or expired
    """
    jwks_client = _get_jwks_client()
    if not jwks_client:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Clerk JWKS not configured",
        )

    try:
        signing_key = jwks_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            issuer=CLERK_ISSUER,
            options={"verify_aud": False},  # Clerk doesn't always set audience
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db_session),
) -> User:
    """
    FastAPI dependency that returns the current authenticated user.

    In Clerk mode (CLERK_SECRET_KEY set):
        - Verifies JWT from Authorization header
        - Returns user mapped to Clerk ID (auto-creates on first auth)

    In single-user mode (no CLERK_SECRET_KEY):
        - Returns user with id=1, created on first request
        - No authentication required
    """
    repo = UserRepository(db)

    # Single-user mode: no Clerk configured
    if not CLERK_SECRET_KEY:
        user = repo.get_or_create_default(DEFAULT_USER_ID)
        db.commit()
        return user

    # Clerk mode: verify JWT, or fall back to demo user if no token
    if not credentials:
        demo_user = repo.get_by_clerk_id(DEMO_CLERK_ID)
        if demo_user:
            return demo_user
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = _verify_clerk_token(credentials.credentials)
    clerk_id = payload.get("sub")
    if not clerk_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject",
        )

    user = repo.get_or_create_by_clerk_id(clerk_id, payload.get("email"))
    db.commit()
    return user


def is_demo_user(user: User) -> bool:
    """Check if the given user is the demo user."""
    return user.clerk_id == DEMO_CLERK_ID
