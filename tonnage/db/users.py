"""Database operations for user management."""

import logging
from typing import Optional
from uuid import UUID

from tonnage.models.user import User
from .connection import get_db_cursor

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, idp_user_id, email, username, created_at, updated_at"


def get_user_by_idp_id(idp_user_id: UUID) -> Optional[User]:
    """Get a user by their identity provider user ID (sub claim)."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"SELECT {_USER_COLUMNS} FROM users WHERE idp_user_id = %s",
            (str(idp_user_id),),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


def create_user(
    idp_user_id: UUID,
    email: Optional[str],
    username: Optional[str],
) -> User:
    """Create a new user record.

    Args:
        idp_user_id: The 'sub' claim from the JWT token (identity provider user ID).
        email: User's email (cached from JWT, may be None).
        username: User's username (cached from JWT, may be None).
    """
    logger.info(
        f"Creating new user with idp_user_id={idp_user_id}, username={username}"
    )
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            INSERT INTO users (idp_user_id, email, username)
            VALUES (%s, %s, %s)
            ON CONFLICT (idp_user_id) DO UPDATE
                SET email = EXCLUDED.email, username = EXCLUDED.username
            RETURNING {_USER_COLUMNS}
            """,
            (str(idp_user_id), email, username),
        )
        user = _row_to_user(cursor.fetchone())
        logger.info(f"Created user id={user.id} for idp_user_id={idp_user_id}")
        return user


def update_user_profile(
    idp_user_id: UUID,
    email: Optional[str],
    username: Optional[str],
) -> Optional[User]:
    """Refresh a user's cached email and username from the latest token."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            UPDATE users
            SET email = %s, username = %s
            WHERE idp_user_id = %s
            RETURNING {_USER_COLUMNS}
            """,
            (email, username, str(idp_user_id)),
        )
        row = cursor.fetchone()
        return _row_to_user(row) if row else None


def get_or_create_user(
    idp_user_id: UUID,
    email: Optional[str],
    username: Optional[str],
) -> User:
    """Get an existing user or create one on first login.

    Existing users get their cached profile refreshed when it changed.
    """
    existing_user = get_user_by_idp_id(idp_user_id)

    if existing_user:
        if existing_user.email != email or existing_user.username != username:
            logger.debug(f"Updating profile for user {idp_user_id}")
            updated_user = update_user_profile(idp_user_id, email, username)
            if updated_user:
                return updated_user
        return existing_user

    return create_user(idp_user_id, email, username)


def _row_to_user(row) -> User:
    id, idp_user_id, email, username, created_at, updated_at = row
    return User(
        id=id,
        idp_user_id=idp_user_id,
        email=email,
        username=username,
        created_at=created_at,
        updated_at=updated_at,
    )
