"""User model for application-level user management."""

from __future__ import annotations
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class User(BaseModel):
    """An authenticated dashboard user.

    Users are created automatically on first login via the identity provider.
    The idp_user_id links to the 'sub' claim from the JWT token. Every piece
    of synced data is owned by exactly one user.
    """

    id: UUID
    idp_user_id: UUID
    email: str | None
    username: str | None
    created_at: datetime
    updated_at: datetime
