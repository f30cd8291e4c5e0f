"""OAuth authentication for routers."""

from .oauth import get_current_user, require_user

__all__ = [
    "get_current_user",
    "require_user",
]
