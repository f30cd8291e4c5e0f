"""JWT validation for OAuth 2.0 access tokens."""

import os
import time
import logging
from typing import Optional, Dict, Any
from uuid import UUID

import jwt
from jwt import PyJWKClient
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from tonnage.models.user import User
from tonnage.db.users import get_or_create_user

logger = logging.getLogger(__name__)
oauth_scheme = HTTPBearer(auto_error=False)

_jwks_client: Optional[PyJWKClient] = None
_jwks_cache_time: float = 0
JWKS_CACHE_DURATION = 3600  # 1 hour


def get_identity_provider_url() -> str:
    url = os.getenv("IDENTITY_PROVIDER_URL", "http://localhost:8080")
    return url.rstrip("/")


def get_jwt_audience() -> str:
    """Expected JWT audience; validated at startup by the env loader."""
    return os.environ["JWT_AUDIENCE"]


def get_jwks_client() -> PyJWKClient:
    """Get or refresh the JWKS client used to verify token signatures."""
    global _jwks_client, _jwks_cache_time

    current_time = time.time()
    if _jwks_client is None or (current_time - _jwks_cache_time) > JWKS_CACHE_DURATION:
        jwks_url = f"{get_identity_provider_url()}/.well-known/jwks.json"
        _jwks_client = PyJWKClient(
            jwks_url, cache_keys=True, lifespan=JWKS_CACHE_DURATION
        )
        _jwks_cache_time = current_time
        logger.info(f"Refreshed JWKS client from {jwks_url}")

    return _jwks_client


def validate_jwt_token(token: str) -> Optional[Dict[str, Any]]:
    """Validate a JWT access token locally using JWKS.

    Returns decoded claims if valid, None if invalid.
    """
    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            issuer=get_identity_provider_url(),
            audience=get_jwt_audience(),
            options={"require": ["exp", "iss", "sub", "aud"]},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("JWT token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid JWT token: {e}")
        return None
    except jwt.PyJWKClientError as e:
        logger.error(f"Could not fetch signing key: {e}")
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth_scheme),
) -> User:
    """FastAPI dependency to get the current authenticated user.

    Validates the bearer token and gets or creates the matching user. The
    cached email and username are refreshed on each login.

    Raises:
        HTTPException 401 if the token is missing or invalid.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = validate_jwt_token(credentials.credentials)
    if not claims:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    sub = claims.get("sub")
    if not sub:
        logger.error(f"JWT missing sub claim: {claims}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Token missing required claims",
        )

    try:
        idp_user_id = UUID(sub)
    except ValueError:
        logger.error(f"Invalid UUID in sub claim: {sub}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Invalid token claims",
        )

    return get_or_create_user(idp_user_id, claims.get("email"), claims.get("username"))


async def require_user(user: User = Depends(get_current_user)) -> User:
    """FastAPI dependency for endpoints open to any signed-in user.

    Every user only ever sees and changes their own data.
    """
    return user
