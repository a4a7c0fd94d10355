"""
Dependencies module - reusable FastAPI dependencies for route handlers.
Provides the process-wide converter and optional JWT authentication.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, status  # FastAPI components
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials  # Auth header extraction

from oxy_converter.converter import HtmlConverter
from oxy_converter.core.config import settings  # App configuration
from oxy_converter.core.security import decode_subject

# ---------------------------------------------------------------------------
# SECURITY SCHEME
# ---------------------------------------------------------------------------
# HTTPBearer: Extracts tokens from the "Authorization: Bearer <token>" header
# - auto_error=False: a missing header is allowed through when AUTH_REQUIRED is off
security = HTTPBearer(auto_error=False)


@lru_cache
def get_converter() -> HtmlConverter:
    """
    Converter shared by all requests.

    Built once from settings; every convert() call has its own context,
    so sharing the instance across requests is safe.
    """
    return HtmlConverter.from_settings(settings)


def get_current_subject(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    """
    Validate the JWT token when authentication is required.

    Returns:
        The token subject, or None when AUTH_REQUIRED is off

    Raises:
        401 Unauthorized: If the token is missing, invalid or expired
    """
    if not settings.AUTH_REQUIRED:
        return None

    # Same error for every case so callers can't tell why a token was rejected
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},  # Standard header per RFC 6750
    )

    if credentials is None:
        raise credentials_exception

    subject = decode_subject(credentials.credentials)
    if subject is None:
        raise credentials_exception
    return subject
