"""
Security utilities - JWT token creation and verification.
Tokens protect the /convert endpoints when AUTH_REQUIRED is enabled.
"""

from datetime import datetime, timedelta, timezone  # For token expiration

from jose import JWTError, jwt  # python-jose library for JWT encoding/decoding

from oxy_converter.core.config import settings  # App configuration


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT (JSON Web Token) access token.

    Args:
        subject: The token's subject claim (client or user identifier)
                 Stored in the "sub" field of the JWT payload
        expires_delta: Optional custom expiration time
                      If None, uses ACCESS_TOKEN_EXPIRE_MINUTES from settings

    Returns:
        A signed JWT string (e.g., "eyJhbGciOiJIUzI1NiIs...")
    """
    # Always use UTC to avoid timezone issues
    expire = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_subject(token: str) -> str | None:
    """
    Verify a token and return its subject.

    Returns:
        The "sub" claim, or None if the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        # ExpiredSignatureError, bad signature, malformed token
        return None
    return payload.get("sub")
