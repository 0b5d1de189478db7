# This project was developed with assistance from AI tools.
"""Bearer token issuance and verification.

Pure functions with no FastAPI or database dependencies: verification never
touches a store, so a bad token is rejected before any query is issued.
"""

import logging
from datetime import UTC, datetime, timedelta

import jwt
from meras_db.enums import UserRole
from pydantic import ValidationError

from ..schemas.auth import Identity, TokenPayload
from .config import settings
from .errors import Unauthorized

logger = logging.getLogger(__name__)

# Tolerated clock drift between token issuer and verifier.
CLOCK_SKEW_SECONDS = 30


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def issue_token(identity: Identity, expires_in: timedelta | None = None) -> str:
    """Sign a token for ``identity`` with the configured secret and issuer."""
    now = datetime.now(UTC)
    ttl = expires_in if expires_in is not None else timedelta(seconds=settings.TOKEN_TTL_SECONDS)
    claims = {
        "sub": identity.user_id,
        "email": identity.email,
        "role": identity.role.value,
        "iss": settings.JWT_ISSUER,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str | None) -> Identity:
    """Validate signature, issuer and expiry; return the token's identity.

    Raises:
        Unauthorized: token missing, expired, tampered, from another issuer,
            or naming a role this system does not define.
    """
    if not token:
        raise Unauthorized("Missing authentication token")

    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            leeway=CLOCK_SKEW_SECONDS,
            options={"require": ["sub", "exp", "iss"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthorized("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise Unauthorized("Invalid token") from exc

    try:
        payload = TokenPayload(**claims)
        role = UserRole(payload.role)
    except (ValidationError, ValueError) as exc:
        raise Unauthorized("Invalid token") from exc

    return Identity(user_id=payload.sub, email=payload.email, role=role)
