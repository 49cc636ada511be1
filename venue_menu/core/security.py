"""
Password hashing and the two JWT kinds used by the API.

Access tokens authorize menu management calls; refresh tokens are also
stored server side so they can be rotated and revoked.
"""
from datetime import datetime, timedelta, timezone
from enum import Enum
import logging
import secrets

from jose import JWTError, jwt
from passlib.context import CryptContext

from venue_menu.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def token_lifetime(kind: TokenKind) -> timedelta:
    if kind is TokenKind.ACCESS:
        return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)


def issue_token(user_id: int, role: str, kind: TokenKind) -> str:
    """Sign a token of *kind* for the account."""
    issued_at = datetime.now(tz=timezone.utc)
    claims = {
        "sub": str(user_id),
        "role": role,
        "type": kind.value,
        "iat": issued_at,
        "exp": issued_at + token_lifetime(kind),
        # Two refresh tokens issued in the same second must still differ.
        "jti": secrets.token_hex(8),
    }
    logger.trace("Issuing %s token for user id=%s", kind.value, user_id)
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_token(token: str, kind: TokenKind) -> int:
    """
    Verify *token* and return the user id it was issued for.

    Raises:
        jose.JWTError: bad signature, expired, wrong kind or no subject.
    """
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if claims.get("type") != kind.value:
        raise JWTError(f"expected a {kind.value} token")
    subject = claims.get("sub")
    if subject is None or not subject.isdigit():
        raise JWTError("token has no usable subject")
    return int(subject)
