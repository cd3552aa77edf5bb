import logging
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.config import settings
from pomotrack.models.user import User

logger = logging.getLogger(__name__)


class AccountExistsError(ValueError):
    """Username or email already registered."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def issue_tokens(user_id: str | uuid.UUID) -> dict:
    """Issue JWT access + refresh token pair."""
    now = datetime.now(timezone.utc)

    access_payload = {
        "sub": str(user_id),
        "type": "access",
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    access_token = jwt.encode(access_payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    refresh_payload = {
        "sub": str(user_id),
        "type": "refresh",
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    }
    refresh_token = jwt.encode(refresh_payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


def _decode(token: str, expected_type: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise ValueError("Invalid or expired token")

    if payload.get("type") != expected_type:
        raise ValueError("Invalid token type")
    return payload


def decode_access_token(token: str) -> str:
    """Validate an access token and return the user id it was issued for."""
    return _decode(token, "access")["sub"]


async def refresh_tokens(refresh_token: str, redis_client) -> dict:
    """Validate refresh token and issue new pair. Rotate by blacklisting old refresh token."""
    payload = _decode(refresh_token, "refresh")

    jti = payload.get("jti")
    if jti:
        # Check if this refresh token has been revoked
        is_revoked = await redis_client.get(f"revoked_refresh:{jti}")
        if is_revoked:
            raise ValueError("Refresh token has been revoked")

        # Revoke the old refresh token
        ttl = settings.REFRESH_TOKEN_EXPIRE_DAYS * 86400
        await redis_client.setex(f"revoked_refresh:{jti}", ttl, "1")

    return issue_tokens(payload["sub"])


async def register_user(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
) -> User:
    """Register a new user with username, email and password."""
    result = await db.execute(
        select(User).where(or_(User.email == email, User.username == username))
    )
    if result.scalars().first() is not None:
        logger.info("Registration rejected, account exists for %s", email)
        raise AccountExistsError("An account with this username or email already exists")

    user = User(
        id=uuid.uuid4(),
        username=username,
        email=email,
        password_hash=hash_password(password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def login_with_email(
    db: AsyncSession,
    email: str,
    password: str,
) -> User:
    """Authenticate user with email/password."""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        raise ValueError("Invalid email or password")

    return user
