"""
Authentication utilities: JWT handling, password hashing, security dependencies.
"""
import hashlib
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .exceptions import UnauthorizedException
from .models.user import User, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# auto_error=False: a missing header is reported through UnauthorizedException
bearer_scheme = HTTPBearer(auto_error=False)


def _prehash(password: str) -> str:
    """
    Bcrypt only looks at the first 72 bytes, so longer passwords are
    reduced to a SHA256 hex digest first.
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        return hashlib.sha256(password_bytes).hexdigest()
    return password


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(_prehash(plain_password), hashed_password)
    except ValueError as e:
        logger.warning(f"Password verification error: {e}")
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(_prehash(password))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token

    Args:
        data: Dictionary containing user data (must include 'sub' for user_id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token as string
    """
    to_encode = data.copy()
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": now})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Get current user from the bearer token

    Raises:
        UnauthorizedException: header missing, token invalid/expired, or user gone
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise UnauthorizedException("Authorization header missing or malformed")

    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY,
                             algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise UnauthorizedException("Invalid or expired token")

    # Extract user_id from 'sub' claim
    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise UnauthorizedException("Token missing user ID (sub)")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthorizedException("User not found")

    return user


def require_role(*required_roles: UserRole):
    """
    Dependency factory for role-based access control

    Example:
        @router.post("", dependencies=[Depends(require_role(UserRole.OFFICER))])
    """
    def _require_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in required_roles:
            raise UnauthorizedException(
                "You are not authorized to access this resource")
        return current_user

    return _require_role


officer_required = require_role(UserRole.OFFICER)
