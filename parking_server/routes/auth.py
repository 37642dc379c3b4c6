# parking_server/routes/auth.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from parking_server.config import settings
from parking_server.exceptions import BadRequestException, ErrorCode, NotFoundException
from parking_server.models.user import User, UserRole
from parking_server.schemas.auth import LoginRequest, LoginResponse
from parking_server.schemas.user import UserCreate, UserOut

from .. import auth_utils
from ..db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, db: Session = Depends(get_db)):
    role = user_in.role or UserRole.USER
    if role == UserRole.OFFICER and not settings.ALLOW_OFFICER_SIGNUP:
        raise BadRequestException("Officer accounts cannot be self-registered")

    if auth_utils.get_user_by_username(db, user_in.username):
        raise BadRequestException(
            "User already exists", ErrorCode.USER_ALREADY_EXISTS)

    user = User(
        username=user_in.username,
        password_hash=auth_utils.get_password_hash(user_in.password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} registered with role {user.role.value}")
    return user


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = auth_utils.get_user_by_username(db, request.username)
    if not user:
        logger.warning("Login attempt for unknown username")
        raise NotFoundException("User not found", ErrorCode.USER_NOT_FOUND)

    if not auth_utils.verify_password(request.password, user.password_hash):
        logger.warning(f"Invalid password for user {user.id}")
        raise BadRequestException(
            "Invalid credentials", ErrorCode.INVALID_CREDENTIALS)

    token = auth_utils.create_access_token(data={"sub": str(user.id)})

    return {"user": user, "token": token}


@router.get("/me", response_model=UserOut)
def me(current: User = Depends(auth_utils.get_current_user)):
    return current
