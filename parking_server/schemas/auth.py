"""
Schemas for authentication (login, token).
"""
from .user import UserSummary
from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user: UserSummary
    token: str
