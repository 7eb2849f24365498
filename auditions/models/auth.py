from pydantic import BaseModel
from enum import Enum


class Role(str, Enum):
    """Role granted by the login gate"""
    ADMIN = "admin"
    PANEL = "panel"


class LoginRequest(BaseModel):
    role: Role
    password: str


class LoginResponse(BaseModel):
    token: str
    role: Role
