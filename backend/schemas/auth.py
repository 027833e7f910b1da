"""Pydantic schemas for authentication and the current user."""

from typing import Literal

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    sync_frequency: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    user: UserResponse
    token: str


class UserUpdate(BaseModel):
    sync_frequency: Literal["daily", "weekly", "manual"]
