"""Pydantic schemas for Users and authentication."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from recipe_hub.models.user import UserRole
from recipe_hub.schemas.base import CamelModel


class UserRegister(CamelModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    bio: str = Field("", max_length=200)
    profile_picture: Optional[str] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    bio: Optional[str] = Field(None, max_length=200)
    profile_picture: Optional[str] = None


class AdminUserUpdate(ProfileUpdate):
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None


class UserBrief(CamelModel):
    user_id: str
    name: str
    profile_picture: Optional[str] = None


class UserOut(CamelModel):
    user_id: str
    name: str
    email: str
    role: UserRole
    bio: str
    profile_picture: str
    groups: list[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserEnvelope(CamelModel):
    message: str
    user: UserOut


class RegisterOut(UserEnvelope):
    token: str


class LoginOut(CamelModel):
    message: str
    token: str
