from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

EMAIL_REGEX = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

Subscription = Literal["starter", "pro", "business"]


class RegisterIn(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGEX, max_length=255)
    password: str = Field(..., min_length=6)
    name: Optional[str] = Field(None, max_length=255)
    subscription: Optional[Subscription] = None


class LoginIn(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGEX, max_length=255)
    password: str = Field(..., min_length=1)


class EmailIn(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGEX, max_length=255)


class SubscriptionIn(BaseModel):
    subscription: Subscription


class PublicProfileOut(BaseModel):
    name: Optional[str] = None
    email: str
    subscription: str
    avatarUrl: Optional[str] = None


class UserSummaryOut(BaseModel):
    email: str
    subscription: str


class LoginOut(BaseModel):
    token: str
    user: UserSummaryOut


class MessageOut(BaseModel):
    message: str


class AvatarOut(BaseModel):
    avatarUrl: str
