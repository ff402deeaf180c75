from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ApiModel


class UserSummary(ApiModel):
    id: str = Field(alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class User(ApiModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    phone: Optional[str] = None
    role: str = "customer"
    profilePic: Optional[str] = None
    isVerified: bool = False
    twoFactorEnabled: bool = False
    createdAt: Optional[str] = None
