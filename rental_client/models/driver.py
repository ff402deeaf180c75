from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ApiModel
from .user import UserSummary

DRIVER_STATUSES = ("active", "suspended")


class DrivingLicense(ApiModel):
    frontImage: str
    backImage: str
    licenseNumber: Optional[str] = None
    expiryDate: Optional[str] = None


class DriverSummary(ApiModel):
    id: str = Field(alias="_id")
    name: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None
    dailyRate: Optional[float] = None


class Driver(ApiModel):
    id: str = Field(alias="_id")
    userId: str
    user: Optional[UserSummary] = None
    age: int
    address: str
    dailyRate: float = 2500
    yearsOfExperience: int = 0
    status: str = "active"
    availability: bool = True
    drivingLicense: Optional[DrivingLicense] = None
    createdAt: Optional[str] = None
