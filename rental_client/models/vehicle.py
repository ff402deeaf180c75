from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .base import ApiModel
from .user import UserSummary

VEHICLE_STATUSES = ("available", "rented", "maintenance", "unavailable")
OWNERSHIP_TYPES = ("Company", "Customer")
FUEL_TYPES = ("Petrol", "Diesel", "Electric", "Hybrid", "Other")
TRANSMISSIONS = ("Manual", "Automatic", "Semi-Automatic")


class VehicleSummary(ApiModel):
    id: str = Field(alias="_id")
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    price: Optional[float] = None
    imageUrl: Optional[str] = None
    status: Optional[str] = None

    @property
    def title(self) -> str:
        parts = [p for p in (self.make, self.model) if p]
        label = " ".join(parts) or "Unknown vehicle"
        if self.year:
            label += f" ({self.year})"
        return label


class Vehicle(ApiModel):
    id: str = Field(alias="_id")
    make: str
    model: str
    year: int
    price: float
    description: str = ""
    imageUrl: Optional[str] = None
    ownership: str = "Company"
    status: str = "available"
    fuelType: Optional[str] = None
    transmission: Optional[str] = None
    seats: Optional[int] = None
    doors: Optional[int] = None
    extraOptions: List[str] = Field(default_factory=list)
    ownerId: Optional[str] = None
    owner: Optional[UserSummary] = None
    createdAt: Optional[str] = None

    def summary(self) -> VehicleSummary:
        return VehicleSummary(
            id=self.id,
            make=self.make,
            model=self.model,
            year=self.year,
            price=self.price,
            imageUrl=self.imageUrl,
            status=self.status,
        )


APPLICATION_STATUSES = ("pending", "approved", "rejected")


class VehicleApplication(ApiModel):
    """A customer-owned vehicle waiting for, or past, admin review."""

    id: str = Field(alias="_id")
    ownerId: Optional[str] = None
    owner: Optional[UserSummary] = None
    make: str
    model: str
    year: int
    price: float
    description: str = ""
    imageUrl: Optional[str] = None
    fuelType: Optional[str] = None
    transmission: Optional[str] = None
    seats: Optional[int] = None
    doors: Optional[int] = None
    extraOptions: List[str] = Field(default_factory=list)
    status: str = "pending"
    createdAt: Optional[str] = None
