from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .base import ApiModel
from .driver import DriverSummary
from .vehicle import VehicleSummary

INQUIRY_TYPES = ("breakdown", "complaint", "other")
INQUIRY_STATUSES = ("pending", "in-progress", "resolved")
INQUIRY_PRIORITIES = ("low", "medium", "high", "urgent")


class Inquiry(ApiModel):
    id: str = Field(alias="_id")
    driverId: str
    driver: Optional[DriverSummary] = None
    userId: Optional[str] = None
    type: str
    subject: str
    description: str
    location: Optional[str] = None
    tripId: Optional[str] = None
    vehicleId: Optional[str] = None
    vehicle: Optional[VehicleSummary] = None
    status: str = "pending"
    priority: str = "medium"
    adminResponse: str = ""
    images: List[str] = Field(default_factory=list)
    resolvedAt: Optional[str] = None
    createdAt: Optional[str] = None
