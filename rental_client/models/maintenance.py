from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .base import ApiModel
from .vehicle import VehicleSummary

MAINTENANCE_TYPES = (
    "Regular",
    "Regular Service",
    "Repair",
    "Inspection",
    "Tire Change",
    "Oil Change",
    "Major Overhaul",
)
MAINTENANCE_STATUSES = ("scheduled", "in-progress", "completed", "cancelled")
MAINTENANCE_FILE_TYPES = ("bill", "report")


class MaintenancePart(ApiModel):
    name: Optional[str] = None
    quantity: Optional[int] = None
    cost: Optional[float] = None


class Maintenance(ApiModel):
    id: str = Field(alias="_id")
    vehicleId: str
    vehicle: Optional[VehicleSummary] = None
    technicianId: Optional[str] = None
    technicianName: Optional[str] = None
    maintenanceType: str
    description: str = ""
    scheduledDate: str
    completionDate: Optional[str] = None
    status: str = "scheduled"
    cost: float = 0
    actualCost: float = 0
    partsCost: float = 0
    laborCost: float = 0
    additionalCosts: float = 0
    reportText: Optional[str] = None
    notes: Optional[str] = None
    billFiles: List[str] = Field(default_factory=list)
    reportFiles: List[str] = Field(default_factory=list)
    parts: List[MaintenancePart] = Field(default_factory=list)
    createdAt: Optional[str] = None
