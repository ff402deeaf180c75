from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ApiModel
from .driver import DriverSummary
from .user import UserSummary
from .vehicle import VehicleSummary

RESERVATION_STATUSES = ("pending", "confirmed", "cancelled", "completed")
TRIP_STATUSES = ("pending", "started", "completed")
PAYMENT_STATUSES = ("unpaid", "partially_paid", "paid")
PAYMENT_METHODS = ("cash", "card", "bank_transfer", "online")


class BillDetails(ApiModel):
    receiptNumber: Optional[str] = None
    amountPaid: float = 0
    paymentDate: Optional[str] = None
    paymentMethod: Optional[str] = None
    notes: Optional[str] = None


class Reservation(ApiModel):
    id: str = Field(alias="_id")
    userId: Optional[str] = None
    customer: Optional[UserSummary] = None
    vehicleId: str
    vehicle: Optional[VehicleSummary] = None
    pickupDate: str
    returnDate: str
    pickupLocation: str = ""
    returnLocation: str = ""
    driverRequired: bool = False
    driverId: Optional[str] = None
    driver: Optional[DriverSummary] = None
    status: str = "pending"
    tripStatus: str = "pending"
    paymentStatus: str = "unpaid"
    billDetails: Optional[BillDetails] = None
    totalPrice: float = 0
    basePrice: Optional[float] = None
    driverPrice: Optional[float] = None
    notes: Optional[str] = None
    createdAt: Optional[str] = None

    @property
    def short_id(self) -> str:
        return self.id[:8]
