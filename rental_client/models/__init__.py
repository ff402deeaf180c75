from .driver import Driver, DriverSummary, DrivingLicense
from .inquiry import Inquiry
from .maintenance import Maintenance, MaintenancePart
from .reservation import BillDetails, Reservation
from .user import User, UserSummary
from .vehicle import Vehicle, VehicleApplication, VehicleSummary

__all__ = [
    "BillDetails",
    "Driver",
    "DriverSummary",
    "DrivingLicense",
    "Inquiry",
    "Maintenance",
    "MaintenancePart",
    "Reservation",
    "User",
    "UserSummary",
    "Vehicle",
    "VehicleApplication",
    "VehicleSummary",
]
