from .auth import AuthService, LoginResult
from .drivers import DriverForm, DriverService
from .inquiries import InquiryService
from .maintenance import MaintenanceService
from .reservations import ReservationService, estimate_price, filter_reservations
from .vehicles import VehicleService

__all__ = [
    "AuthService",
    "DriverForm",
    "DriverService",
    "InquiryService",
    "LoginResult",
    "MaintenanceService",
    "ReservationService",
    "VehicleService",
    "estimate_price",
    "filter_reservations",
]
