from __future__ import annotations

from typing import Optional

import requests

from .api import ApiClient
from .config import settings
from .navigation import Navigator
from .session import FileTokenStorage, MemoryTokenStorage, SessionStore
from .services import (
    AuthService,
    DriverService,
    InquiryService,
    MaintenanceService,
    ReservationService,
    VehicleService,
)


class RentalClient:
    """One session, one HTTP client and every resource service on top."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_file: Optional[str] = None,
        navigator: Optional[Navigator] = None,
        http: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        storage = FileTokenStorage(token_file) if token_file else MemoryTokenStorage()
        self.session = SessionStore(storage)
        self.navigator = navigator or Navigator()
        self.api = ApiClient(self.session, self.navigator, base_url=base_url, timeout=timeout, http=http)
        self.auth = AuthService(self.api)
        self.vehicles = VehicleService(self.api)
        self.reservations = ReservationService(self.api)
        self.drivers = DriverService(self.api)
        self.inquiries = InquiryService(self.api)
        self.maintenance = MaintenanceService(self.api)

    @classmethod
    def from_settings(cls, **kwargs) -> "RentalClient":
        kwargs.setdefault("token_file", settings.TOKEN_FILE)
        return cls(**kwargs)
