from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..api import ApiClient
from ..errors import ValidationError
from ..models import Driver
from ..models.driver import DRIVER_STATUSES
from ..validation import validate_driver_form
from .normalize import normalize_driver, unwrap_item, unwrap_list

logger = logging.getLogger(__name__)


@dataclass
class DriverForm:
    name: str
    email: str
    phone: str
    age: Any
    address: str
    front_license: Optional[bytes] = None
    back_license: Optional[bytes] = None
    daily_rate: Any = None
    years_of_experience: Any = None
    license_number: Optional[str] = None
    front_filename: str = "front.jpg"
    back_filename: str = "back.jpg"
    extra: Dict[str, Any] = field(default_factory=dict)

    def fields(self) -> Dict[str, str]:
        data = {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "age": self.age,
            "address": self.address,
            "dailyRate": self.daily_rate,
            "yearsOfExperience": self.years_of_experience,
            "licenseNumber": self.license_number,
            **self.extra,
        }
        return {k: str(v) for k, v in data.items() if v not in (None, "")}

    def files(self) -> Dict[str, tuple]:
        files = {}
        if self.front_license:
            files["frontLicense"] = (self.front_filename, self.front_license)
        if self.back_license:
            files["backLicense"] = (self.back_filename, self.back_license)
        return files


class DriverService:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def create(self, form: DriverForm) -> dict:
        validate_driver_form(
            form.name,
            form.email,
            form.phone,
            form.age,
            form.address,
            form.front_license,
            form.back_license,
            daily_rate=form.daily_rate,
        )
        result = self.api.post("/drivers/create", data=form.fields(), files=form.files())
        logger.info("Driver %s created", form.email)
        return result

    def list(self) -> List[Driver]:
        return [normalize_driver(item) for item in unwrap_list(self.api.get("/drivers/list"), "drivers")]

    def get(self, driver_id: str) -> Driver:
        return normalize_driver(self.api.get(f"/drivers/{driver_id}"))

    def update(self, driver_id: str, changes: Dict[str, Any], front_license: Optional[bytes] = None, back_license: Optional[bytes] = None) -> Driver:
        if front_license or back_license:
            files = {}
            if front_license:
                files["frontLicense"] = ("front.jpg", front_license)
            if back_license:
                files["backLicense"] = ("back.jpg", back_license)
            data = {k: str(v) for k, v in changes.items() if v is not None}
            payload = self.api.put(f"/drivers/{driver_id}", data=data, files=files)
        else:
            payload = self.api.put(f"/drivers/{driver_id}", changes)
        return normalize_driver(unwrap_item(payload, "driver"))

    def update_status(self, driver_id: str, status: str) -> dict:
        if status not in DRIVER_STATUSES:
            raise ValidationError({"status": f"Driver status must be one of {', '.join(DRIVER_STATUSES)}"})
        return self.api.put(f"/drivers/{driver_id}/status", {"status": status})

    def delete(self, driver_id: str) -> dict:
        return self.api.delete(f"/drivers/{driver_id}")
