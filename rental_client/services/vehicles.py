from __future__ import annotations

from typing import Any, BinaryIO, Dict, List, Optional, Union

from ..api import ApiClient
from ..errors import ValidationError
from ..models import Vehicle, VehicleApplication
from ..models.vehicle import APPLICATION_STATUSES, FUEL_TYPES, OWNERSHIP_TYPES, TRANSMISSIONS, VEHICLE_STATUSES
from .normalize import normalize_application, normalize_vehicle, unwrap_item, unwrap_list

REQUIRED_FIELDS = ("make", "model", "year", "price", "description", "fuelType", "transmission", "seats", "doors")


def check_vehicle_payload(payload: Dict[str, Any], partial: bool = False) -> None:
    errors: Dict[str, str] = {}
    if not partial:
        missing = [f for f in REQUIRED_FIELDS if payload.get(f) in (None, "")]
        if missing:
            errors["form"] = "Missing fields: " + ", ".join(missing)
    if "fuelType" in payload and payload["fuelType"] not in FUEL_TYPES:
        errors["fuelType"] = f"Fuel type must be one of {', '.join(FUEL_TYPES)}"
    if "transmission" in payload and payload["transmission"] not in TRANSMISSIONS:
        errors["transmission"] = f"Transmission must be one of {', '.join(TRANSMISSIONS)}"
    if "ownership" in payload and payload["ownership"] not in OWNERSHIP_TYPES:
        errors["ownership"] = f"Ownership must be one of {', '.join(OWNERSHIP_TYPES)}"
    if "status" in payload and payload["status"] not in VEHICLE_STATUSES:
        errors["status"] = f"Status must be one of {', '.join(VEHICLE_STATUSES)}"
    for field in ("price", "seats", "doors", "year"):
        value = payload.get(field)
        if value in (None, ""):
            continue
        try:
            if float(value) <= 0:
                errors[field] = f"{field} must be positive"
        except (TypeError, ValueError):
            errors[field] = f"{field} must be a number"
    if errors:
        raise ValidationError(errors)


class VehicleService:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def _many(self, payload: Any) -> List[Vehicle]:
        return [normalize_vehicle(item) for item in unwrap_list(payload, "vehicles")]

    def list_available(self) -> List[Vehicle]:
        return self._many(self.api.get("/vehicles"))

    def search(
        self,
        make: Optional[str] = None,
        model: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        year: Optional[int] = None,
        ownership: Optional[str] = None,
    ) -> List[Vehicle]:
        filters = {
            "make": make,
            "model": model,
            "minPrice": min_price,
            "maxPrice": max_price,
            "year": year,
            "ownership": ownership,
        }
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        return self._many(self.api.get("/vehicles/search", params=params))

    def get(self, vehicle_id: str) -> Vehicle:
        return normalize_vehicle(self.api.get(f"/vehicles/{vehicle_id}"))

    def create(self, payload: Dict[str, Any]) -> Vehicle:
        body = {"ownership": "Company", **payload}
        check_vehicle_payload(body)
        return normalize_vehicle(self.api.post("/vehicles", body))

    def update(self, vehicle_id: str, payload: Dict[str, Any]) -> Vehicle:
        check_vehicle_payload(payload, partial=True)
        return normalize_vehicle(self.api.put(f"/vehicles/{vehicle_id}", payload))

    def delete(self, vehicle_id: str) -> dict:
        return self.api.delete(f"/vehicles/{vehicle_id}")

    def list_all(self) -> List[Vehicle]:
        return self._many(self.api.get("/vehicles/admin/all"))

    def list_company(self) -> List[Vehicle]:
        return self._many(self.api.get("/vehicles/admin/company"))

    def list_customer(self) -> List[Vehicle]:
        return self._many(self.api.get("/vehicles/admin/customer"))

    def register_own(self, payload: Dict[str, Any], image: Union[bytes, BinaryIO, None] = None, filename: str = "vehicle.jpg") -> dict:
        """Submit a customer-owned vehicle for admin approval."""
        body = {"ownership": "Customer", **payload}
        check_vehicle_payload(body)
        data = {k: v for k, v in body.items() if k != "extraOptions"}
        if body.get("extraOptions"):
            data["extraOptions"] = ",".join(body["extraOptions"])
        files = {"image": (filename, image)} if image is not None else {}
        return self.api.post("/vehicles/register", data=data, files=files)

    def my_vehicles(self) -> List[VehicleApplication]:
        """Applications the signed-in user has submitted, newest first."""
        payload = self.api.get("/profile/my-vehicles")
        return [normalize_application(item) for item in unwrap_list(payload, "vehicles")]

    def list_applications(self, status: str = "all") -> List[VehicleApplication]:
        if status != "all" and status not in APPLICATION_STATUSES:
            raise ValidationError({"status": f"Status must be one of {', '.join(APPLICATION_STATUSES)}"})
        payload = self.api.get("/vehicles/admin/applications")
        applications = [normalize_application(item) for item in unwrap_list(payload, "applications")]
        if status == "all":
            return applications
        return [a for a in applications if a.status == status]

    def get_application(self, application_id: str) -> VehicleApplication:
        return normalize_application(self.api.get(f"/vehicles/admin/applications/{application_id}"))

    def approve_application(self, application_id: str) -> Optional[Vehicle]:
        """Approve an application; the backend adds it to the fleet as a Customer vehicle."""
        payload = self.api.put(f"/vehicles/admin/applications/{application_id}/approve", {})
        doc = payload.get("vehicle") if isinstance(payload, dict) else None
        return normalize_vehicle(doc) if doc else None

    def reject_application(self, application_id: str) -> Optional[VehicleApplication]:
        payload = self.api.put(f"/vehicles/admin/applications/{application_id}/reject", {})
        doc = unwrap_item(payload, "application")
        return normalize_application(doc) if doc.get("_id") else None
