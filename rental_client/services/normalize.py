"""Turn the backend's several response shapes into one model per entity.

A reservation's vehicle can arrive as a bare id in ``vehicleId``, as a
populated document in ``vehicleId``, or as a separate ``vehicleDetails``
object; drivers, customers and owners are either ids or populated
documents. Everything past this module sees ids as strings and the
populated data as summaries.
"""
from __future__ import annotations

from typing import Any, List, Optional, Tuple

from ..models import (
    Driver,
    DriverSummary,
    Inquiry,
    Maintenance,
    Reservation,
    User,
    UserSummary,
    Vehicle,
    VehicleApplication,
    VehicleSummary,
)


def unwrap_list(payload: Any, *keys: str) -> List[dict]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys + ("data",):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def unwrap_item(payload: Any, *keys: str) -> dict:
    if isinstance(payload, dict):
        for key in keys + ("data",):
            value = payload.get(key)
            if isinstance(value, dict):
                return value
        return payload
    return {}


def _ref_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        ref = value.get("_id") or value.get("id")
        return str(ref) if ref is not None else None
    return str(value)


def split_ref(value: Any) -> Tuple[Optional[str], Optional[dict]]:
    """(id, populated document or None) for a reference field."""
    ref = _ref_id(value)
    if isinstance(value, dict) and ref is not None:
        return ref, value
    return ref, None


def user_summary(doc: Optional[dict]) -> Optional[UserSummary]:
    if not doc:
        return None
    return UserSummary(
        id=_ref_id(doc),
        name=doc.get("name"),
        email=doc.get("email"),
        phone=doc.get("phone"),
    )


def vehicle_summary(doc: Optional[dict], fallback_id: Optional[str] = None) -> Optional[VehicleSummary]:
    if not doc:
        return None
    vehicle_id = _ref_id(doc) or fallback_id
    if vehicle_id is None:
        return None
    return VehicleSummary(
        id=vehicle_id,
        make=doc.get("make"),
        model=doc.get("model"),
        year=doc.get("year"),
        price=doc.get("price"),
        imageUrl=doc.get("imageUrl"),
        status=doc.get("status"),
    )


def driver_summary(doc: Optional[dict]) -> Optional[DriverSummary]:
    if not doc:
        return None
    _, user_doc = split_ref(doc.get("userId"))
    user_doc = user_doc or {}
    return DriverSummary(
        id=_ref_id(doc),
        name=doc.get("name") or user_doc.get("name"),
        phone=doc.get("phone") or user_doc.get("phone"),
        status=doc.get("status"),
        dailyRate=doc.get("dailyRate"),
    )


def normalize_user(raw: Any) -> User:
    return User.model_validate(unwrap_item(raw, "user"))


def normalize_vehicle(raw: Any) -> Vehicle:
    doc = dict(unwrap_item(raw, "vehicle"))
    owner_id, owner_doc = split_ref(doc.get("ownerId"))
    doc["ownerId"] = owner_id
    doc["owner"] = user_summary(owner_doc)
    return Vehicle.model_validate(doc)


def normalize_reservation(raw: Any) -> Reservation:
    doc = dict(unwrap_item(raw, "reservation"))

    vehicle_id, vehicle_doc = split_ref(doc.get("vehicleId"))
    details = doc.pop("vehicleDetails", None)
    if vehicle_doc is None and isinstance(details, dict):
        vehicle_doc = details
        vehicle_id = vehicle_id or _ref_id(details)
    doc["vehicleId"] = vehicle_id or ""
    doc["vehicle"] = vehicle_summary(vehicle_doc, fallback_id=vehicle_id)

    driver_id, driver_doc = split_ref(doc.get("driverId"))
    doc["driverId"] = driver_id
    doc["driver"] = driver_summary(driver_doc)

    user_id, user_doc = split_ref(doc.get("userId"))
    doc["userId"] = user_id
    doc["customer"] = user_summary(user_doc)

    if "driverRequired" not in doc and "driverNeeded" in doc:
        doc["driverRequired"] = bool(doc.pop("driverNeeded"))
    return Reservation.model_validate(doc)


def normalize_driver(raw: Any) -> Driver:
    doc = dict(unwrap_item(raw, "driver"))
    user_id, user_doc = split_ref(doc.get("userId"))
    doc["userId"] = user_id or ""
    doc["user"] = user_summary(user_doc)
    return Driver.model_validate(doc)


def normalize_inquiry(raw: Any) -> Inquiry:
    doc = dict(unwrap_item(raw, "inquiry"))
    driver_id, driver_doc = split_ref(doc.get("driverId"))
    doc["driverId"] = driver_id or ""
    doc["driver"] = driver_summary(driver_doc)

    vehicle_id, vehicle_doc = split_ref(doc.get("vehicleId"))
    doc["vehicleId"] = vehicle_id
    doc["vehicle"] = vehicle_summary(vehicle_doc)

    doc["userId"] = _ref_id(doc.get("userId"))
    doc["tripId"] = _ref_id(doc.get("tripId"))
    if doc.get("adminResponse") is None:
        doc["adminResponse"] = ""
    return Inquiry.model_validate(doc)


def normalize_application(raw: Any) -> VehicleApplication:
    doc = dict(unwrap_item(raw, "application"))
    owner_id, owner_doc = split_ref(doc.get("owner"))
    doc["ownerId"] = owner_id
    doc["owner"] = user_summary(owner_doc)
    return VehicleApplication.model_validate(doc)


def normalize_maintenance(raw: Any) -> Maintenance:
    doc = dict(unwrap_item(raw, "maintenance"))
    vehicle_id, vehicle_doc = split_ref(doc.get("vehicleId"))
    doc["vehicleId"] = vehicle_id or ""
    doc["vehicle"] = vehicle_summary(vehicle_doc)

    # Older records only carry assignedTechnician
    tech_id, tech_doc = split_ref(doc.get("technicianId") or doc.get("assignedTechnician"))
    doc["technicianId"] = tech_id
    if tech_doc:
        _, tech_user = split_ref(tech_doc.get("userId"))
        doc["technicianName"] = tech_doc.get("name") or (tech_user or {}).get("name")
    return Maintenance.model_validate(doc)
