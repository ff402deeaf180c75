from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional

from ..api import ApiClient
from ..dates import days_between, to_iso_date
from ..errors import ValidationError
from ..models import DriverSummary, Reservation
from ..models.reservation import RESERVATION_STATUSES, TRIP_STATUSES
from ..validation import validate_payment, validate_reservation
from .normalize import driver_summary, normalize_reservation, unwrap_item, unwrap_list


@dataclass
class PriceEstimate:
    days: int
    base_price: float
    driver_price: float

    @property
    def total_price(self) -> float:
        return self.base_price + self.driver_price


def estimate_price(daily_price: float, pickup_date: Any, return_date: Any, driver_daily_rate: Optional[float] = None) -> PriceEstimate:
    """Display-only estimate; the backend computes the real total."""
    days = days_between(pickup_date, return_date)
    driver_price = days * driver_daily_rate if driver_daily_rate else 0
    return PriceEstimate(days=days, base_price=days * daily_price, driver_price=driver_price)


def filter_reservations(reservations: Iterable[Reservation], status: str = "all", search: str = "") -> List[Reservation]:
    term = search.strip().lower()
    result = []
    for reservation in reservations:
        if status != "all" and reservation.status != status:
            continue
        if term:
            haystack = [reservation.id, reservation.status, reservation.paymentStatus]
            if reservation.customer:
                haystack += [reservation.customer.name or "", reservation.customer.email or ""]
            if reservation.vehicle:
                haystack += [reservation.vehicle.make or "", reservation.vehicle.model or ""]
            if not any(term in value.lower() for value in haystack):
                continue
        result.append(reservation)
    return result


class ReservationService:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def _many(self, payload: Any) -> List[Reservation]:
        return [normalize_reservation(item) for item in unwrap_list(payload, "reservations")]

    def list_all(self) -> List[Reservation]:
        return self._many(self.api.get("/reservations"))

    def list_mine(self) -> List[Reservation]:
        return self._many(self.api.get("/reservations/user"))

    def list_for_driver(self) -> List[Reservation]:
        return self._many(self.api.get("/reservations/driver"))

    def available_drivers(self) -> List[DriverSummary]:
        payload = self.api.get("/reservations/drivers")
        return [driver_summary(item) for item in unwrap_list(payload, "drivers")]

    def check_availability(self, vehicle_id: str, pickup_date: Any, return_date: Any) -> dict:
        return self.api.get(
            "/reservations/check-availability",
            params={
                "vehicleId": vehicle_id,
                "pickupDate": to_iso_date(pickup_date),
                "returnDate": to_iso_date(return_date),
            },
        )

    def create(
        self,
        vehicle_id: str,
        pickup_date: Any,
        return_date: Any,
        pickup_location: str,
        return_location: str,
        driver_required: bool = False,
        driver_id: Optional[str] = None,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Reservation:
        validate_reservation(
            pickup_date, return_date, pickup_location, return_location, driver_required, driver_id, today=today
        )
        body = {
            "vehicleId": vehicle_id,
            "pickupDate": to_iso_date(pickup_date),
            "returnDate": to_iso_date(return_date),
            "pickupLocation": pickup_location.strip(),
            "returnLocation": return_location.strip(),
            "driverRequired": driver_required,
            "driverId": driver_id if driver_required else None,
        }
        if notes:
            body["notes"] = notes
        return normalize_reservation(self.api.post("/reservations", body))

    def cancel(self, reservation_id: str) -> dict:
        return self.api.put(f"/reservations/{reservation_id}/cancel", {})

    def update_status(self, reservation_id: str, status: str) -> dict:
        if status not in RESERVATION_STATUSES:
            raise ValidationError({"status": f"Invalid status value: {status}"})
        return self.api.put(f"/reservations/{reservation_id}/status", {"status": status})

    def update_trip_status(self, reservation_id: str, trip_status: str) -> dict:
        if trip_status not in TRIP_STATUSES:
            raise ValidationError({"tripStatus": f"Invalid trip status: {trip_status}"})
        return self.api.put(f"/reservations/{reservation_id}/trip-status", {"tripStatus": trip_status})

    def update_payment_status(
        self,
        reservation: Reservation,
        payment_status: str,
        amount_paid: Any = None,
        receipt_number: Optional[str] = None,
        payment_date: Any = None,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> dict:
        validate_payment(
            reservation.totalPrice,
            payment_status,
            amount_paid,
            receipt_number,
            payment_date,
            payment_method=payment_method,
            created_at=reservation.createdAt,
            today=today,
        )
        body: dict = {"paymentStatus": payment_status}
        if payment_status != "unpaid":
            bill = {
                "receiptNumber": receipt_number.strip(),
                "amountPaid": float(amount_paid),
                "paymentDate": to_iso_date(payment_date),
            }
            if payment_method:
                bill["paymentMethod"] = payment_method
            if notes:
                bill["notes"] = notes
            body["billDetails"] = bill
        return self.api.put(f"/reservations/{reservation.id}/payment-status", body)


def reservation_from_response(payload: Any) -> Optional[Reservation]:
    """The updated reservation in a mutation response, if the server sent one."""
    doc = unwrap_item(payload, "reservation")
    if doc.get("_id") or doc.get("id"):
        return normalize_reservation(doc)
    return None
