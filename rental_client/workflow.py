"""Which reservation actions a role may take, and running them.

The booking and trip state machines belong to the backend; this module
only decides what to offer from the last state the client fetched and
sends one request per action.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional

from .errors import ApiError, RentalClientError, ValidationError, error_message
from .models import Reservation
from .roles import ADMIN, DRIVER, role_of
from .services.reservations import ReservationService, reservation_from_response

logger = logging.getLogger(__name__)


class Action(str, Enum):
    CANCEL = "cancel"
    CONFIRM = "confirm"
    COMPLETE = "complete"
    ADMIN_CANCEL = "admin_cancel"
    START_TRIP = "start_trip"
    END_TRIP = "end_trip"
    RECORD_PAYMENT = "record_payment"


ACTION_LABELS = {
    Action.CANCEL: "Cancel Reservation",
    Action.CONFIRM: "Confirm",
    Action.COMPLETE: "Complete",
    Action.ADMIN_CANCEL: "Cancel",
    Action.START_TRIP: "Start Trip",
    Action.END_TRIP: "End Trip",
    Action.RECORD_PAYMENT: "Update Payment",
}

# Target booking status for the admin status actions
STATUS_TARGETS = {
    Action.CONFIRM: "confirmed",
    Action.COMPLETE: "completed",
    Action.ADMIN_CANCEL: "cancelled",
}

TRIP_TARGETS = {
    Action.START_TRIP: "started",
    Action.END_TRIP: "completed",
}


class ActionNotAllowed(RentalClientError):
    pass


def available_actions(reservation: Reservation, role: Any) -> List[Action]:
    role = role_of(role)
    status = reservation.status
    actions: List[Action] = []

    # Admins cancel through the status endpoint instead
    if status == "pending" and role is not None and role not in (DRIVER, ADMIN):
        actions.append(Action.CANCEL)

    if role == ADMIN:
        if status == "pending":
            actions.append(Action.CONFIRM)
        if status == "confirmed":
            actions.append(Action.COMPLETE)
        if status in ("pending", "confirmed"):
            actions.append(Action.ADMIN_CANCEL)
        if status != "cancelled":
            actions.append(Action.RECORD_PAYMENT)

    if role == DRIVER and status == "confirmed":
        if reservation.tripStatus == "pending":
            actions.append(Action.START_TRIP)
        elif reservation.tripStatus == "started":
            actions.append(Action.END_TRIP)

    return actions


def status_change_prompt(reservation: Reservation, new_status: str) -> str:
    if new_status == "confirmed" and reservation.status != "confirmed":
        message = "Confirming this reservation will mark the vehicle as rented"
        if reservation.driverRequired:
            message += " and set the assigned driver on duty"
        return message + ". Continue?"
    if new_status in ("cancelled", "completed") and reservation.status == "confirmed":
        message = f"Marking this reservation as {new_status} will make the vehicle available again"
        if reservation.driverRequired:
            message += " and release the assigned driver"
        return message + ". Continue?"
    return f"Are you sure you want to change the status to {new_status}?"


class ReservationController:
    """Holds one reservation as last fetched and runs actions against it.

    A failed request leaves ``reservation`` untouched and records the server's
    message in ``last_error``.
    """

    def __init__(self, service: ReservationService, reservation: Reservation, role: Any) -> None:
        self.service = service
        self.reservation = reservation
        self.role = role_of(role)
        self.last_error: Optional[str] = None

    @property
    def actions(self) -> List[Action]:
        return available_actions(self.reservation, self.role)

    def perform(self, action: Action, **payment) -> Reservation:
        action = Action(action)
        if action not in self.actions:
            raise ActionNotAllowed(
                f"{ACTION_LABELS[action]} is not available for a {self.reservation.status} reservation"
                f" as {self.role or 'guest'}"
            )
        if payment and action is not Action.RECORD_PAYMENT:
            raise TypeError(f"{action.value} takes no payment details")

        reservation_id = self.reservation.id
        self.last_error = None
        try:
            if action is Action.CANCEL:
                response = self.service.cancel(reservation_id)
                changes = {"status": "cancelled"}
            elif action in STATUS_TARGETS:
                target = STATUS_TARGETS[action]
                response = self.service.update_status(reservation_id, target)
                changes = {"status": target}
            elif action in TRIP_TARGETS:
                target = TRIP_TARGETS[action]
                response = self.service.update_trip_status(reservation_id, target)
                changes = {"tripStatus": target}
            else:
                response = self.service.update_payment_status(self.reservation, **payment)
                changes = {"paymentStatus": payment["payment_status"]}
        except ApiError as exc:
            self.last_error = error_message(exc.payload, default=exc.message)
            logger.warning("%s failed for reservation %s: %s", action.value, reservation_id, self.last_error)
            raise
        except ValidationError as exc:
            self.last_error = exc.first()
            raise

        updated = reservation_from_response(response)
        if updated is None:
            updated = self.reservation.model_copy(update=changes)
        self.reservation = updated
        logger.info("%s applied to reservation %s", action.value, reservation_id)
        return updated
