from datetime import date

import pytest

from conftest import reservation_doc

from rental_client.errors import BadRequestError, ValidationError
from rental_client.services.normalize import normalize_reservation
from rental_client.workflow import (
    Action,
    ActionNotAllowed,
    ReservationController,
    available_actions,
    status_change_prompt,
)

RID = "665f1c2ab7e4a90012345678"


def make(**overrides):
    return normalize_reservation(reservation_doc(**overrides))


@pytest.mark.parametrize("role", ["customer", "vehicle_owner", "technician"])
def test_pending_offers_cancel_to_non_drivers(role):
    assert available_actions(make(status="pending"), role) == [Action.CANCEL]


def test_pending_offers_nothing_to_drivers_or_guests():
    assert available_actions(make(status="pending"), "driver") == []
    assert available_actions(make(status="pending"), None) == []


def test_confirmed_reservation_has_no_customer_cancel():
    assert available_actions(make(status="confirmed"), "customer") == []


def test_driver_sees_exactly_one_trip_action():
    assert available_actions(make(status="confirmed", tripStatus="pending"), "driver") == [Action.START_TRIP]
    assert available_actions(make(status="confirmed", tripStatus="started"), "driver") == [Action.END_TRIP]
    assert available_actions(make(status="confirmed", tripStatus="completed"), "driver") == []
    assert available_actions(make(status="completed", tripStatus="started"), "driver") == []


def test_admin_actions_by_status():
    assert available_actions(make(status="pending"), "admin") == [
        Action.CONFIRM,
        Action.ADMIN_CANCEL,
        Action.RECORD_PAYMENT,
    ]
    assert available_actions(make(status="confirmed"), "admin") == [
        Action.COMPLETE,
        Action.ADMIN_CANCEL,
        Action.RECORD_PAYMENT,
    ]
    assert available_actions(make(status="completed"), "admin") == [Action.RECORD_PAYMENT]
    assert available_actions(make(status="cancelled"), "admin") == []


def test_status_change_prompts():
    pending = make(status="pending", driverRequired=True)
    assert "rented" in status_change_prompt(pending, "confirmed")
    assert "on duty" in status_change_prompt(pending, "confirmed")
    confirmed = make(status="confirmed")
    assert "available again" in status_change_prompt(confirmed, "completed")
    assert status_change_prompt(pending, "cancelled") == "Are you sure you want to change the status to cancelled?"


def test_cancel_issues_exactly_one_call(client, http):
    http.add("PUT", f"/reservations/{RID}/cancel", {"message": "Reservation cancelled successfully"})
    controller = ReservationController(client.reservations, make(status="pending"), "customer")

    updated = controller.perform(Action.CANCEL)

    assert http.paths() == [("PUT", f"/reservations/{RID}/cancel")]
    assert updated.status == "cancelled"
    assert controller.reservation.status == "cancelled"
    # populated data survives a message-only response
    assert updated.vehicle.make == "Toyota"


def test_driver_cannot_cancel(client, http):
    controller = ReservationController(client.reservations, make(status="pending"), "driver")
    with pytest.raises(ActionNotAllowed):
        controller.perform(Action.CANCEL)
    assert http.calls == []


def test_start_trip_uses_trip_endpoint(client, http):
    http.add("PUT", f"/reservations/{RID}/trip-status", {"reservation": reservation_doc(status="confirmed", tripStatus="started")})
    controller = ReservationController(client.reservations, make(status="confirmed"), "driver")

    controller.perform("start_trip")

    assert http.last()["json"] == {"tripStatus": "started"}
    assert controller.reservation.tripStatus == "started"
    assert controller.actions == [Action.END_TRIP]


def test_admin_confirm_uses_status_endpoint(client, http):
    http.add("PUT", f"/reservations/{RID}/status", {"message": "Reservation status updated to confirmed"})
    controller = ReservationController(client.reservations, make(status="pending"), "admin")

    controller.perform(Action.CONFIRM)

    assert http.last()["json"] == {"status": "confirmed"}
    assert controller.reservation.status == "confirmed"


def test_failure_keeps_prior_state_and_surfaces_message(client, http):
    http.add("PUT", f"/reservations/{RID}/status", {"message": "Vehicle is under maintenance"}, status=400)
    original = make(status="pending")
    controller = ReservationController(client.reservations, original, "admin")

    with pytest.raises(BadRequestError):
        controller.perform(Action.CONFIRM)

    assert controller.reservation is original
    assert controller.last_error == "Vehicle is under maintenance"
    assert len(http.calls) == 1


def test_record_payment(client, http):
    http.add("PUT", f"/reservations/{RID}/payment-status", {"message": "ok"})
    controller = ReservationController(client.reservations, make(status="confirmed"), "admin")

    controller.perform(
        Action.RECORD_PAYMENT,
        payment_status="partially_paid",
        amount_paid="5000",
        receipt_number="R-77",
        payment_date="2030-04-25",
        payment_method="cash",
        today=date(2030, 4, 26),
    )

    assert http.last()["json"] == {
        "paymentStatus": "partially_paid",
        "billDetails": {
            "receiptNumber": "R-77",
            "amountPaid": 5000.0,
            "paymentDate": "2030-04-25",
            "paymentMethod": "cash",
        },
    }
    assert controller.reservation.paymentStatus == "partially_paid"


def test_invalid_payment_never_reaches_server(client, http):
    controller = ReservationController(client.reservations, make(status="confirmed"), "admin")
    with pytest.raises(ValidationError):
        controller.perform(
            Action.RECORD_PAYMENT,
            payment_status="paid",
            amount_paid=100,
            receipt_number="R-1",
            payment_date="2030-04-25",
            today=date(2030, 4, 26),
        )
    assert http.calls == []
    assert controller.last_error is not None
    assert controller.reservation.paymentStatus == "unpaid"


def test_payment_details_only_for_payment_action(client):
    controller = ReservationController(client.reservations, make(status="pending"), "admin")
    with pytest.raises(TypeError):
        controller.perform(Action.CONFIRM, payment_status="paid")
