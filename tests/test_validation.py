from datetime import date

import pytest

from rental_client.errors import ValidationError
from rental_client.validation import (
    is_valid_email,
    is_valid_phone,
    validate_driver_form,
    validate_inquiry,
    validate_payment,
    validate_registration,
    validate_reservation,
)

TODAY = date(2030, 5, 10)


@pytest.mark.parametrize("phone", ["+94771234567", "0771234567", "077 123 4567", "077-123-4567"])
def test_phone_accepted(phone):
    assert is_valid_phone(phone)


@pytest.mark.parametrize("phone", ["1234567890", "", None, "+9477123456", "0671234567", "+1 555 123 4567"])
def test_phone_rejected(phone):
    assert not is_valid_phone(phone)


def test_email():
    assert is_valid_email("nimal@example.com")
    assert not is_valid_email("nimal@example")
    assert not is_valid_email("nimal example.com")
    assert not is_valid_email("")


@pytest.mark.parametrize("email", ["a@b..com", "a@-b.com", "a@b", "a@@b.com"])
def test_email_rejects_malformed_domains(email):
    assert not is_valid_email(email)


def test_registration_collects_every_problem():
    with pytest.raises(ValidationError) as excinfo:
        validate_registration("", "bad", "1234567890", "123")
    assert set(excinfo.value.errors) == {"name", "email", "phone", "password"}


def test_registration_ok():
    validate_registration("Nimal", "nimal@example.com", "0771234567", "secret1")


class TestReservationForm:
    def test_valid(self):
        validate_reservation("2030-05-10", "2030-05-12", "Colombo", "Kandy", today=TODAY)

    def test_pickup_in_past(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_reservation("2030-05-09", "2030-05-12", "Colombo", "Kandy", today=TODAY)
        assert excinfo.value.errors["pickupDate"] == "Pickup date cannot be in the past"

    def test_return_must_follow_pickup(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_reservation("2030-05-12", "2030-05-12", "Colombo", "Kandy", today=TODAY)
        assert excinfo.value.errors["returnDate"] == "Return date must be after pickup date"

    def test_driver_required_needs_driver(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_reservation("2030-05-11", "2030-05-12", "Colombo", "Kandy", driver_required=True, today=TODAY)
        assert "driverId" in excinfo.value.errors

    def test_bad_date_format(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_reservation("tomorrow", "2030-05-12", "Colombo", "Kandy", today=TODAY)
        assert "dates" in excinfo.value.errors


class TestPaymentForm:
    def pay(self, status, amount, receipt="R-100", paid_on="2030-05-09", created="2030-05-01", total=10000):
        validate_payment(total, status, amount, receipt, paid_on, created_at=created, today=TODAY)

    def test_full_payment_ok(self):
        self.pay("paid", 10000)
        self.pay("paid", 9000)
        self.pay("paid", 11000)

    def test_partial_payment_ok(self):
        self.pay("partially_paid", 1000)
        self.pay("partially_paid", "2500.50")

    def test_rejects_more_than_110_percent(self):
        with pytest.raises(ValidationError) as excinfo:
            self.pay("partially_paid", 11001)
        assert "amountPaid" in excinfo.value.errors
        with pytest.raises(ValidationError):
            self.pay("paid", 11001)

    def test_paid_rejects_below_ten_percent(self):
        with pytest.raises(ValidationError) as excinfo:
            self.pay("paid", 999)
        assert "amountPaid" in excinfo.value.errors

    def test_paid_rejects_short_payment(self):
        with pytest.raises(ValidationError):
            self.pay("paid", 8999)

    def test_partial_rejects_below_ten_percent(self):
        with pytest.raises(ValidationError):
            self.pay("partially_paid", 999)

    def test_receipt_required(self):
        with pytest.raises(ValidationError) as excinfo:
            self.pay("paid", 10000, receipt="  ")
        assert excinfo.value.errors == {"receiptNumber": "Receipt number is required"}

    def test_date_sanity(self):
        with pytest.raises(ValidationError) as excinfo:
            self.pay("paid", 10000, paid_on="2030-05-11")
        assert excinfo.value.errors["paymentDate"] == "Payment date cannot be in the future"
        with pytest.raises(ValidationError) as excinfo:
            self.pay("paid", 10000, paid_on="2030-04-30")
        assert "before the reservation" in excinfo.value.errors["paymentDate"]
        with pytest.raises(ValidationError):
            self.pay("paid", 10000, paid_on=None)

    def test_unpaid_takes_no_amount(self):
        self.pay("unpaid", None, receipt=None, paid_on=None)
        self.pay("unpaid", 0, receipt="", paid_on=None)
        with pytest.raises(ValidationError):
            self.pay("unpaid", 500, receipt=None, paid_on=None)

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            self.pay("refunded", 100)

    def test_non_numeric_amount(self):
        with pytest.raises(ValidationError) as excinfo:
            self.pay("paid", "lots")
        assert excinfo.value.errors["amountPaid"] == "Amount paid must be a number"


class TestDriverForm:
    def submit(self, **overrides):
        fields = dict(
            name="Kamal Silva",
            email="kamal@example.com",
            phone="0771234567",
            age=35,
            address="12 Galle Road",
            front_license=b"front",
            back_license=b"back",
        )
        fields.update(overrides)
        validate_driver_form(**fields)

    def test_ok(self):
        self.submit(daily_rate=3000)

    @pytest.mark.parametrize("age", [17, 71, "abc"])
    def test_age_bounds(self, age):
        with pytest.raises(ValidationError) as excinfo:
            self.submit(age=age)
        assert "age" in excinfo.value.errors

    def test_both_license_images(self):
        with pytest.raises(ValidationError) as excinfo:
            self.submit(back_license=None)
        assert excinfo.value.errors["license"].startswith("Please upload both")

    def test_image_size_limit(self):
        with pytest.raises(ValidationError):
            validate_driver_form(
                "K", "k@example.com", "0771234567", 30, "Addr", b"x" * 11, b"y", max_upload_bytes=10
            )

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as excinfo:
            self.submit(address="")
        assert excinfo.value.errors["form"] == "Please fill in all fields"

    def test_daily_rate_floor(self):
        with pytest.raises(ValidationError):
            self.submit(daily_rate=500)


def test_inquiry():
    validate_inquiry("breakdown", "Flat tyre", "Left rear tyre burst near Kegalle")
    with pytest.raises(ValidationError) as excinfo:
        validate_inquiry("praise", "", "", images=[("a.jpg", b"")] * 6)
    assert set(excinfo.value.errors) == {"type", "subject", "description", "images"}


def test_payment_date_defaults_to_the_local_calendar(monkeypatch):
    monkeypatch.setattr("rental_client.validation.today_local", lambda: date(2030, 5, 10))
    validate_payment(10000, "paid", 10000, "R-1", "2030-05-10", created_at="2030-05-01")
    with pytest.raises(ValidationError):
        validate_payment(10000, "paid", 10000, "R-1", "2030-05-11", created_at="2030-05-01")
