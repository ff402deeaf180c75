"""Client-side form checks.

These only block a submission locally; the backend applies its own rules
and its answer wins.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, Optional, Sequence

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as SchemaError

from .config import settings
from .dates import parse_date, today_local
from .errors import ValidationError
from .models.inquiry import INQUIRY_TYPES
from .models.maintenance import MAINTENANCE_STATUSES, MAINTENANCE_TYPES
from .models.reservation import PAYMENT_METHODS, PAYMENT_STATUSES
from .roles import ROLES

PHONE_RE = re.compile(r"^(?:\+94|0)7\d{8}$")
_EMAIL = TypeAdapter(EmailStr)

MIN_PASSWORD_LENGTH = 6
DRIVER_MIN_AGE = 18
DRIVER_MAX_AGE = 70
DRIVER_MIN_DAILY_RATE = 1000
MAX_INQUIRY_IMAGES = 5

# Payment amount bounds, as shares of the reservation total
OVERPAY_LIMIT = 1.10
PAID_FLOOR = 0.90
PARTIAL_FLOOR = 0.10


def is_valid_phone(value: Optional[str]) -> bool:
    if not value:
        return False
    return bool(PHONE_RE.match(re.sub(r"[\s-]", "", value)))


def is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        _EMAIL.validate_python(value.strip())
    except SchemaError:
        return False
    return True


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _raise_if(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)


def _to_number(value: Any) -> Optional[float]:
    if _blank(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_registration(name: str, email: str, phone: str, password: str, role: str = "customer") -> None:
    errors: Dict[str, str] = {}
    if _blank(name):
        errors["name"] = "Name is required"
    if not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"
    if not is_valid_phone(phone):
        errors["phone"] = "Please enter a valid phone number"
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if role not in ROLES:
        errors["role"] = f"Unknown role: {role}"
    _raise_if(errors)


def validate_new_password(password: str, confirm: str) -> None:
    errors: Dict[str, str] = {}
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    elif password != confirm:
        errors["confirm"] = "Passwords do not match"
    _raise_if(errors)


def validate_reservation(
    pickup_date: Any,
    return_date: Any,
    pickup_location: str,
    return_location: str,
    driver_required: bool = False,
    driver_id: Optional[str] = None,
    today: Optional[date] = None,
) -> None:
    errors: Dict[str, str] = {}
    today = today or today_local()

    try:
        pickup = parse_date(pickup_date)
        returned = parse_date(return_date)
    except ValueError:
        raise ValidationError({"dates": "Dates must be in YYYY-MM-DD format"})

    if pickup is None:
        errors["pickupDate"] = "Pickup date is required"
    elif pickup.date() < today:
        errors["pickupDate"] = "Pickup date cannot be in the past"
    if returned is None:
        errors["returnDate"] = "Return date is required"
    elif pickup is not None and returned <= pickup:
        errors["returnDate"] = "Return date must be after pickup date"

    if _blank(pickup_location):
        errors["pickupLocation"] = "Pickup location is required"
    if _blank(return_location):
        errors["returnLocation"] = "Return location is required"
    if driver_required and _blank(driver_id):
        errors["driverId"] = "Please select a driver"
    _raise_if(errors)


def validate_payment(
    total_price: float,
    payment_status: str,
    amount_paid: Any,
    receipt_number: Optional[str],
    payment_date: Any,
    payment_method: Optional[str] = None,
    created_at: Any = None,
    today: Optional[date] = None,
) -> None:
    errors: Dict[str, str] = {}
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError({"paymentStatus": f"Unknown payment status: {payment_status}"})

    amount = _to_number(amount_paid)
    if not _blank(amount_paid) and amount is None:
        errors["amountPaid"] = "Amount paid must be a number"

    if payment_status == "unpaid":
        if amount:
            errors["amountPaid"] = "An unpaid reservation cannot record an amount"
        if not _blank(receipt_number):
            errors["receiptNumber"] = "An unpaid reservation cannot have a receipt"
        _raise_if(errors)
        return

    if _blank(receipt_number):
        errors["receiptNumber"] = "Receipt number is required"
    if payment_method is not None and payment_method not in PAYMENT_METHODS:
        errors["paymentMethod"] = f"Unknown payment method: {payment_method}"

    if "amountPaid" not in errors:
        if amount is None or amount <= 0:
            errors["amountPaid"] = "Amount paid must be greater than zero"
        elif amount > total_price * OVERPAY_LIMIT:
            errors["amountPaid"] = "Amount paid cannot exceed the total price by more than 10%"
        elif payment_status == "paid" and amount < total_price * PAID_FLOOR:
            errors["amountPaid"] = "A paid reservation must cover the total price within 10%"
        elif payment_status == "partially_paid" and amount < total_price * PARTIAL_FLOOR:
            errors["amountPaid"] = "A partial payment must be at least 10% of the total price"

    try:
        paid_on = parse_date(payment_date)
        created = parse_date(created_at)
    except ValueError:
        paid_on, created = None, None
        errors["paymentDate"] = "Payment date must be in YYYY-MM-DD format"
    if "paymentDate" not in errors:
        if paid_on is None:
            errors["paymentDate"] = "Payment date is required"
        elif paid_on.date() > (today or today_local()):
            errors["paymentDate"] = "Payment date cannot be in the future"
        elif created is not None and paid_on.date() < created.date():
            errors["paymentDate"] = "Payment date cannot be before the reservation was made"
    _raise_if(errors)


def validate_driver_form(
    name: str,
    email: str,
    phone: str,
    age: Any,
    address: str,
    front_license: Optional[bytes],
    back_license: Optional[bytes],
    daily_rate: Any = None,
    max_upload_bytes: Optional[int] = None,
) -> None:
    errors: Dict[str, str] = {}
    limit = max_upload_bytes or settings.MAX_UPLOAD_BYTES

    if any(_blank(v) for v in (name, email, phone, age, address)):
        errors["form"] = "Please fill in all fields"
    if not _blank(email) and not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"
    if not _blank(phone) and not is_valid_phone(phone):
        errors["phone"] = "Please enter a valid phone number"

    if not _blank(age):
        try:
            years = int(age)
        except (TypeError, ValueError):
            errors["age"] = "Age must be a whole number"
        else:
            if years < DRIVER_MIN_AGE or years > DRIVER_MAX_AGE:
                errors["age"] = f"Driver age must be between {DRIVER_MIN_AGE} and {DRIVER_MAX_AGE} years"

    if not front_license or not back_license:
        errors["license"] = "Please upload both front and back images of driving license"
    elif len(front_license) > limit or len(back_license) > limit:
        errors["license"] = "Image size should be less than 5MB"

    if not _blank(daily_rate):
        rate = _to_number(daily_rate)
        if rate is None or rate < DRIVER_MIN_DAILY_RATE:
            errors["dailyRate"] = f"Daily rate must be at least {DRIVER_MIN_DAILY_RATE}"
    _raise_if(errors)


def validate_inquiry(inquiry_type: str, subject: str, description: str, images: Sequence = ()) -> None:
    errors: Dict[str, str] = {}
    if inquiry_type not in INQUIRY_TYPES:
        errors["type"] = f"Inquiry type must be one of {', '.join(INQUIRY_TYPES)}"
    if _blank(subject):
        errors["subject"] = "Subject is required"
    if _blank(description):
        errors["description"] = "Description is required"
    if len(images) > MAX_INQUIRY_IMAGES:
        errors["images"] = f"You can attach at most {MAX_INQUIRY_IMAGES} images"
    _raise_if(errors)


def validate_profile(
    name: str,
    email: str,
    phone: str,
    profile_pic: Optional[bytes] = None,
    max_upload_bytes: Optional[int] = None,
) -> None:
    errors: Dict[str, str] = {}
    if any(_blank(v) for v in (name, email, phone)):
        errors["form"] = "Name, email, and phone are required"
    if not _blank(email) and not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"
    if not _blank(phone) and not is_valid_phone(phone):
        errors["phone"] = "Please enter a valid phone number"
    if profile_pic is not None and len(profile_pic) > (max_upload_bytes or settings.MAX_UPLOAD_BYTES):
        errors["profilePic"] = "Image size should be less than 5MB"
    _raise_if(errors)


def validate_maintenance(
    vehicle_id: Optional[str],
    scheduled_date: Any,
    maintenance_type: str,
    description: str,
    cost: Any = None,
) -> None:
    errors: Dict[str, str] = {}
    if _blank(vehicle_id):
        errors["vehicleId"] = "Please select a vehicle."
    try:
        if parse_date(scheduled_date) is None:
            errors["scheduledDate"] = "Scheduled date is required"
    except ValueError:
        errors["scheduledDate"] = "Scheduled date must be in YYYY-MM-DD format"
    if maintenance_type not in MAINTENANCE_TYPES:
        errors["maintenanceType"] = f"Maintenance type must be one of {', '.join(MAINTENANCE_TYPES)}"
    if _blank(description):
        errors["description"] = "Description is required"
    _check_costs({"cost": cost}, errors)
    _raise_if(errors)


def validate_maintenance_update(status: Optional[str] = None, **costs: Any) -> None:
    errors: Dict[str, str] = {}
    if status is not None and status not in MAINTENANCE_STATUSES:
        errors["status"] = f"Status must be one of {', '.join(MAINTENANCE_STATUSES)}"
    _check_costs(costs, errors)
    _raise_if(errors)


def _check_costs(costs: Dict[str, Any], errors: Dict[str, str]) -> None:
    for field, value in costs.items():
        if _blank(value):
            continue
        amount = _to_number(value)
        if amount is None:
            errors[field] = f"{field} must be a number"
        elif amount < 0:
            errors[field] = f"{field} cannot be negative"
