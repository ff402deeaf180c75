"""Role checks and the role-to-path mapping used to pick a layout."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

ADMIN = "admin"
CUSTOMER = "customer"
DRIVER = "driver"
VEHICLE_OWNER = "vehicle_owner"
TECHNICIAN = "technician"

ROLES = (ADMIN, CUSTOMER, DRIVER, VEHICLE_OWNER, TECHNICIAN)

ADMIN_HOME = "/admin/dashboard"


def role_of(user: Any) -> Optional[str]:
    if user is None:
        return None
    if isinstance(user, str):
        return user
    if isinstance(user, dict):
        return user.get("role")
    return getattr(user, "role", None)


def is_admin(user: Any) -> bool:
    return role_of(user) == ADMIN


def is_driver(user: Any) -> bool:
    return role_of(user) == DRIVER


def is_customer(user: Any) -> bool:
    return role_of(user) == CUSTOMER


def is_technician(user: Any) -> bool:
    return role_of(user) == TECHNICIAN


def landing_path(user: Any) -> str:
    role = role_of(user)
    if role is None:
        return "/"
    if role == ADMIN:
        return ADMIN_HOME
    if role == DRIVER:
        return "/driver-profile"
    if role == TECHNICIAN:
        return "/technician-profile"
    return "/customer-profile"


def has_permission(user: Any, permission: str) -> bool:
    if role_of(user) is None:
        return False
    if is_admin(user):
        return True
    if permission == "book_vehicle":
        return is_customer(user)
    if permission == "view_driver_profile":
        return is_driver(user)
    # view_admin_dashboard, manage_vehicles and anything unknown
    return False


@dataclass(frozen=True)
class Gate:
    allowed: bool
    redirect_to: Optional[str] = None
    loading: bool = False


def admin_gate(session, loading: bool = False) -> Gate:
    """Admin chrome: only signed-in admins get through."""
    if loading:
        return Gate(allowed=False, loading=True)
    if not session.is_authenticated:
        return Gate(allowed=False, redirect_to="/")
    user = session.user
    # Token is valid but the user record has not been fetched yet
    if user is None:
        return Gate(allowed=False, loading=True)
    if not is_admin(user):
        return Gate(allowed=False, redirect_to="/")
    return Gate(allowed=True)


def customer_gate(session, loading: bool = False) -> Gate:
    """Customer chrome: everyone except admins, who go to their dashboard."""
    if loading:
        return Gate(allowed=False, loading=True)
    if session.is_authenticated and is_admin(session.user):
        return Gate(allowed=False, redirect_to=ADMIN_HOME)
    return Gate(allowed=True)
