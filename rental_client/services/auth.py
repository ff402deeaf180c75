from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..api import ApiClient
from ..errors import ApiError, NetworkError, RentalClientError, ValidationError
from ..models import User
from ..session import token_expired
from ..validation import is_valid_email, validate_new_password, validate_profile, validate_registration
from .normalize import normalize_user, unwrap_list

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    user: Optional[User] = None
    requires_verification: bool = False
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user is not None and not self.requires_verification


class AuthService:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.session = api.session

    def login(self, email: str, password: str) -> LoginResult:
        if not is_valid_email(email) or not password:
            raise ValidationError({"form": "Please enter your email and password"})

        data = self.api.post("/auth/login", {"email": email.strip(), "password": password})
        if data.get("requiresVerification"):
            return LoginResult(requires_verification=True, message=data.get("msg"))

        token = data.get("accessToken") or data.get("token")
        if not token:
            raise RentalClientError("Login response did not include an access token")
        user = normalize_user(data["user"]) if data.get("user") else None
        self.session.set_token(token, user)
        logger.info("Signed in as %s", email)
        return LoginResult(user=user)

    def logout(self) -> None:
        if self.session.token:
            try:
                self.api.post("/auth/logout", {})
            except (ApiError, NetworkError) as exc:
                logger.warning("Server-side logout failed: %s", exc)
        self.session.clear()

    def register(self, name: str, email: str, phone: str, password: str, role: str = "customer") -> dict:
        validate_registration(name, email, phone, password, role)
        return self.api.post(
            "/auth/register",
            {"name": name.strip(), "email": email.strip(), "phone": phone, "password": password, "role": role},
        )

    def forgot_password(self, email: str) -> dict:
        if not is_valid_email(email):
            raise ValidationError({"email": "Please enter a valid email address"})
        return self.api.post("/auth/forgot-password", {"email": email.strip()})

    def reset_password(self, token: str, password: str, confirm: str) -> dict:
        validate_new_password(password, confirm)
        return self.api.post(f"/auth/reset-password/{token}", {"password": password})

    def change_password(self, current: str, new: str, confirm: str) -> dict:
        if not current:
            raise ValidationError({"currentPassword": "Current password is required"})
        validate_new_password(new, confirm)
        user_id = self.session.user_id
        if not user_id:
            raise RentalClientError("Not signed in")
        return self.api.post(
            f"/auth/change-password/{user_id}",
            {"currentPassword": current, "newPassword": new},
        )

    def update_profile(
        self,
        name: str,
        email: str,
        phone: str,
        profile_pic: Optional[bytes] = None,
        filename: str = "profile.jpg",
    ) -> User:
        validate_profile(name, email, phone, profile_pic)
        user_id = self.session.user_id
        if not user_id:
            raise RentalClientError("Not signed in")
        fields = {"name": name.strip(), "email": email.strip(), "phone": phone}
        path = f"/auth/update/{user_id}"
        if profile_pic is not None:
            payload = self.api.put(path, data=fields, files={"profilePic": (filename, profile_pic)})
        else:
            payload = self.api.put(path, fields)
        user = normalize_user(payload)
        self.session.set_user(user)
        return user

    def check_or_refresh(self) -> bool:
        """Keep a usable token, refreshing it once if needed."""
        token = self.session.token
        if token and not token_expired(token):
            return True

        try:
            data = self.api.post("/auth/refresh-token", {})
        except (ApiError, NetworkError) as exc:
            logger.info("Token refresh failed: %s", exc)
            data = {}

        fresh = (data.get("token") or data.get("accessToken")) if isinstance(data, dict) else None
        if fresh and not token_expired(fresh):
            self.session.set_token(fresh)
            return True

        self.session.clear()
        return False

    def fetch_current_user(self) -> Optional[User]:
        user_id = self.session.user_id
        if not user_id:
            return None
        user = normalize_user(self.api.get(f"/auth/searchUser/{user_id}"))
        self.session.set_user(user)
        return user

    def list_users(self) -> List[User]:
        payload = self.api.get("/auth/allUsers")
        return [normalize_user(item) for item in unwrap_list(payload, "users")]
