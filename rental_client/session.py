"""Session state: the bearer token, the signed-in user and change listeners."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from jose import jwt
from jose.exceptions import JWTError

from .models import User

logger = logging.getLogger(__name__)

Listener = Callable[["SessionStore"], None]


class MemoryTokenStorage:
    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStorage:
    """Keeps the access token in a single file, readable only by its owner."""

    def __init__(self, path: str) -> None:
        self.path = Path(os.path.expanduser(path))

    def load(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # An existing file keeps its old mode through os.open
        os.chmod(self.path, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(token)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


def token_claims(token: Optional[str]) -> Optional[dict]:
    """Claims of a JWT, read without checking the signature.

    Returns None when the token is not a JWT at all.
    """
    if not token:
        return None
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        return None


def token_expired(token: Optional[str], now: Optional[datetime] = None) -> bool:
    claims = token_claims(token)
    if not claims or claims.get("exp") is None:
        return False
    now = now or datetime.now(timezone.utc)
    return float(claims["exp"]) <= now.timestamp()


class SessionStore:
    def __init__(self, storage=None) -> None:
        self.storage = storage if storage is not None else MemoryTokenStorage()
        self._user: Optional[User] = None
        self._listeners: List[Listener] = []

    @property
    def token(self) -> Optional[str]:
        return self.storage.load()

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def user_id(self) -> Optional[str]:
        claims = token_claims(self.token)
        if claims and claims.get("id"):
            return str(claims["id"])
        if self._user is not None:
            return self._user.id
        return None

    @property
    def role(self) -> Optional[str]:
        return self._user.role if self._user else None

    @property
    def is_authenticated(self) -> bool:
        token = self.token
        return bool(token) and not token_expired(token)

    def get_auth_headers(self) -> Dict[str, str]:
        token = self.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def set_token(self, token: str, user: Optional[User] = None) -> None:
        self.storage.save(token)
        if user is not None:
            self._user = user
        self._notify()

    def set_user(self, user: Optional[User]) -> None:
        self._user = user
        self._notify()

    def clear(self) -> None:
        had_state = self.token is not None or self._user is not None
        self.storage.clear()
        self._user = None
        if had_state:
            self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Auth change listener failed")
