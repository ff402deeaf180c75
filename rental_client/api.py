"""HTTP plumbing shared by every service."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import settings
from .errors import NetworkError, UnauthorizedError, error_for_status
from .navigation import Navigator
from .session import SessionStore

logger = logging.getLogger(__name__)


def decode_body(resp: requests.Response) -> Any:
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError:
        return resp.text


class ApiClient:
    def __init__(
        self,
        session: Optional[SessionStore] = None,
        navigator: Optional[Navigator] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        login_path: Optional[str] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.session = session if session is not None else SessionStore()
        self.navigator = navigator if navigator is not None else Navigator()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.login_path = login_path or settings.LOGIN_PATH
        self.http = http if http is not None else requests.Session()

    def url(self, path: str) -> str:
        return self.base_url + "/" + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Any = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = dict(self.session.get_auth_headers())
        # Multipart bodies get their boundary header from requests
        if files is None:
            headers["Content-Type"] = "application/json"

        logger.debug("API %s %s", method.upper(), path)
        try:
            resp = self.http.request(
                method.upper(),
                self.url(path),
                headers=headers,
                json=json,
                params=params,
                files=files,
                data=data,
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.error("Network error: the server is not responding (%s %s)", method.upper(), path)
            raise NetworkError(f"No response received from server: {exc}") from exc

        payload = decode_body(resp)
        if resp.ok:
            return payload

        error = error_for_status(resp.status_code, payload)
        if isinstance(error, UnauthorizedError):
            self.force_logout()
        elif resp.status_code == 403:
            logger.error("Access denied for %s %s", method.upper(), path)
        elif resp.status_code == 429:
            logger.error("Rate limit exceeded for %s %s", method.upper(), path)
        else:
            logger.warning("API %s %s failed: %s", method.upper(), path, error)
        raise error

    def force_logout(self) -> None:
        logger.warning("Session rejected by the server, signing out")
        self.session.clear()
        self.navigator.redirect(self.login_path)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def patch(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PATCH", path, json=json, **kwargs)

    def delete(self, path: str, json: Any = None) -> Any:
        return self.request("DELETE", path, json=json)
