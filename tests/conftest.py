import json
import time
from typing import Any, Dict, List, Tuple
from urllib.parse import urlsplit

import pytest
import requests
from jose import jwt

from rental_client.client import RentalClient
from rental_client.navigation import Navigator

BASE_URL = "http://api.test/api"


def make_token(user_id="u1", role="customer", expires_in=3600):
    claims = {"id": user_id, "role": role, "exp": int(time.time()) + expires_in}
    return jwt.encode(claims, "test-secret", algorithm="HS256")


def make_response(status: int, body: Any, url: str) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp.encoding = "utf-8"
    if body is None:
        resp._content = b""
    elif isinstance(body, (dict, list)):
        resp._content = json.dumps(body).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = str(body).encode("utf-8")
    return resp


class FakeHttp:
    """Stands in for requests.Session; answers from a route table and records calls."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[dict] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method.upper(), path)] = exc

    def request(self, method, url, headers=None, json=None, params=None, files=None, data=None, timeout=None):
        path = urlsplit(url).path
        if path.startswith("/api"):
            path = path[len("/api"):]
        self.calls.append(
            {
                "method": method,
                "path": path,
                "headers": headers or {},
                "json": json,
                "params": params,
                "files": files,
                "data": data,
                "timeout": timeout,
            }
        )
        route = self.routes.get((method, path))
        if isinstance(route, Exception):
            raise route
        if route is None:
            return make_response(404, {"message": f"No route for {method} {path}"}, url)
        status, body = route
        return make_response(status, body, url)

    def last(self) -> dict:
        return self.calls[-1]

    def paths(self) -> List[Tuple[str, str]]:
        return [(c["method"], c["path"]) for c in self.calls]


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def client(http, navigator):
    return RentalClient(base_url=BASE_URL, http=http, navigator=navigator, timeout=5)


@pytest.fixture
def signed_in(client):
    def sign_in(role="customer", user_id="u1"):
        from rental_client.models import User

        user = User(id=user_id, name="Nimal Perera", email="nimal@example.com", role=role)
        client.session.set_token(make_token(user_id, role), user)
        return client

    return sign_in


def reservation_doc(**overrides):
    doc = {
        "_id": "665f1c2ab7e4a90012345678",
        "userId": {"_id": "u1", "name": "Nimal Perera", "email": "nimal@example.com"},
        "vehicleId": {"_id": "v1", "make": "Toyota", "model": "Prius", "year": 2019, "status": "available"},
        "pickupDate": "2030-05-01T00:00:00.000Z",
        "returnDate": "2030-05-04T00:00:00.000Z",
        "pickupLocation": "Colombo",
        "returnLocation": "Kandy",
        "driverRequired": False,
        "status": "pending",
        "tripStatus": "pending",
        "paymentStatus": "unpaid",
        "totalPrice": 30000,
        "createdAt": "2030-04-20T08:30:00.000Z",
    }
    doc.update(overrides)
    return doc
