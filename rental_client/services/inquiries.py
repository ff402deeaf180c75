from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..api import ApiClient
from ..errors import ValidationError
from ..models import Inquiry
from ..models.inquiry import INQUIRY_PRIORITIES, INQUIRY_STATUSES
from ..validation import validate_inquiry
from .normalize import normalize_inquiry, unwrap_list

# (filename, bytes) pairs
Images = Sequence[Tuple[str, bytes]]


class InquiryService:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def _many(self, payload) -> List[Inquiry]:
        return [normalize_inquiry(item) for item in unwrap_list(payload, "inquiries")]

    def list_admin(self, status: str = "all", type: str = "all", priority: str = "all") -> List[Inquiry]:
        params = {k: v for k, v in (("status", status), ("type", type), ("priority", priority)) if v and v != "all"}
        return self._many(self.api.get("/inquiries/admin", params=params or None))

    def list_mine(self) -> List[Inquiry]:
        return self._many(self.api.get("/inquiries/driver"))

    def update(self, inquiry_id: str, status: Optional[str] = None, priority: Optional[str] = None) -> dict:
        body = {}
        if status is not None:
            if status not in INQUIRY_STATUSES:
                raise ValidationError({"status": f"Status must be one of {', '.join(INQUIRY_STATUSES)}"})
            body["status"] = status
        if priority is not None:
            if priority not in INQUIRY_PRIORITIES:
                raise ValidationError({"priority": f"Priority must be one of {', '.join(INQUIRY_PRIORITIES)}"})
            body["priority"] = priority
        if not body:
            raise ValidationError({"form": "Nothing to update"})
        return self.api.put(f"/inquiries/{inquiry_id}", body)

    def respond(self, inquiry_id: str, admin_response: str, status: str = "resolved") -> dict:
        if not admin_response or not admin_response.strip():
            raise ValidationError({"adminResponse": "Response cannot be empty"})
        if status not in INQUIRY_STATUSES:
            raise ValidationError({"status": f"Status must be one of {', '.join(INQUIRY_STATUSES)}"})
        return self.api.put(f"/inquiries/{inquiry_id}", {"adminResponse": admin_response.strip(), "status": status})

    def delete(self, inquiry_id: str) -> dict:
        return self.api.delete(f"/inquiries/{inquiry_id}")

    def create(
        self,
        type: str,
        subject: str,
        description: str,
        location: Optional[str] = None,
        trip_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        images: Images = (),
    ) -> dict:
        validate_inquiry(type, subject, description, images)
        data = {"type": type, "subject": subject.strip(), "description": description.strip()}
        for key, value in (("location", location), ("tripId", trip_id), ("vehicleId", vehicle_id)):
            if value:
                data[key] = value
        files = [("images", (name, content)) for name, content in images]
        return self.api.post("/inquiries/create", data=data, files=files)
