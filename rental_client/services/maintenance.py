from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..api import ApiClient
from ..dates import to_iso_date
from ..errors import ValidationError
from ..models import Maintenance
from ..models.maintenance import MAINTENANCE_FILE_TYPES
from ..validation import validate_maintenance, validate_maintenance_update
from .normalize import normalize_maintenance, unwrap_list

logger = logging.getLogger(__name__)

# (filename, bytes) pairs
Files = Sequence[Tuple[str, bytes]]


class MaintenanceService:
    """Admins schedule and manage maintenance; technicians work their assignments."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def _many(self, payload: Any) -> List[Maintenance]:
        return [normalize_maintenance(item) for item in unwrap_list(payload, "maintenance")]

    def schedule(
        self,
        vehicle_id: str,
        scheduled_date: Any,
        maintenance_type: str,
        description: str,
        cost: Any = None,
        technician_id: Optional[str] = None,
    ) -> Maintenance:
        validate_maintenance(vehicle_id, scheduled_date, maintenance_type, description, cost)
        body: Dict[str, Any] = {
            "vehicleId": vehicle_id,
            "scheduledDate": to_iso_date(scheduled_date),
            "maintenanceType": maintenance_type,
            "description": description.strip(),
        }
        if cost not in (None, ""):
            body["cost"] = float(cost)
        if technician_id:
            body["technicianId"] = technician_id
        record = normalize_maintenance(self.api.post("/maintenance", body))
        logger.info("Maintenance %s scheduled for vehicle %s", record.id, vehicle_id)
        return record

    def list(self, status: str = "all") -> List[Maintenance]:
        records = self._many(self.api.get("/maintenance"))
        if status == "all":
            return records
        return [r for r in records if r.status == status]

    def get(self, maintenance_id: str) -> Maintenance:
        return normalize_maintenance(self.api.get(f"/maintenance/{maintenance_id}"))

    def update(self, maintenance_id: str, changes: Dict[str, Any]) -> Maintenance:
        validate_maintenance_update(changes.get("status"), **{k: changes.get(k) for k in ("cost", "actualCost")})
        return normalize_maintenance(self.api.put(f"/maintenance/{maintenance_id}", changes))

    def delete(self, maintenance_id: str) -> dict:
        return self.api.delete(f"/maintenance/{maintenance_id}")

    def assignments(self) -> List[Maintenance]:
        return self._many(self.api.get("/maintenance/technician/assignments"))

    def report_progress(
        self,
        maintenance_id: str,
        status: Optional[str] = None,
        notes: Optional[str] = None,
        report_text: Optional[str] = None,
        actual_cost: Any = None,
        parts_cost: Any = None,
        labor_cost: Any = None,
        additional_costs: Any = None,
        bill_files: Files = (),
        report_files: Files = (),
    ) -> Maintenance:
        """Technician update; bills and reports are appended to the record's files."""
        costs = {
            "actualCost": actual_cost,
            "partsCost": parts_cost,
            "laborCost": labor_cost,
            "additionalCosts": additional_costs,
        }
        validate_maintenance_update(status, **costs)
        fields = {"status": status, "notes": notes, "reportText": report_text, **costs}
        data = {k: str(v) for k, v in fields.items() if v not in (None, "")}
        files = [("billFiles", f) for f in bill_files] + [("reportFiles", f) for f in report_files]
        payload = self.api.patch(f"/maintenance/technician/update/{maintenance_id}", data=data, files=files)
        return normalize_maintenance(payload)

    def delete_file(self, maintenance_id: str, file_type: str, file_name: str) -> dict:
        if file_type not in MAINTENANCE_FILE_TYPES:
            raise ValidationError({"fileType": "File type must be 'bill' or 'report'"})
        if not file_name:
            raise ValidationError({"fileName": "File name is required"})
        return self.api.delete(
            f"/maintenance/technician/file/{maintenance_id}",
            {"fileType": file_type, "fileName": file_name},
        )
