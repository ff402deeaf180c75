from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Record mirrored from a backend response.

    Unknown keys are dropped and Mongo's ``_id`` is exposed as ``id``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
