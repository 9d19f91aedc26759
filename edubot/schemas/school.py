from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class SchoolRecordResponse(BaseModel):
    """A school as stored upstream.

    Fields are loosely typed and any extra upstream fields are passed
    through, so the response mirrors the stored record.  Routes serialise
    with ``response_model_exclude_unset`` so absent fields stay absent.
    """

    model_config = ConfigDict(extra="allow")

    name: Any = None
    classes: Any = None
    location: Any = None
    type: Any = None
    distence: Any = None
    fee: Any = None
    midday: Any = None
    girlSupport: Any = None


class RecommendedSchoolResponse(SchoolRecordResponse):
    """A stored school together with its suitability score."""

    score: int
