from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserProfileRequest(BaseModel):
    """Body of ``POST /api/recommend``.

    Every field is optional and accepted as-is: a value of the wrong type
    only means the matching criterion scores nothing.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    class_: Any = Field(default=None, alias="class")
    location: Any = None
    type: Any = None
    maxDistance: Any = None
    fee: Any = None  # "free" / "low" / "medium"
    middayMeal: Any = None
    girlChild: Any = None
