from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from edubot.db.base import SchoolRepository
from edubot.db.factory import get_school_repository
from edubot.schemas.school import SchoolRecordResponse

router = APIRouter(tags=["schools"])


@router.get("/api/schools", response_model=list[SchoolRecordResponse], response_model_exclude_unset=True)
async def list_schools(
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[dict[str, Any]]:
    """Return every school in the store, unfiltered."""
    return await repo.fetch_all_schools()
