from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from edubot.config import Settings, get_settings
from edubot.db.base import SchoolRepository, UpstreamFetchError
from edubot.db.factory import get_school_repository
from edubot.schemas.recommend import UserProfileRequest
from edubot.schemas.school import RecommendedSchoolResponse
from edubot.services.scoring import UserProfile, parse_weights, recommend_schools

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommend"])


@router.post(
    "/api/recommend",
    response_model=list[RecommendedSchoolResponse],
    response_model_exclude_unset=True,
)
async def recommend(
    profile: UserProfileRequest,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> list[dict[str, Any]]:
    """Score every school against the profile and return the best matches first.

    Only schools scoring at least ``RECOMMEND_MIN_SCORE`` are returned.
    """
    try:
        schools = await repo.fetch_all_schools()
    except UpstreamFetchError:
        logger.exception("Recommendation failed: could not load schools")
        raise HTTPException(status_code=500, detail="Recommendation failed") from None

    user = UserProfile.from_dict(profile.model_dump(by_alias=True))
    weights = parse_weights(settings.SCORE_WEIGHTS)
    results = recommend_schools(schools, user, min_score=settings.RECOMMEND_MIN_SCORE, weights=weights)
    logger.info("Recommended %d of %d schools", len(results), len(schools))
    return results
