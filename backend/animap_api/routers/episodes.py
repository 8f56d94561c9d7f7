"""Episode list endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from backend.resolver.lookup import EpisodeLookupService

from ..dependencies import get_lookup_service
from ..schemas import LookupEnvelope, LookupResultsModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/episodes", tags=["episodes"])


@router.get(
    "/{identifier}",
    response_model=LookupEnvelope,
    response_model_exclude_none=True,
    summary="Episode list by AniList id or catalog id",
)
def get_episodes(
    identifier: str,
    lookup_service: EpisodeLookupService = Depends(get_lookup_service),
):
    """Digits-only identifiers are AniList ids; everything else is a catalog id."""

    try:
        result = lookup_service.lookup(identifier)
    except Exception:
        logger.exception("Episode lookup for %r failed unexpectedly", identifier)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "results": {
                    "success": False,
                    "message": "An error occurred while fetching the episodes",
                },
            },
        )
    return LookupEnvelope(results=LookupResultsModel.from_result(result))
