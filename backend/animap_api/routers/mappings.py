"""Identity resolution endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path

from backend.resolver.identity_resolver import IdentityResolver

from ..dependencies import get_app_state, get_resolver
from ..schemas import CacheSnapshotModel, ResolutionModel
from ..state import AppState

router = APIRouter(tags=["mappings"])


@router.get("/resolve/{external_id}", response_model=ResolutionModel)
def resolve_external_id(
    external_id: int = Path(gt=0, description="AniList id to map onto a catalog id."),
    resolver: IdentityResolver = Depends(get_resolver),
) -> ResolutionModel:
    """Resolve an AniList id without fetching episodes."""

    resolution = resolver.resolve_with_source(external_id)
    if resolution is None:
        raise HTTPException(status_code=404, detail=f"AniList ID {external_id} could not be resolved")
    return ResolutionModel.from_resolution(resolution)


@router.get("/mappings/cache", response_model=CacheSnapshotModel)
def cache_snapshot(app_state: AppState = Depends(get_app_state)) -> CacheSnapshotModel:
    """Return the mappings resolved by search since startup."""

    mappings = app_state.cache.snapshot()
    return CacheSnapshotModel(total=len(mappings), mappings=mappings)
