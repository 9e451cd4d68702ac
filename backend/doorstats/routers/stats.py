from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from doorstats.config import Settings
from doorstats.dependencies import get_app_settings, get_store
from doorstats.schemas import LibraryGameResponse, Top10Response
from doorstats.services.query import (
    InvalidPeriodError, get_scope_stats, get_top_games, resolve_scope
)
from doorstats.services.refresh import SnapshotStore

router = APIRouter(tags=["Stats"])


def _require_period(period: Optional[str]) -> str:
    if not period:
        raise HTTPException(status_code=400, detail="Missing period query parameter")
    return period


@router.get("/stats")
def get_stats(
    period: Optional[str] = None,
    store: SnapshotStore = Depends(get_store)
):
    """Get launch counts for a whole scope: every month, every year, or all."""
    period = _require_period(period)
    try:
        scope = resolve_scope(period)
    except InvalidPeriodError:
        raise HTTPException(status_code=400, detail="Invalid period query parameter")

    return get_scope_stats(store.read().snapshot, scope)


@router.get("/top10", response_model=Top10Response, response_model_exclude_none=True)
def get_top10(
    period: Optional[str] = None,
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings)
):
    """Get the ten most launched games for a period's scope."""
    period = _require_period(period)
    try:
        return get_top_games(store.read().snapshot, period, excluded_game=settings.excluded_game)
    except InvalidPeriodError:
        raise HTTPException(status_code=400, detail="Invalid period query parameter")


@router.get("/library", response_model=List[LibraryGameResponse])
def get_library(
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings)
):
    """Get every game declared in xtrn.ini, sysop programs excluded."""
    if not settings.resolve_metadata:
        raise HTTPException(status_code=404, detail="Game library is disabled")

    return [
        game for game in store.read().library
        if game.category != settings.sysop_category
    ]
