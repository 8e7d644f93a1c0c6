"""
Tweak introspection API routes.

Provides endpoints for:
- Listing tweaks with their metadata and constraints
- Reading the change history
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from tweakkit.api.dependencies import app_registry
from tweakkit.api.schemas import EventRecord, HistoryResponse, TweakRecord
from tweakkit.core.registry import TweakRegistry


router = APIRouter(prefix="/api", tags=["tweaks"])


@router.get(
    "/tweaks",
    response_model=List[TweakRecord],
    response_model_exclude_none=True,
    summary="List tweaks",
    description="All tweaks ordered by key. Optionally filter by a case-insensitive key substring."
)
async def list_tweaks(
    filter: Optional[str] = Query(None, description="Case-insensitive key substring"),
    registry: TweakRegistry = Depends(app_registry)
):
    """List tweaks with current and default values."""
    return [TweakRecord(**record) for record in registry.listing(filter)]


@router.get(
    "/history",
    response_model=HistoryResponse,
    summary="Change history",
    description="Most recent change events, oldest first."
)
async def get_history(
    limit: int = Query(10, ge=1, description="Number of events to return"),
    registry: TweakRegistry = Depends(app_registry)
):
    """Get the tail of the change history."""
    events = [EventRecord(**event.to_dict()) for event in registry.tail(limit)]
    return HistoryResponse(events=events, capacity=registry.history_capacity)
