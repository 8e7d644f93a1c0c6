"""
Pydantic schemas for API responses.

Mirror the listing and event contracts of the core so the HTTP surface is
typed and documented.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


# =============================================================================
# Tweak Schemas
# =============================================================================

class ConstraintsSchema(BaseModel):
    """Display strings of the constraints present on a tweak."""
    min: Optional[str] = None
    max: Optional[str] = None
    step: Optional[str] = None


class TweakRecord(BaseModel):
    """One tweak in the listing."""
    key: str = Field(..., description="Unique tweak key")
    type: str = Field(..., description="Value kind name (str, bool, int, float, ...)")
    default: str = Field(..., description="Default value display string")
    current: str = Field(..., description="Current value display string")
    constraints: Optional[ConstraintsSchema] = Field(None, description="Present only for constrained tweaks")


# =============================================================================
# Event Schemas
# =============================================================================

class EventRecord(BaseModel):
    """One recorded change."""
    key: str
    old_value: str
    new_value: str
    source: str = Field(..., description="code, ui or web")
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp")


class HistoryResponse(BaseModel):
    """Response for the change history."""
    events: List[EventRecord]
    capacity: int
