"""
Immutable data models for API responses and requests.
"""
from typing import Optional, Dict, Any, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_serializer


class APIResponse(BaseModel):
    """Base API response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool = Field(..., description="Whether the request was successful")
    message: str = Field(..., description="Response message")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ErrorResponse(APIResponse):
    """Error response model."""
    error_code: Optional[str] = Field(None, description="Error code for debugging")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="API version")
    roster_state: str = Field(..., description="State of the current roster load")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ExtractRequest(BaseModel):
    """Request model for loading a roster from OCR text."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    pages: List[str] = Field(..., min_length=1, description="OCR text, one entry per page")


class GroupCountModel(BaseModel):
    """One bar of a grouped count series."""
    model_config = ConfigDict(frozen=True)

    label: str
    count: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0)


class RosterStatsModel(BaseModel):
    """Headline counters for the filtered roster."""
    model_config = ConfigDict(frozen=True)

    total_passengers: int = Field(..., ge=0, description="Distinct (reservation, passport) pairs")
    solo_travelers: int = Field(..., ge=0, description="Single-passenger reservations at the target hotel")
    unique_hotels: int = Field(..., ge=0, description="Distinct hotels")
    total_bookings: int = Field(..., ge=0, description="Hotel stay records")


class GuestGroupModel(BaseModel):
    """A titled section of the guest list."""
    model_config = ConfigDict(frozen=True)

    label: str
    records: List[Dict[str, Any]] = Field(default_factory=list)


class DashboardData(BaseModel):
    """Every derived view for one filter selection."""
    model_config = ConfigDict(frozen=True)

    flight_dates: List[str]
    stats: RosterStatsModel
    occupancy_by_hotel: List[GroupCountModel]
    bookings_by_agency: List[GroupCountModel]
    unique_passengers_by_agency: List[GroupCountModel]
    nights_by_hotel: List[GroupCountModel]
    hotels: List[str]
    agencies: List[str]
    guest_groups: List[GuestGroupModel]
    split_stay_codes: List[str]


class DashboardResponse(APIResponse):
    """Response model for the dashboard."""
    data: DashboardData = Field(..., description="Dashboard views")


class RecordsResponse(APIResponse):
    """Response model for the full reconciled roster."""
    data: List[Dict[str, Any]] = Field(..., description="Reconciled records")


class LoadSummary(BaseModel):
    """Outcome of a roster load."""
    model_config = ConfigDict(frozen=True)

    state: str
    snapshots_received: int = Field(..., ge=0)
    cancelled_codes: List[str] = Field(default_factory=list)
    cancelled_snapshots: int = Field(..., ge=0)
    superseded_snapshots: int = Field(..., ge=0)
    unparsable_timestamps: int = Field(..., ge=0)
    records_kept: int = Field(..., ge=0)


class LoadSummaryResponse(APIResponse):
    """Response model for roster loads."""
    data: LoadSummary = Field(..., description="Load summary")
