"""
Roster API endpoints.
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import Response

from ...roster.guest_list import SORTABLE_FIELDS
from ...utils.models import ALL, ExtractionError, FilterContext
from ..dependencies import get_roster_service
from ..models import (
    DashboardData, DashboardResponse, ErrorResponse, ExtractRequest,
    LoadSummary, LoadSummaryResponse, RecordsResponse
)
from ..services.roster_service import RosterNotReadyError, RosterService

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter(prefix="/roster", tags=["roster"])


def get_filter_context(
    flight_date: str = Query(ALL, description="Flight date filter for statistics and charts"),
    hotel: str = Query(ALL, description="Exact hotel filter for the guest list"),
    agency: str = Query(ALL, description="Exact agency filter for the guest list"),
    search: str = Query("", description="Free text over name, passport, reservation and agency"),
    sort_key: Optional[str] = Query(None, description="Record field to sort the guest list by"),
    sort_direction: str = Query("asc", pattern="^(asc|desc)$", description="Sort direction"),
) -> FilterContext:
    """Build the filter context from query parameters."""
    if sort_key and sort_key not in SORTABLE_FIELDS:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid sort_key: {sort_key}. Allowed values: {list(SORTABLE_FIELDS)}"
        )
    return FilterContext(
        hotel=hotel,
        agency=agency,
        flight_date=flight_date,
        search_text=search,
        sort_key=sort_key,
        sort_direction=sort_direction,
    )


def _load_response(service: RosterService, message: str) -> Dict[str, Any]:
    summary = LoadSummary(state=service.state.value, **service.report.to_dict())
    return {"success": True, "message": message, "data": summary}


def _not_ready(e: RosterNotReadyError) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={"message": str(e), "error_code": "ROSTER_NOT_READY", "details": {}}
    )


@router.post(
    "/extract",
    response_model=LoadSummaryResponse,
    summary="Load the roster from OCR text",
    description="Extract booking snapshots from OCR pages and reconcile them into the current roster",
    responses={502: {"description": "Extraction failed", "model": ErrorResponse}}
)
async def extract_roster(
    request: ExtractRequest,
    service: RosterService = Depends(get_roster_service)
):
    """
    Replace the current roster with one extracted from OCR text.

    Args:
        request: OCR pages
        service: Injected roster service

    Returns:
        Load summary
    """
    try:
        service.load_text(request.pages)
    except ExtractionError as e:
        raise HTTPException(
            status_code=502,
            detail={"message": "Booking data could not be processed", "error_code": "EXTRACTION_FAILED", "details": {"error": str(e)}}
        )
    return _load_response(service, "Roster extracted and reconciled")


@router.post(
    "/snapshots",
    response_model=LoadSummaryResponse,
    summary="Load the roster from snapshot objects",
    responses={422: {"description": "Malformed batch", "model": ErrorResponse}}
)
async def load_snapshots(
    items: List[Any] = Body(..., description="Booking snapshot objects"),
    service: RosterService = Depends(get_roster_service)
):
    """Replace the current roster with already-structured snapshots."""
    try:
        service.load_snapshots(items)
    except ExtractionError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Malformed snapshot batch", "error_code": "MALFORMED_BATCH", "details": {"error": str(e)}}
        )
    return _load_response(service, "Snapshots reconciled")


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard views",
    responses={409: {"description": "No roster loaded", "model": ErrorResponse}}
)
async def get_dashboard(
    context: FilterContext = Depends(get_filter_context),
    service: RosterService = Depends(get_roster_service)
):
    """Statistics, chart series and grouped guest list for a filter selection."""
    try:
        dashboard = service.get_dashboard(context)
    except RosterNotReadyError as e:
        raise _not_ready(e)
    return {"success": True, "message": "Dashboard views", "data": DashboardData(**dashboard.to_dict())}


@router.get(
    "/records",
    response_model=RecordsResponse,
    summary="Full reconciled roster",
    responses={409: {"description": "No roster loaded", "model": ErrorResponse}}
)
async def get_records(service: RosterService = Depends(get_roster_service)):
    """Every reconciled record, unfiltered."""
    try:
        records = service.get_records()
    except RosterNotReadyError as e:
        raise _not_ready(e)
    return {
        "success": True,
        "message": f"{len(records)} reconciled records",
        "data": [r.to_dict() for r in records]
    }


@router.get(
    "/export",
    summary="Export the guest list to Excel",
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "XLSX workbook"},
        404: {"description": "Nothing to export", "model": ErrorResponse},
        409: {"description": "No roster loaded", "model": ErrorResponse}
    }
)
async def export_roster(
    context: FilterContext = Depends(get_filter_context),
    service: RosterService = Depends(get_roster_service)
):
    """Download the filtered guest list as an XLSX workbook."""
    try:
        content = service.export_excel(context)
    except RosterNotReadyError as e:
        raise _not_ready(e)
    except ValueError as e:
        raise HTTPException(
            status_code=404,
            detail={"message": str(e), "error_code": "NOTHING_TO_EXPORT", "details": {}}
        )
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="ListaHuespedes.xlsx"'}
    )
