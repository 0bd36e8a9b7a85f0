import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from aidrelief import request_store
from aidrelief.firebase_admin_client import get_db
from aidrelief.maps_service import map_view
from aidrelief.reports import build_requests_pdf
from aidrelief.requests_router import load_triage
from aidrelief.schemas import ALL, Location, MapView

logger = logging.getLogger("dashboard")
router = APIRouter()


@router.get("/map", response_model=MapView)
def request_map(
    lat: Optional[float] = Query(default=None, ge=-90, le=90, description="caller's latitude"),
    lng: Optional[float] = Query(default=None, ge=-180, le=180, description="caller's longitude"),
    db=Depends(get_db),
):
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=400, detail="Send both lat and lng, or neither.")
    current = Location(latitude=lat, longitude=lng) if lat is not None else None

    items = request_store.list_requests(db)
    view = map_view(items, current)
    logger.info("Map view points=%s center_source=%s", len(view.points), view.centerSource)
    return view


@router.get("/reports/pdf")
def report_pdf(
    category: str = Query(default=ALL),
    severity: str = Query(default=ALL),
    pending_only: bool = Query(default=False),
    sort: str = Query(default="neededBy", description="neededBy | severity"),
    db=Depends(get_db),
):
    items = load_triage(db, category, severity, pending_only, sort)
    filters = {
        "Category": category if category != ALL else "",
        "Severity": severity if severity != ALL else "",
        "Pending only": "yes" if pending_only else "",
        "Sort": sort,
    }
    buff = build_requests_pdf(items, filters)
    return StreamingResponse(
        buff,
        media_type="application/pdf",
        headers={"Content-Disposition": 'inline; filename="requests_report.pdf"'},
    )
