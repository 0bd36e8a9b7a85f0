from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from aidrelief import alert_service, assignment_service, request_store, status_service
from aidrelief.firebase_admin_client import get_db
from aidrelief.query_service import triage_view, unique_categories
from aidrelief.schemas import ALL, AidRequest, AssignPayload, RequestCreate, RequestItem, StatusPayload

router = APIRouter()


def as_item(r: AidRequest) -> RequestItem:
    return RequestItem(**r.model_dump(), statusLabel=r.status_label)


def load_triage(db, category: str, severity: str, pending_only: bool, sort: str) -> List[AidRequest]:
    items = request_store.list_requests(db)
    try:
        return triage_view(items, category, severity, pending_only, sort)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[RequestItem])
def list_requests(
    category: str = Query(default=ALL),
    severity: str = Query(default=ALL),
    pending_only: bool = Query(default=False),
    sort: str = Query(default="neededBy", description="neededBy | severity"),
    db=Depends(get_db),
):
    return [as_item(r) for r in load_triage(db, category, severity, pending_only, sort)]


@router.get("/categories", response_model=List[str])
def categories(db=Depends(get_db)):
    return unique_categories(request_store.list_requests(db))


@router.post("", response_model=RequestItem, status_code=201)
def create_request(payload: RequestCreate, db=Depends(get_db)):
    return as_item(request_store.create_request(db, payload))


@router.get("/{request_id}", response_model=RequestItem)
def get_request(request_id: str, db=Depends(get_db)):
    return as_item(request_store.get_request(db, request_id))


@router.delete("/{request_id}")
def delete_request(request_id: str, db=Depends(get_db)):
    assignment_service.delete_assigned_request(db, request_id)
    return {"ok": True}


@router.put("/{request_id}/warehouse", response_model=RequestItem)
def assign_warehouse(request_id: str, payload: AssignPayload, db=Depends(get_db)):
    return as_item(assignment_service.assign(db, request_id, payload.warehouseId))


@router.delete("/{request_id}/warehouse", response_model=RequestItem)
def unassign_warehouse(request_id: str, db=Depends(get_db)):
    return as_item(assignment_service.unassign(db, request_id))


@router.put("/{request_id}/status", response_model=RequestItem)
def update_status(request_id: str, payload: StatusPayload, db=Depends(get_db)):
    return as_item(status_service.set_status(db, request_id, payload.status))


@router.post("/{request_id}/alert", response_model=RequestItem)
def send_alert(request_id: str, db=Depends(get_db)):
    return as_item(alert_service.send_alert(db, request_id))
