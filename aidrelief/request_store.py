import logging
from typing import Any, Dict, List, Optional

from firebase_admin import firestore

from aidrelief.errors import NotFound
from aidrelief.firebase_admin_client import call_opts, store_errors
from aidrelief.schemas import AidRequest, Location, RequestCreate
from aidrelief.settings import settings

logger = logging.getLogger("triage")

# API field -> field name used by the intake app in Firestore
STORED_FIELDS = {
    "title": "requestTitle",
    "description": "requestDescription",
}


def requests_col(db):
    return db.collection(settings.REQUESTS_COLLECTION)


def geopoint(loc: Optional[Location]):
    if loc is None:
        return None
    return firestore.GeoPoint(loc.latitude, loc.longitude)


def to_store_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k, v in fields.items():
        if k == "id":
            continue
        if isinstance(v, Location):
            v = geopoint(v)
        out[STORED_FIELDS.get(k, k)] = v
    return out


def request_from_dict(request_id: str, d: Optional[Dict[str, Any]]) -> AidRequest:
    d = dict(d or {})
    d["id"] = request_id
    for api_name, stored in STORED_FIELDS.items():
        if stored in d:
            d[api_name] = d.pop(stored)
    # older documents were flagged under "sendAlert"
    if d.get("alertSent") is None and "sendAlert" in d:
        d["alertSent"] = d.get("sendAlert")
    return AidRequest(**d)


def request_from_doc(doc) -> AidRequest:
    return request_from_dict(doc.id, doc.to_dict())


def list_requests(db) -> List[AidRequest]:
    with store_errors("requests"):
        docs = list(requests_col(db).stream(**call_opts()))
    return [request_from_doc(d) for d in docs]


def get_request(db, request_id: str) -> AidRequest:
    with store_errors("Request", request_id):
        snap = requests_col(db).document(request_id).get(**call_opts())
    if not snap.exists:
        raise NotFound("Request", request_id)
    return request_from_doc(snap)


def create_request(db, payload: RequestCreate) -> AidRequest:
    data = to_store_fields(payload.model_dump())
    data["location"] = geopoint(payload.location)
    data.update({
        "warehouseId": None,
        "warehouseName": None,
        "warehouseLocation": None,
        "alertSent": False,
    })
    ref = requests_col(db).document()
    with store_errors("Request", ref.id):
        ref.set(data, **call_opts())
    logger.info("Request created id=%s category=%s severity=%s", ref.id, payload.category, payload.severity)
    return request_from_dict(ref.id, data)


def update_request(db, request_id: str, fields: Dict[str, Any]) -> None:
    """Write a partial set of API fields; the document must already exist."""
    data = to_store_fields(fields)
    if not data:
        return
    with store_errors("Request", request_id):
        requests_col(db).document(request_id).update(data, **call_opts())


def delete_request(db, request_id: str) -> None:
    ref = requests_col(db).document(request_id)
    with store_errors("Request", request_id):
        if not ref.get(**call_opts()).exists:
            raise NotFound("Request", request_id)
        ref.delete(**call_opts())
    logger.info("Request deleted id=%s", request_id)


def ping(db) -> None:
    """Cheapest round trip to the store: read at most one request document."""
    with store_errors("requests"):
        requests_col(db).limit(1).get(**call_opts())
