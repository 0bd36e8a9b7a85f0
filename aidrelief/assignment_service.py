"""Warehouse assignment.

A request stores a denormalized link to its warehouse (id, name, location)
and the warehouse stores a snapshot ``{id, title, location}`` of every
request assigned to it. All writes of one operation go into a single
Firestore write batch, so the two sides commit together or not at all.

Every write in the batch is conditioned on the document's ``update_time``
as it was read. If another admin changed one of the documents in between,
Firestore rejects the whole batch and the caller gets a ``WriteConflict``.
"""
import logging
from typing import Optional

from google.api_core import exceptions as gexc

from aidrelief.errors import NotFound, WriteConflict
from aidrelief.firebase_admin_client import call_opts, store_errors
from aidrelief.request_store import get_request, request_from_doc, requests_col
from aidrelief.schemas import AidRequest
from aidrelief.warehouse_store import upsert_summary, warehouses_col, without_summary

logger = logging.getLogger("assignment")

# what Firestore raises when a precondition fails or a document vanished
CONFLICT_ERRORS = (gexc.FailedPrecondition, gexc.Aborted, gexc.NotFound)


def _snapshot(ref, kind: str, ident: str):
    with store_errors(kind, ident):
        snap = ref.get(**call_opts())
    if not snap.exists:
        raise NotFound(kind, ident)
    return snap


def _unchanged_since(db, snap):
    return db.write_option(last_update_time=snap.update_time)


def _release(db, batch, warehouse_id: Optional[str], request_id: str) -> None:
    """Queue removal of ``request_id`` from a warehouse list, if it is there."""
    if not warehouse_id:
        return
    ref = warehouses_col(db).document(warehouse_id)
    with store_errors("Warehouse", warehouse_id):
        snap = ref.get(**call_opts())
    if not snap.exists:
        logger.warning("Previous warehouse missing warehouse=%s request=%s", warehouse_id, request_id)
        return
    entries = list((snap.to_dict() or {}).get("requests") or [])
    remaining = without_summary(entries, request_id)
    if len(remaining) != len(entries):
        batch.update(ref, {"requests": remaining}, option=_unchanged_since(db, snap))


def _commit(batch, request_id: str) -> None:
    with store_errors("Request", request_id):
        try:
            batch.commit(**call_opts())
        except CONFLICT_ERRORS as e:
            logger.warning("Assignment write rejected request=%s error=%s", request_id, e)
            raise WriteConflict(
                f"Request '{request_id}' or one of its warehouses changed while it was being "
                "updated. Reload and try again."
            ) from e


def assign(db, request_id: str, warehouse_id: str) -> AidRequest:
    wh_ref = warehouses_col(db).document(warehouse_id)
    req_ref = requests_col(db).document(request_id)
    wh_snap = _snapshot(wh_ref, "Warehouse", warehouse_id)
    req_snap = _snapshot(req_ref, "Request", request_id)

    warehouse = wh_snap.to_dict() or {}
    raw = req_snap.to_dict() or {}
    previous = request_from_doc(req_snap).warehouseId

    batch = db.batch()
    batch.update(req_ref, {
        "warehouseId": warehouse_id,
        "warehouseName": warehouse.get("name"),
        "warehouseLocation": warehouse.get("location"),
    }, option=_unchanged_since(db, req_snap))
    if previous != warehouse_id:
        _release(db, batch, previous, request_id)
    summary = {"id": request_id, "title": raw.get("requestTitle"), "location": raw.get("location")}
    entries = list(warehouse.get("requests") or [])
    batch.update(wh_ref, {"requests": upsert_summary(entries, summary)}, option=_unchanged_since(db, wh_snap))
    _commit(batch, request_id)

    logger.info("Request assigned request=%s warehouse=%s previous=%s", request_id, warehouse_id, previous)
    return get_request(db, request_id)


def unassign(db, request_id: str) -> AidRequest:
    req_ref = requests_col(db).document(request_id)
    req_snap = _snapshot(req_ref, "Request", request_id)
    current = request_from_doc(req_snap)
    if not current.warehouseId:
        return current

    batch = db.batch()
    batch.update(
        req_ref,
        {"warehouseId": None, "warehouseName": None, "warehouseLocation": None},
        option=_unchanged_since(db, req_snap),
    )
    _release(db, batch, current.warehouseId, request_id)
    _commit(batch, request_id)

    logger.info("Request unassigned request=%s warehouse=%s", request_id, current.warehouseId)
    return get_request(db, request_id)


def delete_assigned_request(db, request_id: str) -> None:
    """Hard-delete a request and drop its summary from its warehouse."""
    req_ref = requests_col(db).document(request_id)
    req_snap = _snapshot(req_ref, "Request", request_id)
    current = request_from_doc(req_snap)

    batch = db.batch()
    batch.delete(req_ref, option=_unchanged_since(db, req_snap))
    _release(db, batch, current.warehouseId, request_id)
    _commit(batch, request_id)

    logger.info("Request deleted request=%s warehouse=%s", request_id, current.warehouseId)
