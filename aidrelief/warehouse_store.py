import logging
from typing import Any, Dict, List

from aidrelief.errors import NotFound
from aidrelief.firebase_admin_client import call_opts, store_errors
from aidrelief.request_store import geopoint
from aidrelief.schemas import RequestSummary, Warehouse
from aidrelief.settings import settings

logger = logging.getLogger("warehouses")


def warehouses_col(db):
    return db.collection(settings.WAREHOUSES_COLLECTION)


def warehouse_from_doc(doc) -> Warehouse:
    d = doc.to_dict() or {}
    d["id"] = doc.id
    return Warehouse(**d)


def summary_to_store(summary: RequestSummary) -> Dict[str, Any]:
    return {"id": summary.id, "title": summary.title, "location": geopoint(summary.location)}


def _entry_id(entry):
    return entry.get("id") if isinstance(entry, dict) else None


def has_summary(entries: List[Any], request_id: str) -> bool:
    return any(_entry_id(e) == request_id for e in entries)


def upsert_summary(entries: List[Any], summary: Dict[str, Any]) -> List[Any]:
    """Return a new list holding ``summary`` exactly once.

    An entry with the same request id is replaced in place so the list keeps
    its order; otherwise the summary goes to the end.
    """
    out = []
    placed = False
    for e in entries:
        if _entry_id(e) == summary["id"]:
            if not placed:
                out.append(summary)
                placed = True
            continue
        out.append(e)
    if not placed:
        out.append(summary)
    return out


def without_summary(entries: List[Any], request_id: str) -> List[Any]:
    return [e for e in entries if _entry_id(e) != request_id]


def list_warehouses(db) -> List[Warehouse]:
    with store_errors("warehouses"):
        docs = list(warehouses_col(db).stream(**call_opts()))
    items = [warehouse_from_doc(d) for d in docs]
    items.sort(key=lambda x: (x.name or "").lower())
    return items


def get_warehouse(db, warehouse_id: str) -> Warehouse:
    with store_errors("Warehouse", warehouse_id):
        snap = warehouses_col(db).document(warehouse_id).get(**call_opts())
    if not snap.exists:
        raise NotFound("Warehouse", warehouse_id)
    return warehouse_from_doc(snap)


def _read_entries(db, warehouse_id: str):
    ref = warehouses_col(db).document(warehouse_id)
    with store_errors("Warehouse", warehouse_id):
        snap = ref.get(**call_opts())
    if not snap.exists:
        raise NotFound("Warehouse", warehouse_id)
    return ref, list((snap.to_dict() or {}).get("requests") or [])


def append_request_summary(db, warehouse_id: str, summary: RequestSummary) -> bool:
    """Append ``summary`` unless the warehouse already lists that request id.

    Returns True when the list changed.
    """
    ref, entries = _read_entries(db, warehouse_id)
    if has_summary(entries, summary.id):
        return False
    entries.append(summary_to_store(summary))
    with store_errors("Warehouse", warehouse_id):
        ref.update({"requests": entries}, **call_opts())
    logger.info("Summary appended warehouse=%s request=%s", warehouse_id, summary.id)
    return True


def remove_request_summary(db, warehouse_id: str, request_id: str) -> bool:
    ref, entries = _read_entries(db, warehouse_id)
    if not has_summary(entries, request_id):
        return False
    with store_errors("Warehouse", warehouse_id):
        ref.update({"requests": without_summary(entries, request_id)}, **call_opts())
    logger.info("Summary removed warehouse=%s request=%s", warehouse_id, request_id)
    return True
