import logging

from aidrelief.errors import InvalidStatus
from aidrelief.request_store import get_request, update_request
from aidrelief.schemas import STATUS_OPTIONS, AidRequest

logger = logging.getLogger("status")


def set_status(db, request_id: str, new_status) -> AidRequest:
    # Any status may follow any other; only the value itself is checked.
    if not isinstance(new_status, str) or new_status not in STATUS_OPTIONS:
        raise InvalidStatus(new_status, STATUS_OPTIONS)
    update_request(db, request_id, {"status": new_status})
    logger.info("Status updated request=%s status=%s", request_id, new_status)
    return get_request(db, request_id)
