import logging

from aidrelief.request_store import get_request, update_request
from aidrelief.schemas import AidRequest

logger = logging.getLogger("alerts")


def send_alert(db, request_id: str) -> AidRequest:
    """Raise the alert flag on a request.

    The flag only ever goes from False to True. Delivery of the notification
    is handled outside this service; the INFO line below marks the transition.
    """
    current = get_request(db, request_id)
    if current.alertSent:
        logger.debug("Alert already sent request=%s", request_id)
        return current
    update_request(db, request_id, {"alertSent": True})
    logger.info("Alert flagged request=%s severity=%s", request_id, current.severity)
    return get_request(db, request_id)
