"""Failure taxonomy shared by the stores and services.

Each error carries a short ``code`` tag that the HTTP layer returns next to
the message, so a client can branch on the kind of failure without parsing
text.
"""


class ReliefError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ReliefError):
    code = "not_found"
    status_code = 404

    def __init__(self, kind: str, ident: str):
        super().__init__(f"{kind} '{ident}' not found.")
        self.kind = kind
        self.ident = ident


class InvalidStatus(ReliefError):
    code = "invalid_status"
    status_code = 422

    def __init__(self, value, allowed):
        super().__init__(f"Invalid status {value!r}. Allowed: {', '.join(allowed)}.")
        self.value = value


class StoreUnavailable(ReliefError):
    code = "store_unavailable"
    status_code = 503


class GeolocationUnavailable(ReliefError):
    code = "geolocation_unavailable"
    status_code = 503


class WriteConflict(ReliefError):
    code = "write_conflict"
    status_code = 409
