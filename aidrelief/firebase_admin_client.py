import base64
import json
import logging
import os
from contextlib import contextmanager
from typing import Any, Dict

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as gexc

from aidrelief.errors import NotFound, StoreUnavailable
from aidrelief.settings import settings

logger = logging.getLogger("firebase")


def _service_account_raw() -> str:
    raw = (settings.FIREBASE_SERVICE_ACCOUNT_JSON or "").strip()
    if raw:
        return raw

    # fallback: credentials file path
    path = (settings.GOOGLE_APPLICATION_CREDENTIALS or "").strip()
    if path and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    return ""


def parse_service_account(raw: str) -> Dict[str, Any]:
    """Decode service account JSON as it comes out of a deploy panel.

    Accepts plain JSON, JSON wrapped in quotes, ``base64:<payload>`` and
    strings whose escapes were doubled by the hosting platform.
    """
    s = (raw or "").strip()
    if not s:
        raise RuntimeError(
            "Firebase credentials not found. Set FIREBASE_SERVICE_ACCOUNT_JSON "
            "or GOOGLE_APPLICATION_CREDENTIALS."
        )

    if (s.startswith('"') and s.endswith('"')) or (s.startswith("'") and s.endswith("'")):
        s = s[1:-1].strip()

    if s.lower().startswith("base64:"):
        b = s.split(":", 1)[1].strip()
        try:
            s = base64.b64decode(b).decode("utf-8").strip()
        except Exception as e:
            raise RuntimeError(f"Could not decode base64 credentials: {e}")

    try:
        data = json.loads(s)
    except ValueError:
        try:
            data = json.loads(s.encode("utf-8").decode("unicode_escape"))
        except ValueError as e:
            raise RuntimeError(f"Invalid JSON in FIREBASE_SERVICE_ACCOUNT_JSON: {e}")

    if not isinstance(data, dict):
        raise RuntimeError("FIREBASE_SERVICE_ACCOUNT_JSON must be a JSON object.")

    # private_key often arrives with literal \n sequences
    pk = data.get("private_key")
    if isinstance(pk, str):
        pk = pk.replace("\\\\n", "\\n")
        pk = pk.replace("\\n", "\n")
        data["private_key"] = pk

    return data


def init_firebase() -> None:
    if firebase_admin._apps:
        return

    data = parse_service_account(_service_account_raw())
    try:
        firebase_admin.initialize_app(credentials.Certificate(data))
    except ValueError as e:
        raise RuntimeError(
            f"Firebase initialisation failed for project_id={data.get('project_id')}: {e}"
        )
    logger.info("Firebase Admin initialised project_id=%s", data.get("project_id"))


def get_db():
    init_firebase()
    return firestore.client()


def call_opts() -> Dict[str, Any]:
    # one attempt per call, bounded by the configured timeout
    return {"retry": None, "timeout": settings.STORE_TIMEOUT_SECONDS}


@contextmanager
def store_errors(kind: str, ident: str = ""):
    """Translate Firestore client errors into the service taxonomy."""
    try:
        yield
    except gexc.NotFound:
        raise NotFound(kind, ident)
    except (gexc.GoogleAPICallError, gexc.RetryError) as e:
        logger.warning("Firestore call failed kind=%s id=%s error=%s", kind, ident, e)
        raise StoreUnavailable(f"Document store unavailable ({kind}): {e}") from e
