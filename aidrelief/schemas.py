from datetime import date, datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

ALL = "All"

SEVERITIES = ("Low", "Moderate", "High")

STATUS_OPTIONS = (
    "Pending",
    "Started",
    "Dispatched",
    "Nearby",
    "Out for Delivery",
)

# what the admin list shows instead of the stored value
STATUS_LABELS = {"Pending": "Pending Approval"}

SORT_FIELDS = ("neededBy", "severity")


def _coerce_location(v):
    # Firestore GeoPoint -> plain mapping
    if v is None or isinstance(v, dict):
        return v
    if hasattr(v, "latitude") and hasattr(v, "longitude"):
        return {"latitude": v.latitude, "longitude": v.longitude}
    return v


class Location(BaseModel):
    latitude: float
    longitude: float


class RequestSummary(BaseModel):
    id: str
    title: Optional[str] = None
    location: Optional[Location] = None

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, v):
        return _coerce_location(v)


class AidRequest(BaseModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    severity: Optional[str] = None
    neededBy: Optional[str] = None
    contact: Optional[str] = None
    location: Optional[Location] = None
    status: Optional[str] = None
    warehouseId: Optional[str] = None
    warehouseName: Optional[str] = None
    warehouseLocation: Optional[Location] = None
    alertSent: bool = False

    @field_validator("location", "warehouseLocation", mode="before")
    @classmethod
    def _location(cls, v):
        return _coerce_location(v)

    @field_validator("neededBy", mode="before")
    @classmethod
    def _needed_by(cls, v):
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        return v

    @field_validator("warehouseId", mode="before")
    @classmethod
    def _blank_warehouse(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("alertSent", mode="before")
    @classmethod
    def _alert(cls, v):
        return bool(v)

    @property
    def status_label(self) -> Optional[str]:
        return STATUS_LABELS.get(self.status or "", self.status)

    def summary(self) -> RequestSummary:
        return RequestSummary(id=self.id, title=self.title, location=self.location)


class Warehouse(BaseModel):
    id: str
    name: Optional[str] = None
    location: Optional[Location] = None
    requests: List[RequestSummary] = Field(default_factory=list)

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, v):
        return _coerce_location(v)

    @field_validator("requests", mode="before")
    @classmethod
    def _requests(cls, v):
        return v or []


# -------- Payloads --------
class RequestCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=4000)
    category: str = Field(..., min_length=1, max_length=80)
    severity: Literal["Low", "Moderate", "High"]
    neededBy: str = Field(..., description="ISO date/time")
    contact: Optional[str] = Field(default=None, max_length=200)
    location: Location
    status: Literal["Pending", "Started", "Dispatched", "Nearby", "Out for Delivery"] = "Pending"

    @field_validator("title", "description", "category", "contact", mode="before")
    @classmethod
    def _strip(cls, v):
        if isinstance(v, str):
            s = v.strip()
            return s if s else None
        return v


class AssignPayload(BaseModel):
    warehouseId: str = Field(..., min_length=1)


class StatusPayload(BaseModel):
    # validated by the status service so the caller gets an InvalidStatus
    status: Any = None


class RequestItem(AidRequest):
    statusLabel: Optional[str] = None


class MapPoint(BaseModel):
    location: Location
    weight: int


class MapView(BaseModel):
    center: Location
    centerSource: Literal["client", "requests", "geolocation", "default"]
    points: List[MapPoint]
