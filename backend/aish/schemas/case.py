from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class WaterSource(str, Enum):
    WELL = "Well"
    RIVER = "River"
    POND = "Pond"
    MUNICIPAL = "Municipal"
    BOREWELL = "Borewell"
    TAP_WATER = "Tap Water"
    RAINWATER = "Rainwater"
    OTHER = "Other"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CaseStatus(str, Enum):
    ACTIVE = "Active"
    RECOVERED = "Recovered"
    UNDER_TREATMENT = "Under Treatment"


REQUIRED_TEXT_FIELDS = ("name", "location", "symptoms")
REQUIRED_FIELDS = REQUIRED_TEXT_FIELDS + ("age", "water_source", "severity", "status", "reported_by")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CaseSchema(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True


class CaseBase(CaseSchema):
    name: str
    age: int = Field(ge=0, le=150)
    location: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    symptoms: str
    water_source: WaterSource
    severity: Severity
    status: CaseStatus = CaseStatus.ACTIVE.value
    user_id: Optional[str] = None
    reported_by: str = "Unknown"

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class CaseCreate(CaseBase):
    date: Optional[str] = None
    timestamp: Optional[datetime] = None

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class CaseSync(CaseCreate):
    """One element of an offline batch; `_id` is set when the client already holds a server id."""

    id: Optional[str] = Field(default=None, alias="_id", min_length=1, max_length=64)

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id_is_absent(cls, value):
        if value == "":
            return None
        return value


class CaseUpdate(CaseSchema):
    name: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0, le=150)
    location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    symptoms: Optional[str] = None
    water_source: Optional[WaterSource] = None
    severity: Optional[Severity] = None
    status: Optional[CaseStatus] = None
    date: Optional[str] = None
    timestamp: Optional[datetime] = None
    user_id: Optional[str] = None
    reported_by: Optional[str] = None

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("must not be empty")
        return value

    @field_validator("date", "timestamp")
    @classmethod
    def _not_null_snapshot(cls, value):
        if value is None:
            raise ValueError("must not be null")
        if isinstance(value, datetime):
            return _as_utc(value)
        return value


class CaseResponse(CaseBase):
    id: str = Field(alias="_id")
    date: str
    timestamp: datetime
    synced: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("timestamp", "created_at", "updated_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive datetimes; everything is stored as UTC
        return _as_utc(value)


class SyncError(BaseModel):
    case: Optional[str] = None
    error: str


class CaseStats(BaseModel):
    total: int
    active: int
    recovered: int
    critical: int
