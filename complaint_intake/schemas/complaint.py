from pydantic import BaseModel, Field, field_serializer
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Optional

from ..models.complaint import (
    ComplaintStatus,
    ComplaintType,
    State,
    SubmitterRole,
)


class ComplaintCreate(BaseModel):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    state: State
    product_id: str = Field(..., min_length=1)
    complaint_details: str = Field(..., min_length=1)
    complaint_type: Optional[ComplaintType] = None
    submitter_role: Optional[SubmitterRole] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ComplaintResponse(BaseModel):
    id: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    state: State
    product_id: str
    complaint_details: str
    complaint_type: Optional[ComplaintType] = None
    submitter_role: Optional[SubmitterRole] = None
    photo_id: Optional[str] = None
    status: ComplaintStatus
    created_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        # SQLite hands back naive values; they are stored as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        return value.isoformat().replace("+00:00", "Z")


class StatusUpdate(BaseModel):
    status: ComplaintStatus


def describe_errors(exc) -> str:
    """Flatten pydantic errors into one readable sentence"""
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        parts.append(f"{field}: {error['msg']}" if field else error["msg"])
    return "; ".join(parts)
