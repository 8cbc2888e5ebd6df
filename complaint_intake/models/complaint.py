import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, String, Text

from ..database import Base


class State(str, enum.Enum):
    MI = "MI"
    MD = "MD"
    PA = "PA"
    WV = "WV"
    OK = "OK"


class ComplaintType(str, enum.Enum):
    QUALITY = "Quality"
    PACKAGING = "Packaging"
    SERVICE = "Service"
    OTHER = "Other"


class SubmitterRole(str, enum.Enum):
    CUSTOMER = "Customer"
    STAFF = "Staff"


class ComplaintStatus(str, enum.Enum):
    OPEN = "Open"
    RESOLVED = "Resolved"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _utcnow():
    return datetime.now(timezone.utc)


class Complaint(Base):
    __tablename__ = "complaints"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_name = Column(String(255))
    customer_email = Column(String(255))
    state = Column(
        Enum(State, name="complaint_state", values_callable=_enum_values),
        nullable=False,
    )
    product_id = Column(String(255), nullable=False)
    complaint_details = Column(Text, nullable=False)
    complaint_type = Column(
        Enum(ComplaintType, name="complaint_type", values_callable=_enum_values)
    )
    submitter_role = Column(
        Enum(SubmitterRole, name="submitter_role", values_callable=_enum_values)
    )
    photo_id = Column(String(64))  # blob store identifier
    status = Column(
        Enum(ComplaintStatus, name="complaint_status", values_callable=_enum_values),
        nullable=False,
        default=ComplaintStatus.OPEN,
    )
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )
