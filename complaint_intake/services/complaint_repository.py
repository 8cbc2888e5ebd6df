import logging
from typing import List, Mapping, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.complaint import Complaint, ComplaintStatus
from ..schemas.complaint import ComplaintCreate

logger = logging.getLogger(__name__)


class ComplaintRepository:
    """Persistence for complaint records"""

    def __init__(self, db: Session):
        self.db = db

    def insert(
        self,
        data: Union[ComplaintCreate, Mapping],
        photo_id: Optional[str] = None,
    ) -> Complaint:
        """Validate and store a new complaint.

        Raises pydantic.ValidationError when a required field is missing or
        an enumerated field holds a value outside its set.
        """
        if not isinstance(data, ComplaintCreate):
            data = ComplaintCreate.model_validate(data)

        complaint = Complaint(**data.model_dump(), photo_id=photo_id)
        self.db.add(complaint)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(complaint)
        return complaint

    def list_all(self) -> List[Complaint]:
        """Every complaint, newest first"""
        return (
            self.db.query(Complaint)
            .order_by(Complaint.created_at.desc())
            .all()
        )

    def get(self, complaint_id: str) -> Optional[Complaint]:
        return (
            self.db.query(Complaint)
            .filter(Complaint.id == complaint_id)
            .first()
        )

    def update_status(
        self, complaint_id: str, status: ComplaintStatus
    ) -> Optional[Complaint]:
        """Overwrite the status of a complaint; None if it does not exist"""
        complaint = self.get(complaint_id)
        if not complaint:
            return None

        complaint.status = status
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(complaint)
        logger.info("Complaint %s set to %s", complaint_id, status.value)
        return complaint
