import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from .database import get_db
from .services.blob_store import BlobStore, create_blob_store
from .services.complaint_repository import ComplaintRepository
from .utils.security import verify_staff_password

logger = logging.getLogger(__name__)


def require_staff(x_staff_password: Optional[str] = Header(None)):
    """Reject the request unless X-Staff-Password matches"""
    if not verify_staff_password(x_staff_password):
        logger.warning("Rejected staff request without a valid password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )


def get_repository(db: Session = Depends(get_db)) -> ComplaintRepository:
    return ComplaintRepository(db)


@lru_cache
def get_blob_store() -> BlobStore:
    return create_blob_store()
