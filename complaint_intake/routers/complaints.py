import logging
from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Response,
    UploadFile,
)
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..dependencies import get_blob_store, get_repository, require_staff
from ..schemas.complaint import (
    ComplaintCreate,
    ComplaintResponse,
    StatusUpdate,
    describe_errors,
)
from ..services.blob_store import BlobNotFound, BlobStore, BlobStoreError
from ..services.complaint_repository import ComplaintRepository
from ..utils.file_handler import read_photo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/complaints", tags=["Complaints"])


def _server_error(message: str) -> HTTPException:
    logger.exception(message)
    return HTTPException(status_code=500, detail="Server error")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value else None


@router.get(
    "",
    response_model=List[ComplaintResponse],
    dependencies=[Depends(require_staff)],
)
def list_complaints(
    repository: ComplaintRepository = Depends(get_repository),
):
    """Get all complaints, newest first (staff only)"""
    try:
        return repository.list_all()
    except SQLAlchemyError:
        raise _server_error("Failed to list complaints")


@router.post("", response_model=ComplaintResponse, status_code=201)
def submit_complaint(
    state: Optional[str] = Form(None),
    product_id: Optional[str] = Form(None, alias="productId"),
    complaint_details: Optional[str] = Form(None, alias="complaintDetails"),
    customer_name: Optional[str] = Form(None, alias="customerName"),
    customer_email: Optional[str] = Form(None, alias="customerEmail"),
    complaint_type: Optional[str] = Form(None, alias="complaintType"),
    submitter_role: Optional[str] = Form(None, alias="submitterRole"),
    photo: Optional[UploadFile] = File(None),
    repository: ComplaintRepository = Depends(get_repository),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Submit a new complaint with an optional photo"""
    if not state or not product_id or not complaint_details:
        raise HTTPException(
            status_code=400,
            detail="State, product ID, and complaint details are required",
        )

    try:
        complaint = ComplaintCreate.model_validate(
            {
                "state": state,
                "productId": product_id,
                "complaintDetails": complaint_details,
                "customerName": _blank_to_none(customer_name),
                "customerEmail": _blank_to_none(customer_email),
                "complaintType": _blank_to_none(complaint_type),
                "submitterRole": _blank_to_none(submitter_role),
            }
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=describe_errors(e))

    content = read_photo(photo)

    photo_id = None
    if content is not None:
        try:
            photo_id = blob_store.store(
                content, photo.filename, photo.content_type
            )
        except BlobStoreError:
            raise _server_error("Failed to store photo")

    try:
        created = repository.insert(complaint, photo_id=photo_id)
    except SQLAlchemyError:
        if photo_id:
            _discard_photo(blob_store, photo_id)
        raise _server_error("Failed to save complaint")
    except Exception:
        if photo_id:
            _discard_photo(blob_store, photo_id)
        raise

    logger.info(
        "Complaint %s submitted (photo=%s)", created.id, photo_id is not None
    )
    return created


def _discard_photo(blob_store: BlobStore, photo_id: str):
    """Remove a photo whose complaint record was never written"""
    try:
        blob_store.delete(photo_id)
    except BlobStoreError:
        logger.error("Could not remove orphaned photo %s", photo_id)


@router.put(
    "/{complaint_id}",
    response_model=ComplaintResponse,
    dependencies=[Depends(require_staff)],
)
def update_complaint_status(
    complaint_id: str,
    update: StatusUpdate,
    repository: ComplaintRepository = Depends(get_repository),
):
    """Set the status of a complaint (staff only)"""
    try:
        complaint = repository.update_status(complaint_id, update.status)
    except SQLAlchemyError:
        raise _server_error(f"Failed to update complaint {complaint_id}")

    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")
    return complaint


@router.get("/{complaint_id}/photo", dependencies=[Depends(require_staff)])
def get_complaint_photo(
    complaint_id: str,
    repository: ComplaintRepository = Depends(get_repository),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Download the photo attached to a complaint (staff only)"""
    try:
        complaint = repository.get(complaint_id)
    except SQLAlchemyError:
        raise _server_error(f"Failed to load complaint {complaint_id}")

    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")
    if not complaint.photo_id:
        raise HTTPException(status_code=404, detail="Photo not found")

    try:
        blob = blob_store.open(complaint.photo_id)
    except BlobNotFound:
        raise HTTPException(status_code=404, detail="Photo not found")
    except BlobStoreError:
        raise _server_error(f"Failed to read photo {complaint.photo_id}")

    return Response(content=blob.content, media_type=blob.content_type)
