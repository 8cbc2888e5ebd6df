import logging

from fastapi import APIRouter, HTTPException, status

from ..schemas.auth import LoginRequest, MessageResponse
from ..utils.security import verify_staff_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])


@router.post("/login", response_model=MessageResponse)
def login(credentials: LoginRequest):
    """Check the staff password; nothing is issued on success"""
    if not verify_staff_password(credentials.password):
        logger.warning("Failed staff login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    return {"message": "Login successful"}
