from typing import Optional
from fastapi import UploadFile, HTTPException
from ..config import settings


def read_photo(upload_file: Optional[UploadFile]) -> Optional[bytes]:
    """Validate an uploaded photo and return its content.

    Returns None when no photo was attached. Rejects disallowed types with a
    400 and anything over the size limit with a 413.
    """
    if upload_file is None or not upload_file.filename:
        return None

    if upload_file.content_type not in settings.allowed_photo_types:
        raise HTTPException(
            status_code=400, detail="Only PNG and JPEG files are allowed"
        )

    # Validate file size
    file_size = 0
    chunk_size = 1024 * 1024  # 1MB
    chunks = []
    while chunk := upload_file.file.read(chunk_size):
        file_size += len(chunk)
        if file_size > settings.max_file_size:
            raise HTTPException(status_code=413, detail="File too large")
        chunks.append(chunk)

    return b"".join(chunks)
