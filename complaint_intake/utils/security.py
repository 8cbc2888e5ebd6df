import hmac
from typing import Optional

from ..config import settings


def verify_staff_password(candidate: Optional[str]) -> bool:
    """Exact, case-sensitive match against the configured staff password"""
    if candidate is None:
        return False
    return hmac.compare_digest(
        candidate.encode("utf-8"), settings.staff_password.encode("utf-8")
    )
