# app/utils/get_user.py
from typing import Optional

from fastapi import Header


async def get_actor(x_user: Optional[str] = Header(default=None)) -> Optional[str]:
    """
    Name recorded in the audit trail for the current request.

    Callers identify themselves with an ``X-User`` header; no authentication
    is performed.
    """
    if x_user:
        return x_user.strip() or None
    return None
