# app/utils/activity_helpers.py
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.activity_models import UserActivity


async def log_user_activity(db: AsyncSession, username: Optional[str] = None, message: str = "", commit: bool = False):
    """
    Adds a user activity log to the session. The caller is responsible for the commit.
    """
    activity = UserActivity(
        username=username,
        message=message
    )
    db.add(activity)
    if commit:
        await db.commit()
