"""DB-backed profile directory. Reads the profiles table owned by the surrounding application."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models.audit import Actor
from app.infrastructure.database.models import ProfileRow


class DbProfileDirectory:
    """Implements the ProfileDirectory protocol. A profile without a role counts as missing."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_actor(self, user_id: str) -> Optional[Actor]:
        stmt = select(ProfileRow).where(ProfileRow.id == user_id)
        result = await self._session.execute(stmt)
        profile = result.scalar_one_or_none()
        if profile is None or not profile.role:
            return None
        return Actor(
            user_id=profile.id,
            role=profile.role,
            branch_id=profile.branch_id,
            full_name=profile.full_name,
        )
