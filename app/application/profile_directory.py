"""Profile directory protocol. Application layer depends on this; infrastructure implements it."""

from typing import Optional, Protocol

from app.domain.models.audit import Actor


class ProfileDirectory(Protocol):
    """Privileged lookup of a user's profile: role label, branch binding and display name."""

    async def get_actor(self, user_id: str) -> Optional[Actor]:
        """Return the actor profile snapshot, or None if the user has no profile."""
        ...
