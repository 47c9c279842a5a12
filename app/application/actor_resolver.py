"""Resolves a bearer credential to an authenticated actor with a role binding."""

import logging
from typing import Optional

from app.application.profile_directory import ProfileDirectory
from app.domain.models.audit import Actor
from app.security.exceptions import ProfileNotFoundError
from app.security.identity import IdentityVerifier


class ActorResolver:
    """
    Two steps, two failure modes: an unverifiable credential raises UnauthorizedError,
    a verified user without a profile raises ProfileNotFoundError.
    """

    def __init__(
        self,
        verifier: IdentityVerifier,
        directory: ProfileDirectory,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._verifier = verifier
        self._directory = directory
        self._logger = logger or logging.getLogger(__name__)

    async def resolve(self, authorization: Optional[str]) -> Actor:
        user_id = self._verifier.verify_header(authorization)
        actor = await self._directory.get_actor(user_id)
        if actor is None:
            self._logger.warning("actor_profile_missing", extra={"actor_id": user_id})
            raise ProfileNotFoundError("Profile not found")
        return actor
