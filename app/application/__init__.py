# Application layer: services that orchestrate domain, security and infrastructure.

from app.application.actor_resolver import ActorResolver
from app.application.profile_directory import ProfileDirectory

__all__ = [
    "ActorResolver",
    "ProfileDirectory",
]
