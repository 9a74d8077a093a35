"""Caller identity resolution.

The HTTP layer hands the raw ``x-api-key`` value to an ``IdentityResolver``;
which resolver is active is a deployment decision made from settings.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from tracker.app.config import DEFAULT_IDENTITY, Settings
from tracker.app.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerIdentity:
    id: str
    role: str = "admin"


class IdentityResolver(Protocol):
    def resolve(self, credential: str | None) -> CallerIdentity: ...


class StaticKeyResolver:
    """Looks API keys up in a fixed ``{key: identity}`` table."""

    def __init__(self, keys: dict[str, str]) -> None:
        self._keys = dict(keys)

    def resolve(self, credential: str | None) -> CallerIdentity:
        if not credential:
            logger.warning("Authentication failed: no API key provided")
            raise AuthenticationError("AUTHENTICATION_REQUIRED", "API key is required")

        identity = self._keys.get(credential)
        if not identity:
            logger.warning("Authentication failed: invalid API key")
            raise AuthenticationError("INVALID_CREDENTIALS", "Invalid API key")

        logger.debug("User authenticated: %s", identity)
        return CallerIdentity(id=identity)


class DevIdentityResolver:
    """Accepts every request as the default identity. Development only."""

    def __init__(self, identity: str = DEFAULT_IDENTITY) -> None:
        self._identity = CallerIdentity(id=identity)

    def resolve(self, credential: str | None) -> CallerIdentity:
        return self._identity


def resolver_from_settings(settings: Settings) -> IdentityResolver:
    if settings.auth_disabled:
        logger.info("Authentication disabled (development mode)")
        return DevIdentityResolver()
    return StaticKeyResolver(settings.key_table())
