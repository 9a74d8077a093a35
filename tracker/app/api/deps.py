"""Shared FastAPI dependencies: caller identity and the feature request service."""

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.app.config import settings
from tracker.app.db import UnitOfWork, get_db
from tracker.app.services.auth import CallerIdentity, IdentityResolver, resolver_from_settings
from tracker.app.services.events import EventRecorder, LoggingEventRecorder
from tracker.app.services.feature_requests import FeatureRequestService

# auto_error=False: a missing key is reported through our own error envelope.
api_key_header = APIKeyHeader(
    name="x-api-key",
    auto_error=False,
    description="API key for authentication",
)

_resolver = resolver_from_settings(settings)
_recorder = LoggingEventRecorder()


def get_identity_resolver() -> IdentityResolver:
    return _resolver


def get_event_recorder() -> EventRecorder:
    return _recorder


def get_caller(
    api_key: str | None = Security(api_key_header),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> CallerIdentity:
    return resolver.resolve(api_key)


def get_feature_service(
    db: AsyncSession = Depends(get_db),
    recorder: EventRecorder = Depends(get_event_recorder),
) -> FeatureRequestService:
    return FeatureRequestService(UnitOfWork(db), recorder)
