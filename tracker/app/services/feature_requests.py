"""Feature request lifecycle: create, list, fetch, status updates, delete.

Every status transition writes exactly one ``StatusChange`` row in the same
transaction as the status column update, and deleting a request removes its
history in the same transaction as the request itself.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import asc, delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.app.db import UnitOfWork
from tracker.app.errors import NotFoundError
from tracker.app.models.feature_request import FeatureRequest
from tracker.app.models.status import FeatureStatus
from tracker.app.models.status_change import StatusChange
from tracker.app.schemas.feature_request import SortField, SortOrder
from tracker.app.services.events import (
    EventRecorder,
    feature_created_event,
    feature_deleted_event,
    status_changed_event,
)


def utcnow() -> str:
    # Fixed precision keeps the ISO strings sortable as text.
    return datetime.now(UTC).isoformat(timespec="microseconds")


class FeatureRequestService:
    def __init__(self, uow: UnitOfWork, recorder: EventRecorder) -> None:
        self.uow = uow
        self.recorder = recorder

    def _emit(self, event: tuple[str, dict[str, Any]]) -> None:
        name, attributes = event
        self.recorder.record(name, attributes)

    async def create(
        self, title: str, description: str | None, caller_id: str
    ) -> FeatureRequest:
        """Create a request in state NEW with an empty history."""

        async def _create(db: AsyncSession) -> FeatureRequest:
            now = utcnow()
            feature = FeatureRequest(
                id=str(uuid.uuid4()),
                title=title,
                description=description,
                status=FeatureStatus.NEW.value,
                created_by=caller_id,
                created_at=now,
                updated_at=now,
                status_history=[],
            )
            db.add(feature)
            await db.flush()
            return feature

        feature = await self.uow.run_atomic(_create)
        self._emit(feature_created_event(feature.id, feature.title, feature.created_by))
        return feature

    async def list_all(
        self,
        sort_by: SortField | None = None,
        sort_order: SortOrder | None = None,
        status: FeatureStatus | None = None,
    ) -> list[FeatureRequest]:
        """List requests with their history.

        With no sort arguments the newest requests come first. Naming only a
        sort field sorts it ascending.
        """
        if sort_order is None:
            sort_order = SortOrder.DESC if sort_by is None else SortOrder.ASC
        direction = asc if sort_order == SortOrder.ASC else desc
        query = select(FeatureRequest)
        if status is not None:
            query = query.where(FeatureRequest.status == status.value)
        if sort_by == SortField.STATUS:
            query = query.order_by(direction(FeatureRequest.status))
        query = query.order_by(direction(FeatureRequest.created_at))

        async def _list(db: AsyncSession) -> list[FeatureRequest]:
            result = await db.execute(query)
            return list(result.scalars().all())

        return await self.uow.run(_list)

    async def get_by_id(self, feature_id: str) -> FeatureRequest:
        async def _get(db: AsyncSession) -> FeatureRequest:
            result = await db.execute(select(FeatureRequest).where(FeatureRequest.id == feature_id))
            feature = result.scalar_one_or_none()
            if feature is None:
                raise NotFoundError()
            return feature

        return await self.uow.run(_get)

    async def update_status(
        self, feature_id: str, new_status: FeatureStatus, caller_id: str
    ) -> FeatureRequest:
        """Move a request to ``new_status`` and append the matching history entry.

        Same-status updates are not rejected; they are recorded like any other
        transition.
        """

        async def _update(db: AsyncSession) -> tuple[FeatureRequest, str]:
            result = await db.execute(
                select(FeatureRequest).where(FeatureRequest.id == feature_id).with_for_update()
            )
            feature = result.scalar_one_or_none()
            if feature is None:
                raise NotFoundError()

            old_status = feature.status
            now = utcnow()
            feature.status = new_status.value
            feature.updated_at = now
            feature.status_history.append(
                StatusChange(
                    id=str(uuid.uuid4()),
                    feature_request_id=feature.id,
                    old_status=old_status,
                    new_status=new_status.value,
                    changed_at=now,
                    changed_by=caller_id,
                )
            )
            await db.flush()
            return feature, old_status

        feature, old_status = await self.uow.run_atomic(_update)
        self._emit(status_changed_event(feature.id, old_status, feature.status, caller_id))
        return feature

    async def delete(self, feature_id: str) -> None:
        """Delete a request and its whole status history."""

        async def _delete(db: AsyncSession) -> int:
            found = await db.scalar(select(FeatureRequest.id).where(FeatureRequest.id == feature_id))
            if found is None:
                raise NotFoundError()

            history = await db.execute(
                delete(StatusChange).where(StatusChange.feature_request_id == feature_id)
            )
            await db.execute(delete(FeatureRequest).where(FeatureRequest.id == feature_id))
            return history.rowcount

        removed = await self.uow.run_atomic(_delete)
        self._emit(feature_deleted_event(feature_id, removed))
