"""Feature request endpoints."""

from fastapi import APIRouter, Depends, Response

from tracker.app.api.deps import get_caller, get_feature_service
from tracker.app.models.feature_request import FeatureRequest
from tracker.app.models.status import FeatureStatus
from tracker.app.schemas.error import ErrorResponse
from tracker.app.schemas.feature_request import (
    FeatureRequestCreate,
    FeatureRequestResponse,
    SortField,
    SortOrder,
    StatusUpdate,
)
from tracker.app.services.auth import CallerIdentity
from tracker.app.services.feature_requests import FeatureRequestService

router = APIRouter(
    prefix="/feature-requests",
    tags=["feature-requests"],
    dependencies=[Depends(get_caller)],
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Missing or invalid API key"},
    },
)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Feature request not found"}}


@router.post("", response_model=FeatureRequestResponse, status_code=201)
async def create_feature_request(
    data: FeatureRequestCreate,
    caller: CallerIdentity = Depends(get_caller),
    service: FeatureRequestService = Depends(get_feature_service),
) -> FeatureRequest:
    """Create a feature request in state NEW."""
    return await service.create(data.title, data.description, caller.id)


@router.get("", response_model=list[FeatureRequestResponse])
async def list_feature_requests(
    sort_by: SortField | None = None,
    sort_order: SortOrder | None = None,
    status: FeatureStatus | None = None,
    service: FeatureRequestService = Depends(get_feature_service),
) -> list[FeatureRequest]:
    """List all feature requests with their status history, newest first by default."""
    return await service.list_all(sort_by=sort_by, sort_order=sort_order, status=status)


@router.get("/{feature_id}", response_model=FeatureRequestResponse, responses=_NOT_FOUND)
async def get_feature_request(
    feature_id: str,
    service: FeatureRequestService = Depends(get_feature_service),
) -> FeatureRequest:
    return await service.get_by_id(feature_id)


@router.put("/{feature_id}/status", response_model=FeatureRequestResponse, responses=_NOT_FOUND)
async def update_feature_request_status(
    feature_id: str,
    data: StatusUpdate,
    caller: CallerIdentity = Depends(get_caller),
    service: FeatureRequestService = Depends(get_feature_service),
) -> FeatureRequest:
    """Change the status and append an entry to the status history."""
    return await service.update_status(feature_id, data.status, caller.id)


@router.delete("/{feature_id}", status_code=204, response_class=Response, responses=_NOT_FOUND)
async def delete_feature_request(
    feature_id: str,
    service: FeatureRequestService = Depends(get_feature_service),
) -> Response:
    """Delete a feature request together with its status history."""
    await service.delete(feature_id)
    return Response(status_code=204)
