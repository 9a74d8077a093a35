"""Feature request schemas.

Responses are serialized with camelCase keys (``createdBy``, ``statusHistory``);
request bodies use the plain field names.
"""

import enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tracker.app.models.status import FeatureStatus


class SortField(str, enum.Enum):
    CREATED_AT = "createdAt"
    STATUS = "status"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class FeatureRequestCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255, examples=["Add dark mode support"])
    description: str | None = Field(
        default=None,
        examples=["Implement dark mode for better user experience in low-light environments"],
    )


class StatusUpdate(BaseModel):
    status: FeatureStatus


class _ResponseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StatusChangeResponse(_ResponseModel):
    id: str
    feature_request_id: str
    old_status: FeatureStatus
    new_status: FeatureStatus
    changed_at: str
    changed_by: str


class FeatureRequestResponse(_ResponseModel):
    id: str
    title: str
    description: str | None = None
    status: FeatureStatus
    created_by: str
    created_at: str
    updated_at: str
    status_history: list[StatusChangeResponse] = []
