from tracker.app.schemas.error import ErrorResponse, FieldErrorDetail
from tracker.app.schemas.feature_request import (
    FeatureRequestCreate,
    FeatureRequestResponse,
    SortField,
    SortOrder,
    StatusChangeResponse,
    StatusUpdate,
)

__all__ = [
    "ErrorResponse",
    "FieldErrorDetail",
    "FeatureRequestCreate",
    "FeatureRequestResponse",
    "SortField",
    "SortOrder",
    "StatusChangeResponse",
    "StatusUpdate",
]
