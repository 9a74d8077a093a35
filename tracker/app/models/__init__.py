from tracker.app.models.feature_request import FeatureRequest
from tracker.app.models.status import FeatureStatus
from tracker.app.models.status_change import StatusChange

__all__ = [
    "FeatureRequest",
    "FeatureStatus",
    "StatusChange",
]
