import enum


class FeatureStatus(str, enum.Enum):
    """Lifecycle states. Any state may move to any other, including itself."""

    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
