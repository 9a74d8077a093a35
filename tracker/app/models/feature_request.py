from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.app.db import Base
from tracker.app.models.status import FeatureStatus


class FeatureRequest(Base):
    __tablename__ = "feature_requests"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    # Stored as the label so ORDER BY status sorts by label.
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FeatureStatus.NEW.value, index=True
    )
    created_by: Mapped[str] = mapped_column(String, nullable=False)
    # ISO 8601 UTC strings, same as every other timestamp in the schema.
    created_at: Mapped[str] = mapped_column(String, nullable=False, index=True)
    updated_at: Mapped[str] = mapped_column(String, nullable=False)

    # Relationships
    status_history: Mapped[list[StatusChange]] = relationship(
        "StatusChange",
        back_populates="feature_request",
        order_by="StatusChange.changed_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
