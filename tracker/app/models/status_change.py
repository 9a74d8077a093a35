from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.app.db import Base


class StatusChange(Base):
    """One status transition of a feature request. Rows are never updated."""

    __tablename__ = "status_changes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    feature_request_id: Mapped[str] = mapped_column(
        String, ForeignKey("feature_requests.id", ondelete="CASCADE"), nullable=False
    )
    old_status: Mapped[str] = mapped_column(String(20), nullable=False)
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_at: Mapped[str] = mapped_column(String, nullable=False)
    changed_by: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        Index("idx_status_changes_feature_changed", "feature_request_id", "changed_at"),
    )

    # Relationships
    feature_request: Mapped[FeatureRequest] = relationship(
        "FeatureRequest", back_populates="status_history"
    )
