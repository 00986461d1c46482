"""Moderation state shared by groups and recipes."""
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import declared_attr


class ModerationStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ModeratedMixin:
    """Columns tracking the review lifecycle of user-submitted content."""

    moderation_status = Column(SAEnum(ModerationStatus), nullable=False, default=ModerationStatus.pending)
    moderated_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(String(500), nullable=True)

    @declared_attr
    def moderated_by(cls):
        return Column(String(36), ForeignKey("users.user_id"), nullable=True)
