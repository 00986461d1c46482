"""Pydantic schemas for the moderation workflow."""
from datetime import datetime
from typing import Optional
from pydantic import Field

from recipe_hub.models.moderation import ModerationStatus
from recipe_hub.schemas.base import CamelModel


class RejectPayload(CamelModel):
    rejection_reason: Optional[str] = Field(None, max_length=500)


class ModerationFields(CamelModel):
    moderation_status: ModerationStatus
    moderated_by: Optional[str] = None
    moderated_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
