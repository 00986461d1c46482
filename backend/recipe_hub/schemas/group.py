"""Pydantic schemas for Groups and memberships."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import Field

from recipe_hub.models.group import GroupRole
from recipe_hub.schemas.base import CamelModel
from recipe_hub.schemas.moderation import ModerationFields
from recipe_hub.schemas.user import UserBrief


class GroupCreate(CamelModel):
    name: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=10, max_length=300)
    image: Optional[str] = None
    is_private: bool = True


class GroupUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=3, max_length=50)
    description: Optional[str] = Field(None, min_length=10, max_length=300)
    image: Optional[str] = None
    is_private: Optional[bool] = None


class GroupMemberOut(CamelModel):
    user_id: str
    role: GroupRole
    joined_at: Optional[datetime] = None
    user: Optional[UserBrief] = None


class PendingRequestOut(CamelModel):
    user_id: str
    requested_at: Optional[datetime] = None
    user: Optional[UserBrief] = None


class GroupOut(ModerationFields):
    group_id: str
    name: str
    description: str
    image: str
    created_by: str
    creator: Optional[UserBrief] = None
    invite_code: str
    is_private: bool
    members: list[GroupMemberOut] = []
    pending_requests: list[PendingRequestOut] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


class GroupEnvelope(CamelModel):
    message: str
    group: GroupOut


class GroupInviteOut(CamelModel):
    """What an invite code reveals about a group."""

    group_id: str
    name: str
    description: str
    image: str
    is_private: bool
    invite_code: str
    creator: Optional[UserBrief] = None
    member_count: int
    is_member: bool
    has_pending_request: bool


class GroupInviteEnvelope(CamelModel):
    group: GroupInviteOut


class JoinResultOut(CamelModel):
    message: str
    status: str  # "member" or "pending"


class RoleChange(CamelModel):
    # The owner role can never be granted
    role: GroupRole = Field(..., description="admin or member")


class MemberEnvelope(CamelModel):
    message: str
    member: GroupMemberOut
