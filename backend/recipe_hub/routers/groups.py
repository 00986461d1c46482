"""Group API routes — lifecycle, invitations, membership and moderation."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from recipe_hub import auth
from recipe_hub.database import get_db
from recipe_hub.models.group import Group
from recipe_hub.models.user import User
from recipe_hub.schemas.base import MessageOut
from recipe_hub.schemas.group import (
    GroupCreate,
    GroupEnvelope,
    GroupInviteEnvelope,
    GroupInviteOut,
    GroupMemberOut,
    GroupOut,
    GroupUpdate,
    JoinResultOut,
    MemberEnvelope,
    RoleChange,
)
from recipe_hub.schemas.moderation import RejectPayload
from recipe_hub.schemas.user import UserBrief
from recipe_hub.services import access_policy, group_service, membership_service, moderation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=GroupEnvelope, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Create a group. The creator becomes its owner."""
    group = group_service.create_group(db, current_user, payload.model_dump())
    return GroupEnvelope(message="Group created successfully", group=GroupOut.model_validate(group))


@router.get("/", response_model=list[GroupOut])
def list_groups(current_user: User = Depends(auth.get_current_user), db: Session = Depends(get_db)):
    """Groups visible to the caller."""
    return group_service.list_groups(db, current_user)


@router.get("/user", response_model=list[GroupOut])
def list_my_groups(current_user: User = Depends(auth.get_current_user), db: Session = Depends(get_db)):
    """Groups the caller is a member of."""
    return group_service.list_user_groups(db, current_user)


@router.get("/search", response_model=list[GroupOut])
def search_groups(
    q: Optional[str] = Query(None),
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    return group_service.search_groups(db, current_user, q)


# ── Moderation (system admins) ─────────────────────────────────────

@router.get("/moderation/pending", response_model=list[GroupOut])
def list_pending_groups(admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    return moderation_service.list_pending(db, Group)


@router.post("/moderation/{group_id}/approve", response_model=GroupEnvelope)
def approve_group(group_id: str, admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    group = moderation_service.approve(db, Group, group_id, admin)
    return GroupEnvelope(message="Group approved", group=GroupOut.model_validate(group))


@router.post("/moderation/{group_id}/reject", response_model=GroupEnvelope)
def reject_group(
    group_id: str,
    payload: Optional[RejectPayload] = None,
    admin: User = Depends(auth.require_admin),
    db: Session = Depends(get_db),
):
    reason = payload.rejection_reason if payload else None
    group = moderation_service.reject(db, Group, group_id, admin, reason)
    return GroupEnvelope(message="Group rejected", group=GroupOut.model_validate(group))


# ── Invitations ────────────────────────────────────────────────────

@router.get("/invite/{code}", response_model=GroupInviteEnvelope)
def find_by_invite_code(
    code: str,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Preview a group from its invite code, with the caller's standing in it."""
    group = group_service.find_by_invite_code(db, code)
    summary = GroupInviteOut(
        group_id=group.group_id,
        name=group.name,
        description=group.description,
        image=group.image,
        is_private=group.is_private,
        invite_code=group.invite_code,
        creator=UserBrief.model_validate(group.creator),
        member_count=len(group.members),
        is_member=access_policy.is_member(group, current_user.user_id),
        has_pending_request=access_policy.has_pending_request(group, current_user.user_id),
    )
    return GroupInviteEnvelope(group=summary)


@router.post("/invite/{code}/join", response_model=JoinResultOut)
def request_join(
    code: str,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    _, outcome = membership_service.request_join(db, current_user, code)
    if outcome == "member":
        message = "You have joined the group"
    else:
        message = "Request sent. Wait for an administrator of the group to approve it."
    return JoinResultOut(message=message, status=outcome)


# ── Single group ───────────────────────────────────────────────────

@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: str, current_user: User = Depends(auth.get_current_user), db: Session = Depends(get_db)):
    return group_service.get_visible_group(db, current_user, group_id)


@router.put("/{group_id}", response_model=GroupEnvelope)
def update_group(
    group_id: str,
    payload: GroupUpdate,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    group = group_service.update_group(db, current_user, group_id, payload.model_dump(exclude_unset=True))
    return GroupEnvelope(message="Group updated successfully", group=GroupOut.model_validate(group))


@router.delete("/{group_id}", response_model=MessageOut)
def delete_group(group_id: str, current_user: User = Depends(auth.get_current_user), db: Session = Depends(get_db)):
    group_service.delete_group(db, current_user, group_id)
    return MessageOut(message="Group deleted successfully")


# ── Membership ─────────────────────────────────────────────────────

@router.post("/{group_id}/approve/{user_id}", response_model=MemberEnvelope)
def approve_join_request(
    group_id: str,
    user_id: str,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    member = membership_service.approve_join(db, current_user, group_id, user_id)
    return MemberEnvelope(message="Request approved", member=GroupMemberOut.model_validate(member))


@router.post("/{group_id}/reject/{user_id}", response_model=MessageOut)
def reject_join_request(
    group_id: str,
    user_id: str,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    membership_service.reject_join(db, current_user, group_id, user_id)
    return MessageOut(message="Request rejected")


@router.put("/{group_id}/members/{user_id}/role", response_model=MemberEnvelope)
def change_member_role(
    group_id: str,
    user_id: str,
    payload: RoleChange,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    member = membership_service.change_role(db, current_user, group_id, user_id, payload.role)
    return MemberEnvelope(message="Role updated successfully", member=GroupMemberOut.model_validate(member))


@router.delete("/{group_id}/members/{user_id}", response_model=MessageOut)
def remove_member(
    group_id: str,
    user_id: str,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    membership_service.remove_member(db, current_user, group_id, user_id)
    return MessageOut(message="Member removed successfully")
