"""Membership state machine for a (user, group) pair.

    non-member --request-join (public)--> member
    non-member --request-join (private)--> pending --approve--> member
                                           pending --reject---> non-member
    member <--change-role (owner only)--> admin        (owner is never touched)

Each transition loads the group, runs the access-policy checks, mutates the
aggregate and commits once. Touching ``updated_at`` forces an UPDATE of the
group row, which makes SQLAlchemy compare and bump ``version``; a concurrent
writer working from the same version gets a StaleDataError (409) instead of
silently overwriting the other change.
"""
import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

from recipe_hub.models.group import Group, GroupJoinRequest, GroupMember, GroupRole
from recipe_hub.models.user import User
from recipe_hub.services import access_policy
from recipe_hub.services.group_service import find_by_invite_code, get_group_or_404

logger = logging.getLogger(__name__)

ASSIGNABLE_ROLES = (GroupRole.admin, GroupRole.member)


def _touch(group: Group) -> None:
    group.updated_at = datetime.now(timezone.utc)


def _find_member(group: Group, user_id: str) -> GroupMember:
    for member in group.members:
        if member.user_id == user_id:
            return member
    raise HTTPException(status_code=404, detail="Member not found")


def _find_request(group: Group, user_id: str) -> GroupJoinRequest:
    for request in group.pending_requests:
        if request.user_id == user_id:
            return request
    raise HTTPException(status_code=404, detail="Join request not found")


def request_join(db: Session, user: User, code: str) -> tuple[Group, str]:
    """Join a public group outright or queue a request for a private one.

    Returns the group and the resulting state, ``"member"`` or ``"pending"``.
    """
    group = find_by_invite_code(db, code)

    if access_policy.is_member(group, user.user_id):
        raise HTTPException(status_code=400, detail="You are already a member of this group")
    if access_policy.has_pending_request(group, user.user_id):
        raise HTTPException(status_code=400, detail="You already have a pending request for this group")

    if group.is_private:
        group.pending_requests.append(GroupJoinRequest(user_id=user.user_id))
        outcome = "pending"
    else:
        group.members.append(GroupMember(user_id=user.user_id, role=GroupRole.member))
        outcome = "member"

    _touch(group)
    db.commit()
    db.refresh(group)
    logger.info("User %s -> %s in group %s", user.user_id, outcome, group.group_id)
    return group, outcome


def approve_join(db: Session, actor: User, group_id: str, user_id: str) -> GroupMember:
    """Move a pending request into the member list in one commit."""
    group = get_group_or_404(db, group_id)
    access_policy.ensure(
        access_policy.can_manage_join_requests(actor, group),
        "You do not have permission to approve requests",
    )
    request = _find_request(group, user_id)

    group.pending_requests.remove(request)
    member = GroupMember(user_id=user_id, role=GroupRole.member)
    group.members.append(member)
    _touch(group)
    db.commit()
    db.refresh(member)
    logger.info("Join request of %s approved in group %s by %s", user_id, group_id, actor.user_id)
    return member


def reject_join(db: Session, actor: User, group_id: str, user_id: str) -> None:
    group = get_group_or_404(db, group_id)
    access_policy.ensure(
        access_policy.can_manage_join_requests(actor, group),
        "You do not have permission to reject requests",
    )
    request = _find_request(group, user_id)

    group.pending_requests.remove(request)
    _touch(group)
    db.commit()
    logger.info("Join request of %s rejected in group %s by %s", user_id, group_id, actor.user_id)


def change_role(db: Session, actor: User, group_id: str, user_id: str, role: GroupRole) -> GroupMember:
    if role not in ASSIGNABLE_ROLES:
        raise HTTPException(status_code=400, detail="Invalid role: must be 'admin' or 'member'")

    group = get_group_or_404(db, group_id)
    access_policy.ensure(
        access_policy.can_change_roles(actor, group),
        "Only the owner can change roles",
    )
    member = _find_member(group, user_id)
    access_policy.ensure(member.role != GroupRole.owner, "The owner's role cannot be changed")

    member.role = role
    _touch(group)
    db.commit()
    db.refresh(member)
    logger.info("User %s is now %s in group %s", user_id, role.value, group_id)
    return member


def remove_member(db: Session, actor: User, group_id: str, user_id: str) -> None:
    group = get_group_or_404(db, group_id)
    access_policy.ensure(
        access_policy.member_role(group, actor.user_id) in access_policy.MANAGER_ROLES,
        "You do not have permission to remove members",
    )
    member = _find_member(group, user_id)
    access_policy.ensure(member.role != GroupRole.owner, "The group owner cannot be removed")
    access_policy.ensure(
        access_policy.can_remove_member(actor, group, member.role),
        "Only the owner can remove administrators",
    )

    group.members.remove(member)
    _touch(group)
    db.commit()
    logger.info("Removed user %s from group %s by %s", user_id, group_id, actor.user_id)
