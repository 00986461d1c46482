"""Access-control policy — one place for every role, ownership and visibility rule.

Predicates are pure functions of (acting user, resource) and return bools.
Callers run them before touching the resource and turn a ``False`` into a
403 through :func:`ensure`, so a refused request never mutates anything.

The SQL clause builders mirror the read predicates for list endpoints, which
filter in the database instead of loading every row.
"""
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import and_, or_, select

from recipe_hub.models.group import Group, GroupMember, GroupRole
from recipe_hub.models.moderation import ModerationStatus
from recipe_hub.models.recipe import Recipe
from recipe_hub.models.user import User

MANAGER_ROLES = (GroupRole.owner, GroupRole.admin)


def ensure(allowed: bool, message: str) -> None:
    """Raise 403 unless ``allowed``."""
    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)


def is_system_admin(user: User) -> bool:
    return user.is_admin


# ── Groups ─────────────────────────────────────────────────────────

def member_role(group: Group, user_id: str) -> Optional[GroupRole]:
    for member in group.members:
        if member.user_id == user_id:
            return member.role
    return None


def is_member(group: Group, user_id: str) -> bool:
    return member_role(group, user_id) is not None


def has_pending_request(group: Group, user_id: str) -> bool:
    return any(r.user_id == user_id for r in group.pending_requests)


def is_publicly_visible(entity) -> bool:
    """Public and approved — the bar for strangers to see a group or recipe."""
    return not entity.is_private and entity.moderation_status == ModerationStatus.approved


def can_view_group(user: User, group: Group) -> bool:
    return (
        is_system_admin(user)
        or group.created_by == user.user_id
        or is_member(group, user.user_id)
        or is_publicly_visible(group)
    )


def can_update_group(user: User, group: Group) -> bool:
    return (
        is_system_admin(user)
        or group.created_by == user.user_id
        or member_role(group, user.user_id) in MANAGER_ROLES
    )


def can_delete_group(user: User, group: Group) -> bool:
    return is_system_admin(user) or group.created_by == user.user_id


def can_manage_join_requests(user: User, group: Group) -> bool:
    return member_role(group, user.user_id) in MANAGER_ROLES


def can_change_roles(user: User, group: Group) -> bool:
    return member_role(group, user.user_id) == GroupRole.owner


def can_remove_member(user: User, group: Group, target_role: GroupRole) -> bool:
    """Owner removes anyone but itself; admins remove plain members only."""
    actor_role = member_role(group, user.user_id)
    if actor_role not in MANAGER_ROLES or target_role == GroupRole.owner:
        return False
    if target_role == GroupRole.admin:
        return actor_role == GroupRole.owner
    return True


def visible_groups_clause(user: User):
    """SQL filter matching :func:`can_view_group` (None = no restriction)."""
    if is_system_admin(user):
        return None
    member_of = select(GroupMember.group_id).where(GroupMember.user_id == user.user_id)
    return or_(
        Group.created_by == user.user_id,
        Group.group_id.in_(member_of),
        and_(Group.is_private.is_(False), Group.moderation_status == ModerationStatus.approved),
    )


# ── Recipes ────────────────────────────────────────────────────────

def can_view_recipe(user: User, recipe: Recipe) -> bool:
    if is_system_admin(user) or recipe.author_id == user.user_id:
        return True
    # Pending and rejected recipes stay with their author
    if recipe.moderation_status != ModerationStatus.approved:
        return False
    if not recipe.is_private:
        return True
    return recipe.group_id is not None and recipe.group_id in user.groups


def can_modify_recipe(user: User, recipe: Recipe) -> bool:
    return is_system_admin(user) or recipe.author_id == user.user_id


def visible_recipes_clause(user: User):
    """SQL filter matching :func:`can_view_recipe` (None = no restriction)."""
    if is_system_admin(user):
        return None
    member_of = select(GroupMember.group_id).where(GroupMember.user_id == user.user_id)
    return or_(
        Recipe.author_id == user.user_id,
        and_(
            Recipe.moderation_status == ModerationStatus.approved,
            or_(Recipe.is_private.is_(False), Recipe.group_id.in_(member_of)),
        ),
    )
