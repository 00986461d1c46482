"""Group lifecycle — creation with invite codes, lookups, metadata edits, deletion."""
import logging
import secrets
import string
from typing import Any, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recipe_hub.models.group import Group, GroupMember, GroupRole
from recipe_hub.models.recipe import Recipe
from recipe_hub.models.user import User
from recipe_hub.services import access_policy, moderation_service

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 6
MAX_INVITE_CODE_ATTEMPTS = 10

LIKE_ESCAPE = "\\"

UPDATABLE_FIELDS = ("name", "description", "image", "is_private")


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def _invite_code_taken(db: Session, code: str) -> bool:
    return db.query(Group.group_id).filter(Group.invite_code == code).first() is not None


def get_group_or_404(db: Session, group_id: str) -> Group:
    group = db.query(Group).filter(Group.group_id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def create_group(db: Session, creator: User, fields: dict[str, Any]) -> Group:
    """Create a group owned by ``creator`` with a fresh invite code.

    The pre-check only avoids obvious collisions; the unique constraint on
    ``invite_code`` is what guarantees uniqueness when two creations race, so
    an IntegrityError on commit triggers another attempt.
    """
    if fields.get("image") is None:
        fields.pop("image", None)

    for attempt in range(1, MAX_INVITE_CODE_ATTEMPTS + 1):
        code = generate_invite_code()
        if _invite_code_taken(db, code):
            continue

        group = Group(**fields, created_by=creator.user_id, invite_code=code)
        group.members.append(GroupMember(user_id=creator.user_id, role=GroupRole.owner))
        moderation_service.apply_initial_status(group, creator)
        db.add(group)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Invite code collision on commit (attempt %d)", attempt)
            continue

        db.refresh(group)
        logger.info("Created group '%s' (%s) by user %s", group.name, group.group_id, creator.user_id)
        return group

    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Could not allocate a unique invite code, please retry",
    )


def list_groups(db: Session, user: User) -> list[Group]:
    """Every group the user may see."""
    query = db.query(Group)
    clause = access_policy.visible_groups_clause(user)
    if clause is not None:
        query = query.filter(clause)
    return query.order_by(Group.created_at.desc()).all()


def list_user_groups(db: Session, user: User) -> list[Group]:
    """Groups the user is a member of, whatever their role."""
    return (
        db.query(Group)
        .join(GroupMember)
        .filter(GroupMember.user_id == user.user_id)
        .order_by(Group.created_at.desc())
        .all()
    )


def escape_like(text: str) -> str:
    """Make ``%`` and ``_`` in user input match literally."""
    return text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", LIKE_ESCAPE + "%").replace("_", LIKE_ESCAPE + "_")


def search_groups(db: Session, user: User, q: Optional[str]) -> list[Group]:
    """Case-insensitive substring search over name and description."""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="A search query is required")

    pattern = f"%{escape_like(q.strip())}%"
    query = db.query(Group).filter(or_(
        Group.name.ilike(pattern, escape=LIKE_ESCAPE),
        Group.description.ilike(pattern, escape=LIKE_ESCAPE),
    ))
    clause = access_policy.visible_groups_clause(user)
    if clause is not None:
        query = query.filter(clause)
    return query.order_by(Group.name).all()


def get_visible_group(db: Session, user: User, group_id: str) -> Group:
    group = get_group_or_404(db, group_id)
    access_policy.ensure(
        access_policy.can_view_group(user, group),
        "You do not have permission to view this group",
    )
    return group


def find_by_invite_code(db: Session, code: str) -> Group:
    group = db.query(Group).filter(Group.invite_code == code.strip().upper()).first()
    if not group:
        raise HTTPException(status_code=404, detail="No group found with that invite code")
    return group


def update_group(db: Session, user: User, group_id: str, updates: dict[str, Any]) -> Group:
    """Edit group metadata; a non-admin edit sends the group back to review."""
    group = get_group_or_404(db, group_id)
    access_policy.ensure(
        access_policy.can_update_group(user, group),
        "You do not have permission to update this group",
    )

    for field, value in updates.items():
        if field in UPDATABLE_FIELDS and value is not None:
            setattr(group, field, value)

    if not access_policy.is_system_admin(user):
        moderation_service.reset_for_review(group)

    db.commit()
    db.refresh(group)
    logger.info("Updated group %s by user %s", group_id, user.user_id)
    return group


def purge_group(db: Session, group: Group) -> None:
    """Delete a group, detaching its recipes. Does not commit."""
    db.query(Recipe).filter(Recipe.group_id == group.group_id).update(
        {Recipe.group_id: None}, synchronize_session=False
    )
    db.delete(group)


def delete_group(db: Session, user: User, group_id: str) -> None:
    group = get_group_or_404(db, group_id)
    access_policy.ensure(
        access_policy.can_delete_group(user, group),
        "Only the creator can delete this group",
    )
    purge_group(db, group)
    db.commit()
    logger.info("Deleted group %s by user %s", group_id, user.user_id)
