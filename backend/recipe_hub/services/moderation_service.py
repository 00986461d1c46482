"""Moderation workflow shared by groups and recipes.

Every function takes the ORM class (``Group`` or ``Recipe``) so the same
approve / reject / re-review rules apply to both. Callers gate these behind
``require_admin``; the helpers that stamp an entity (``mark_approved``,
``reset_for_review``) do not commit on their own.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from recipe_hub.models.moderation import ModerationStatus
from recipe_hub.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "Does not comply with the platform's content policy"


def mark_approved(entity, moderator: User) -> None:
    entity.moderation_status = ModerationStatus.approved
    entity.moderated_by = moderator.user_id
    entity.moderated_at = datetime.now(timezone.utc)
    entity.rejection_reason = None


def mark_rejected(entity, moderator: User, reason: Optional[str] = None) -> None:
    entity.moderation_status = ModerationStatus.rejected
    entity.moderated_by = moderator.user_id
    entity.moderated_at = datetime.now(timezone.utc)
    entity.rejection_reason = reason or DEFAULT_REJECTION_REASON


def reset_for_review(entity) -> None:
    """Send edited content back to the queue, forgetting the previous verdict."""
    entity.moderation_status = ModerationStatus.pending
    entity.moderated_by = None
    entity.moderated_at = None
    entity.rejection_reason = None


def apply_initial_status(entity, author: User) -> None:
    """Admin-authored content is approved on creation; everything else waits."""
    if author.is_admin:
        mark_approved(entity, author)
    else:
        reset_for_review(entity)


def list_pending(db: Session, model) -> list:
    return (
        db.query(model)
        .filter(model.moderation_status == ModerationStatus.pending)
        .order_by(model.created_at.desc())
        .all()
    )


def _get_or_404(db: Session, model, entity_id: str):
    entity = db.get(model, entity_id)
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{model.__name__} not found")
    return entity


def approve(db: Session, model, entity_id: str, moderator: User):
    entity = _get_or_404(db, model, entity_id)
    mark_approved(entity, moderator)
    db.commit()
    db.refresh(entity)
    logger.info("%s %s approved by %s", model.__name__, entity_id, moderator.user_id)
    return entity


def reject(db: Session, model, entity_id: str, moderator: User, reason: Optional[str] = None):
    entity = _get_or_404(db, model, entity_id)
    mark_rejected(entity, moderator, reason)
    db.commit()
    db.refresh(entity)
    logger.info("%s %s rejected by %s: %s", model.__name__, entity_id, moderator.user_id, entity.rejection_reason)
    return entity
