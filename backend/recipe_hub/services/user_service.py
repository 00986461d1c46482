"""Account store — registration, login, profile edits and admin user management."""
import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session

from recipe_hub import auth
from recipe_hub.models.group import Group
from recipe_hub.models.recipe import Recipe
from recipe_hub.models.user import User, UserRole
from recipe_hub.services.group_service import purge_group

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "bio", "profile_picture")
ADMIN_FIELDS = PROFILE_FIELDS + ("email", "role")


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _email_taken(db: Session, email: str) -> bool:
    return db.query(User.user_id).filter(User.email == email).first() is not None


def register_user(db: Session, payload: dict[str, Any], role: UserRole = UserRole.user) -> User:
    email = payload["email"].lower()
    if _email_taken(db, email):
        raise HTTPException(status_code=400, detail="Email is already registered")

    user = User(
        name=payload["name"],
        email=email,
        password_hash=auth.hash_password(payload["password"]),
        bio=payload.get("bio") or "",
        role=role,
    )
    if payload.get("profile_picture"):
        user.profile_picture = payload["profile_picture"]
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s %s (%s)", role.value, user.user_id, user.email)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not auth.verify_password(user.password_hash, password):
        raise HTTPException(status_code=400, detail="Invalid email or password")
    return user


def update_user(db: Session, user: User, updates: dict[str, Any], allowed: tuple[str, ...] = PROFILE_FIELDS) -> User:
    """Partial update restricted to ``allowed`` fields."""
    changes = {k: v for k, v in updates.items() if k in allowed and v is not None}

    if "email" in changes:
        changes["email"] = changes["email"].lower()
        if changes["email"] != user.email and _email_taken(db, changes["email"]):
            raise HTTPException(status_code=400, detail="Email is already registered")

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    logger.info("Updated user %s (%s)", user.user_id, ", ".join(sorted(changes)) or "no changes")
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at).all()


def delete_user(db: Session, user_id: str) -> None:
    """Remove a user together with everything that cannot outlive them.

    Memberships and join requests go with the user row. Groups they created
    are deleted (their recipes are detached, not deleted), their own recipes
    are deleted, and moderation stamps naming them are cleared.
    """
    user = get_user_or_404(db, user_id)

    for group in db.query(Group).filter(Group.created_by == user_id).all():
        purge_group(db, group)
    db.query(Recipe).filter(Recipe.author_id == user_id).delete(synchronize_session=False)
    db.query(Recipe).filter(Recipe.moderated_by == user_id).update(
        {Recipe.moderated_by: None}, synchronize_session=False
    )
    moderated = db.query(Group).filter(Group.moderated_by == user_id, Group.created_by != user_id)
    for group in moderated.all():
        group.moderated_by = None

    db.delete(user)
    db.commit()
    logger.info("Deleted user %s", user_id)


def ensure_bootstrap_admin(db: Session, email: str, password: str, name: str) -> None:
    """Create the configured administrator if it does not exist yet."""
    if not email or not password:
        return
    if _email_taken(db, email.lower()):
        return
    register_user(db, {"name": name, "email": email, "password": password}, role=UserRole.admin)
    logger.info("Bootstrap administrator %s created", email)
