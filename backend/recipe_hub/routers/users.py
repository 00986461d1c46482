"""User API routes — registration, login, profile, and admin user management."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from recipe_hub import auth
from recipe_hub.database import get_db
from recipe_hub.models.user import User, UserRole
from recipe_hub.schemas.base import MessageOut
from recipe_hub.schemas.user import (
    AdminUserUpdate,
    LoginOut,
    ProfileUpdate,
    RegisterOut,
    UserEnvelope,
    UserLogin,
    UserOut,
    UserRegister,
)
from recipe_hub.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    """Create an account and log it in."""
    user = user_service.register_user(db, payload.model_dump())
    return RegisterOut(
        message="User registered successfully",
        user=UserOut.model_validate(user),
        token=auth.create_access_token(user.user_id),
    )


@router.post("/login", response_model=LoginOut)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, payload.email, payload.password)
    logger.info("User %s logged in", user.user_id)
    return LoginOut(message="Login successful", token=auth.create_access_token(user.user_id))


@router.get("/profile", response_model=UserOut)
def get_profile(current_user: User = Depends(auth.get_current_user)):
    return current_user


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Self-service edit of name, bio and profile picture (never email, password or role)."""
    user = user_service.update_user(db, current_user, payload.model_dump(exclude_unset=True))
    return UserEnvelope(message="Profile updated successfully", user=UserOut.model_validate(user))


# ── Admin only ─────────────────────────────────────────────────────

@router.post("/admin/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register_admin(
    payload: UserRegister,
    admin: User = Depends(auth.require_admin),
    db: Session = Depends(get_db),
):
    """Create another system administrator."""
    user = user_service.register_user(db, payload.model_dump(), role=UserRole.admin)
    logger.info("Administrator %s created by %s", user.user_id, admin.user_id)
    return UserEnvelope(message="Administrator registered successfully", user=UserOut.model_validate(user))


@router.get("/", response_model=list[UserOut])
def list_users(admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    return user_service.get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    admin: User = Depends(auth.require_admin),
    db: Session = Depends(get_db),
):
    user = user_service.get_user_or_404(db, user_id)
    user = user_service.update_user(
        db, user, payload.model_dump(exclude_unset=True), allowed=user_service.ADMIN_FIELDS
    )
    return UserEnvelope(message="User updated successfully", user=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(user_id: str, admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return MessageOut(message="User deleted successfully")
