"""Recipe API routes — catalog, search, moderation and the admin catalogue."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from recipe_hub import auth
from recipe_hub.database import get_db
from recipe_hub.models.recipe import Category, Difficulty, Recipe
from recipe_hub.models.user import User
from recipe_hub.schemas.base import MessageOut
from recipe_hub.schemas.moderation import RejectPayload
from recipe_hub.schemas.recipe import RecipeEnvelope, RecipeIn, RecipeOut, RecipePage
from recipe_hub.services import moderation_service, recipe_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=RecipeEnvelope, status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeIn,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    recipe = recipe_service.create_recipe(db, current_user, payload.model_dump())
    return RecipeEnvelope(message="Recipe created successfully", recipe=RecipeOut.model_validate(recipe))


@router.get("/", response_model=RecipePage)
def list_recipes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=recipe_service.MAX_PAGE_SIZE),
    sort: Optional[str] = Query(None, description="Field name, prefix with '-' for descending"),
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Paginated recipes visible to the caller, newest first by default."""
    result = recipe_service.list_recipes(db, current_user, page=page, limit=limit, sort=sort)
    return RecipePage(
        recipes=[RecipeOut.model_validate(r) for r in result["recipes"]],
        total_pages=result["total_pages"],
        current_page=result["current_page"],
        total_recipes=result["total_recipes"],
    )


@router.get("/search", response_model=list[RecipeOut])
def search_recipes(
    q: Optional[str] = Query(None),
    category: Optional[Category] = Query(None),
    difficulty: Optional[Difficulty] = Query(None),
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Free-text and/or category/difficulty search; at least one criterion is required."""
    return recipe_service.search_recipes(db, current_user, q=q, category=category, difficulty=difficulty)


# ── Moderation (system admins) ─────────────────────────────────────

@router.get("/moderation/pending", response_model=list[RecipeOut])
def list_pending_recipes(admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    return moderation_service.list_pending(db, Recipe)


@router.post("/moderation/{recipe_id}/approve", response_model=RecipeEnvelope)
def approve_recipe(recipe_id: str, admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    recipe = moderation_service.approve(db, Recipe, recipe_id, admin)
    return RecipeEnvelope(message="Recipe approved", recipe=RecipeOut.model_validate(recipe))


@router.post("/moderation/{recipe_id}/reject", response_model=RecipeEnvelope)
def reject_recipe(
    recipe_id: str,
    payload: Optional[RejectPayload] = None,
    admin: User = Depends(auth.require_admin),
    db: Session = Depends(get_db),
):
    reason = payload.rejection_reason if payload else None
    recipe = moderation_service.reject(db, Recipe, recipe_id, admin, reason)
    return RecipeEnvelope(message="Recipe rejected", recipe=RecipeOut.model_validate(recipe))


# ── Admin catalogue ────────────────────────────────────────────────

@router.get("/admin/all", response_model=list[RecipeOut])
def admin_list_recipes(admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    """Every recipe regardless of privacy or moderation state."""
    return recipe_service.list_all_recipes(db)


@router.get("/admin/{recipe_id}", response_model=RecipeOut)
def admin_get_recipe(recipe_id: str, admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    return recipe_service.get_recipe_or_404(db, recipe_id)


@router.put("/admin/{recipe_id}", response_model=RecipeEnvelope)
def admin_update_recipe(
    recipe_id: str,
    payload: RecipeIn,
    admin: User = Depends(auth.require_admin),
    db: Session = Depends(get_db),
):
    recipe = recipe_service.update_recipe(db, admin, recipe_id, payload.model_dump())
    return RecipeEnvelope(message="Recipe updated", recipe=RecipeOut.model_validate(recipe))


@router.delete("/admin/{recipe_id}", response_model=MessageOut)
def admin_delete_recipe(recipe_id: str, admin: User = Depends(auth.require_admin), db: Session = Depends(get_db)):
    recipe_service.delete_recipe(db, admin, recipe_id)
    return MessageOut(message="Recipe deleted")


# ── Single recipe ──────────────────────────────────────────────────

@router.get("/{recipe_id}", response_model=RecipeOut)
def get_recipe(recipe_id: str, current_user: User = Depends(auth.get_current_user), db: Session = Depends(get_db)):
    return recipe_service.get_visible_recipe(db, current_user, recipe_id)


@router.put("/{recipe_id}", response_model=RecipeEnvelope)
def update_recipe(
    recipe_id: str,
    payload: RecipeIn,
    current_user: User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Full update by the author or an admin. Non-admin edits go back to review."""
    recipe = recipe_service.update_recipe(db, current_user, recipe_id, payload.model_dump())
    if current_user.is_admin:
        message = "Recipe updated successfully"
    else:
        message = "Recipe updated successfully. It is pending approval again."
    return RecipeEnvelope(message=message, recipe=RecipeOut.model_validate(recipe))


@router.delete("/{recipe_id}", response_model=MessageOut)
def delete_recipe(recipe_id: str, current_user: User = Depends(auth.get_current_user), db: Session = Depends(get_db)):
    recipe_service.delete_recipe(db, current_user, recipe_id)
    return MessageOut(message="Recipe deleted successfully")
