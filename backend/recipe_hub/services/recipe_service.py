"""Recipe catalog — create, visibility-filtered reads, pagination, search, edits."""
import logging
import math
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from recipe_hub.models.group import Group
from recipe_hub.models.recipe import Category, Difficulty, Recipe
from recipe_hub.models.user import User
from recipe_hub.services import access_policy, moderation_service, search

logger = logging.getLogger(__name__)

DEFAULT_SORT = "-createdAt"
MAX_PAGE_SIZE = 100

SORTABLE_FIELDS = {
    "createdAt": Recipe.created_at,
    "updatedAt": Recipe.updated_at,
    "title": Recipe.title,
    "prepTime": Recipe.prep_time,
    "cookTime": Recipe.cook_time,
    "servings": Recipe.servings,
    "rating": Recipe.rating,
    "difficulty": Recipe.difficulty,
    "category": Recipe.category,
}


def parse_sort(sort: Optional[str]):
    """``"title"`` sorts ascending, ``"-title"`` descending."""
    sort = (sort or DEFAULT_SORT).strip()
    descending = sort.startswith("-")
    name = sort.lstrip("-")
    column = SORTABLE_FIELDS.get(name)
    if column is None:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot sort by '{name}'. Allowed: {', '.join(sorted(SORTABLE_FIELDS))}",
        )
    return column.desc() if descending else column.asc()


def _recipe_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """Map the request body onto model columns."""
    fields = dict(payload)
    fields["group_id"] = fields.pop("group", None) or None
    if fields.get("image") is None:
        fields.pop("image", None)
    return fields


def _check_group_link(db: Session, user: User, group_id: Optional[str]) -> None:
    if group_id is None:
        return
    group = db.query(Group).filter(Group.group_id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    access_policy.ensure(
        access_policy.is_system_admin(user) or access_policy.is_member(group, user.user_id),
        "You can only share recipes with groups you belong to",
    )


def get_recipe_or_404(db: Session, recipe_id: str) -> Recipe:
    recipe = db.query(Recipe).filter(Recipe.recipe_id == recipe_id).first()
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


def create_recipe(db: Session, author: User, payload: dict[str, Any]) -> Recipe:
    fields = _recipe_fields(payload)
    _check_group_link(db, author, fields["group_id"])

    recipe = Recipe(**fields, author_id=author.user_id)
    moderation_service.apply_initial_status(recipe, author)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    logger.info("Created recipe '%s' (%s) by user %s", recipe.title, recipe.recipe_id, author.user_id)
    return recipe


def list_recipes(db: Session, user: User, page: int = 1, limit: int = 10, sort: Optional[str] = None) -> dict:
    """One page of visible recipes plus the totals needed to page through them."""
    order = parse_sort(sort)
    query = db.query(Recipe)
    clause = access_policy.visible_recipes_clause(user)
    if clause is not None:
        query = query.filter(clause)

    total = query.count()
    offset = (page - 1) * limit
    # Past the last page: nothing to fetch, and the offset may not fit in an SQL integer
    if offset >= total:
        recipes = []
    else:
        recipes = query.order_by(order, Recipe.recipe_id).offset(offset).limit(limit).all()
    return {
        "recipes": recipes,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
        "total_recipes": total,
    }


def search_recipes(
    db: Session,
    user: User,
    q: Optional[str] = None,
    category: Optional[Category] = None,
    difficulty: Optional[Difficulty] = None,
) -> list[Recipe]:
    q = (q or "").strip()
    if not q and category is None and difficulty is None:
        raise HTTPException(status_code=400, detail="At least one search criterion is required")

    query = db.query(Recipe)
    clause = access_policy.visible_recipes_clause(user)
    if clause is not None:
        query = query.filter(clause)
    if category is not None:
        query = query.filter(Recipe.category == category)
    if difficulty is not None:
        query = query.filter(Recipe.difficulty == difficulty)

    recipes = query.order_by(Recipe.created_at.desc(), Recipe.recipe_id).all()
    if q:
        recipes = search.rank(recipes, q)
    return recipes


def get_visible_recipe(db: Session, user: User, recipe_id: str) -> Recipe:
    recipe = get_recipe_or_404(db, recipe_id)
    access_policy.ensure(
        access_policy.can_view_recipe(user, recipe),
        "You do not have permission to view this recipe",
    )
    return recipe


def update_recipe(db: Session, user: User, recipe_id: str, payload: dict[str, Any]) -> Recipe:
    """Replace a recipe's editable fields. The author never changes."""
    recipe = get_recipe_or_404(db, recipe_id)
    access_policy.ensure(
        access_policy.can_modify_recipe(user, recipe),
        "You do not have permission to update this recipe",
    )
    fields = _recipe_fields(payload)
    if fields["group_id"] != recipe.group_id:
        _check_group_link(db, user, fields["group_id"])

    for field, value in fields.items():
        setattr(recipe, field, value)

    if not access_policy.is_system_admin(user):
        moderation_service.reset_for_review(recipe)

    db.commit()
    db.refresh(recipe)
    logger.info("Updated recipe %s by user %s", recipe_id, user.user_id)
    return recipe


def delete_recipe(db: Session, user: User, recipe_id: str) -> None:
    recipe = get_recipe_or_404(db, recipe_id)
    access_policy.ensure(
        access_policy.can_modify_recipe(user, recipe),
        "You do not have permission to delete this recipe",
    )
    db.delete(recipe)
    db.commit()
    logger.info("Deleted recipe %s by user %s", recipe_id, user.user_id)


# ── Admin catalogue ────────────────────────────────────────────────

def list_all_recipes(db: Session) -> list[Recipe]:
    return db.query(Recipe).order_by(Recipe.created_at.desc()).all()
