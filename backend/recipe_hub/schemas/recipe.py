"""Pydantic schemas for Recipes."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import Field

from recipe_hub.models.recipe import Category, Difficulty
from recipe_hub.schemas.base import CamelModel
from recipe_hub.schemas.moderation import ModerationFields
from recipe_hub.schemas.user import UserBrief


class Ingredient(CamelModel):
    name: str = Field(..., min_length=1)
    quantity: str = Field(..., min_length=1)
    unit: Optional[str] = ""


class Step(CamelModel):
    number: int
    description: str = Field(..., min_length=1)


class RecipeIn(CamelModel):
    """Body for create and full update."""

    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=500)
    ingredients: list[Ingredient] = Field(..., min_length=1)
    steps: list[Step] = Field(..., min_length=1)
    prep_time: int = Field(..., ge=1)
    cook_time: int = Field(..., ge=0)
    servings: int = Field(..., ge=1)
    difficulty: Difficulty
    category: Category
    tags: list[str] = []
    image: Optional[str] = None
    group: Optional[str] = None  # group id
    is_private: bool = False


class GroupBrief(CamelModel):
    group_id: str
    name: str


class RecipeOut(ModerationFields):
    recipe_id: str
    title: str
    description: str
    ingredients: list[Ingredient]
    steps: list[Step]
    prep_time: int
    cook_time: int
    servings: int
    difficulty: Difficulty
    category: Category
    tags: list[str] = []
    image: str
    author_id: str
    author: Optional[UserBrief] = None
    group_id: Optional[str] = None
    group: Optional[GroupBrief] = None
    is_private: bool
    rating: float
    rating_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class RecipeEnvelope(CamelModel):
    message: str
    recipe: RecipeOut


class RecipePage(CamelModel):
    recipes: list[RecipeOut]
    total_pages: int
    current_page: int
    total_recipes: int
