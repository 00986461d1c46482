"""Recipe ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Float, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from recipe_hub.database import Base
from recipe_hub.models.moderation import ModeratedMixin


class Difficulty(str, enum.Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"


class Category(str, enum.Enum):
    breakfast = "Breakfast"
    lunch = "Lunch"
    dinner = "Dinner"
    dessert = "Dessert"
    snack = "Snack"
    drink = "Drink"
    other = "Other"


class Recipe(ModeratedMixin, Base):
    __tablename__ = "recipes"

    recipe_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    ingredients = Column(JSON, nullable=False, default=list)  # [{name, quantity, unit}]
    steps = Column(JSON, nullable=False, default=list)        # [{number, description}]
    prep_time = Column(Integer, nullable=False)
    cook_time = Column(Integer, nullable=False)
    servings = Column(Integer, nullable=False)
    difficulty = Column(SAEnum(Difficulty), nullable=False)
    category = Column(SAEnum(Category), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    image = Column(String(500), nullable=False, default="/img/default-recipe.jpg")
    author_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    group_id = Column(String(36), ForeignKey("groups.group_id"), nullable=True, index=True)
    is_private = Column(Boolean, nullable=False, default=False)
    rating = Column(Float, nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User", foreign_keys=[author_id])
    group = relationship("Group", foreign_keys=[group_id])
