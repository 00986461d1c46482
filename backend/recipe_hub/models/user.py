"""User ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from recipe_hub.database import Base


class UserRole(str, enum.Enum):
    user = "user"
    admin = "admin"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.user)
    bio = Column(String(200), nullable=False, default="")
    profile_picture = Column(String(500), nullable=False, default="/img/default-profile.png")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    memberships = relationship("GroupMember", back_populates="user", cascade="all, delete-orphan")
    join_requests = relationship("GroupJoinRequest", back_populates="user", cascade="all, delete-orphan")

    @property
    def groups(self) -> list[str]:
        """Ids of the groups this user belongs to."""
        return [m.group_id for m in self.memberships]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
