"""Group aggregate: the group row plus its memberships and pending join requests."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, Index, Enum as SAEnum, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from recipe_hub.database import Base
from recipe_hub.models.moderation import ModeratedMixin


class GroupRole(str, enum.Enum):
    owner = "owner"
    admin = "admin"
    member = "member"


class Group(ModeratedMixin, Base):
    __tablename__ = "groups"

    group_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), nullable=False)
    description = Column(String(300), nullable=False)
    image = Column(String(500), nullable=False, default="/img/default-group.jpg")
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    invite_code = Column(String(8), nullable=False, unique=True, index=True)
    is_private = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    creator = relationship("User", foreign_keys=[created_by])
    members = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.joined_at",
    )
    pending_requests = relationship(
        "GroupJoinRequest",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupJoinRequest.requested_at",
    )

    # Every write to the group row checks and bumps the version
    __mapper_args__ = {"version_id_col": version}


class GroupMember(Base):
    __tablename__ = "group_members"
    __table_args__ = (
        Index(
            "uq_group_members_single_owner",
            "group_id",
            unique=True,
            sqlite_where=text("role = 'owner'"),
            postgresql_where=text("role = 'owner'"),
        ),
    )

    group_id = Column(String(36), ForeignKey("groups.group_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    role = Column(SAEnum(GroupRole), nullable=False, default=GroupRole.member)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    group = relationship("Group", back_populates="members")
    user = relationship("User", back_populates="memberships")


class GroupJoinRequest(Base):
    __tablename__ = "group_join_requests"

    group_id = Column(String(36), ForeignKey("groups.group_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    requested_at = Column(DateTime(timezone=True), server_default=func.now())

    group = relationship("Group", back_populates="pending_requests")
    user = relationship("User", back_populates="join_requests")
