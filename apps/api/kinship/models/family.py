import uuid
from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from kinship.models.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class GenderEnum(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class RelationshipTypeEnum(str, Enum):
    parent = "parent"
    child = "child"
    spouse = "spouse"
    sibling = "sibling"
    other = "other"


gender_sql_enum = SqlEnum(
    GenderEnum,
    name="genderenum",
    values_callable=lambda enum_cls: [item.value for item in enum_cls],
)

relationship_type_sql_enum = SqlEnum(
    RelationshipTypeEnum,
    name="relationshiptypeenum",
    values_callable=lambda enum_cls: [item.value for item in enum_cls],
)


class FamilyMember(Base):
    __tablename__ = "family_members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    profile_id: Mapped[str | None] = mapped_column(String(36), index=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    maiden_name: Mapped[str | None] = mapped_column(String(255))
    gender: Mapped[GenderEnum] = mapped_column(gender_sql_enum, nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date)
    birth_place: Mapped[str | None] = mapped_column(String(255))
    death_date: Mapped[date | None] = mapped_column(Date)
    death_place: Mapped[str | None] = mapped_column(String(255))
    bio: Mapped[str | None] = mapped_column(Text)
    photo_url: Mapped[str | None] = mapped_column(String(1024))
    is_alive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("ix_family_members_name", "last_name", "first_name"),)


class FamilyRelationship(Base):
    """Directed edge: (from=X, to=Y, type=T) reads "Y is X's T"."""

    __tablename__ = "family_relationships"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    from_member_id: Mapped[str] = mapped_column(ForeignKey("family_members.id"), nullable=False)
    to_member_id: Mapped[str] = mapped_column(ForeignKey("family_members.id"), nullable=False)
    relationship_type: Mapped[RelationshipTypeEnum] = mapped_column(relationship_type_sql_enum, nullable=False)
    relationship_details: Mapped[str | None] = mapped_column(Text)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_family_relationships_from", "from_member_id", "relationship_type"),
        Index("ix_family_relationships_to", "to_member_id", "relationship_type"),
    )
