from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kinship.models.family import FamilyRelationship, utcnow
from kinship.services.records import coerce_relationship_type, pick_fields

logger = logging.getLogger(__name__)

RELATIONSHIP_FIELDS = (
    "from_member_id",
    "to_member_id",
    "relationship_type",
    "relationship_details",
    "start_date",
    "end_date",
)


def _coerce(fields: dict[str, Any]) -> dict[str, Any]:
    if "relationship_type" in fields:
        fields["relationship_type"] = coerce_relationship_type(fields["relationship_type"])
    return fields


class RelationshipStore:
    """Persistence of directed relationship edges."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_all(self) -> list[FamilyRelationship]:
        query = select(FamilyRelationship).order_by(
            FamilyRelationship.from_member_id.asc(),
            FamilyRelationship.to_member_id.asc(),
        )
        return list(self.db.execute(query).scalars().all())

    def get_by_id(self, relationship_id: str) -> FamilyRelationship | None:
        return self.db.get(FamilyRelationship, relationship_id)

    def get_by_member_id(self, member_id: str) -> list[FamilyRelationship]:
        query = (
            select(FamilyRelationship)
            .where(
                or_(
                    FamilyRelationship.from_member_id == member_id,
                    FamilyRelationship.to_member_id == member_id,
                )
            )
            .order_by(FamilyRelationship.relationship_type.asc(), FamilyRelationship.created_at.asc())
        )
        return list(self.db.execute(query).scalars().all())

    def create(self, data: dict[str, Any]) -> FamilyRelationship:
        fields = _coerce(pick_fields(data, RELATIONSHIP_FIELDS))
        now = utcnow()
        relationship = FamilyRelationship(**fields, created_at=now, updated_at=now)
        self.db.add(relationship)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(relationship)
        logger.info(
            "created %s relationship %s (%s -> %s)",
            relationship.relationship_type.value,
            relationship.id,
            relationship.from_member_id,
            relationship.to_member_id,
        )
        return relationship

    def update(self, relationship_id: str, data: dict[str, Any]) -> FamilyRelationship | None:
        relationship = self.get_by_id(relationship_id)
        if relationship is None:
            return None

        fields = _coerce(pick_fields(data, RELATIONSHIP_FIELDS))
        if not fields:
            return relationship

        for key, value in fields.items():
            setattr(relationship, key, value)
        relationship.updated_at = utcnow()
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(relationship)
        logger.info("updated relationship %s fields=%s", relationship_id, sorted(fields))
        return relationship

    def delete(self, relationship_id: str) -> bool:
        try:
            result = self.db.execute(delete(FamilyRelationship).where(FamilyRelationship.id == relationship_id))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return (result.rowcount or 0) > 0
