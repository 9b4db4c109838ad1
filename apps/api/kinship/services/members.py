from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kinship.models.family import FamilyMember, FamilyRelationship, GenderEnum, utcnow
from kinship.services.records import MEMBER_NAME_ORDER, pick_fields

logger = logging.getLogger(__name__)

MEMBER_FIELDS = (
    "profile_id",
    "first_name",
    "last_name",
    "maiden_name",
    "gender",
    "birth_date",
    "birth_place",
    "death_date",
    "death_place",
    "bio",
    "photo_url",
    "is_alive",
)

_SEARCH_COLUMNS = (
    FamilyMember.first_name,
    FamilyMember.last_name,
    FamilyMember.maiden_name,
    FamilyMember.birth_place,
    FamilyMember.death_place,
    FamilyMember.bio,
)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _coerce(fields: dict[str, Any]) -> dict[str, Any]:
    if fields.get("gender") is not None:
        fields["gender"] = GenderEnum(fields["gender"])
    return fields


class MemberStore:
    """Persistence of family-member nodes."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_all(self) -> list[FamilyMember]:
        return list(self.db.execute(select(FamilyMember).order_by(*MEMBER_NAME_ORDER)).scalars().all())

    def get_by_id(self, member_id: str) -> FamilyMember | None:
        return self.db.get(FamilyMember, member_id)

    def get_by_profile_id(self, profile_id: str) -> list[FamilyMember]:
        query = select(FamilyMember).where(FamilyMember.profile_id == profile_id).order_by(*MEMBER_NAME_ORDER)
        return list(self.db.execute(query).scalars().all())

    def search(self, term: str) -> list[FamilyMember]:
        pattern = f"%{_escape_like(term)}%"
        query = (
            select(FamilyMember)
            .where(or_(*(column.ilike(pattern, escape="\\") for column in _SEARCH_COLUMNS)))
            .order_by(*MEMBER_NAME_ORDER)
        )
        return list(self.db.execute(query).scalars().all())

    def create(self, data: dict[str, Any]) -> FamilyMember:
        fields = _coerce(pick_fields(data, MEMBER_FIELDS))
        fields.setdefault("is_alive", True)
        now = utcnow()
        member = FamilyMember(**fields, created_at=now, updated_at=now)
        self.db.add(member)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(member)
        logger.info("created family member %s", member.id)
        return member

    def update(self, member_id: str, data: dict[str, Any]) -> FamilyMember | None:
        member = self.get_by_id(member_id)
        if member is None:
            return None

        fields = _coerce(pick_fields(data, MEMBER_FIELDS))
        if not fields:
            # Nothing supplied: leave the row (and updated_at) untouched.
            return member

        for key, value in fields.items():
            setattr(member, key, value)
        member.updated_at = utcnow()
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(member)
        logger.info("updated family member %s fields=%s", member_id, sorted(fields))
        return member

    def delete(self, member_id: str) -> bool:
        """
        Remove a member and every edge touching it in one transaction.

        Edges go first so the member row is never deleted out from under a
        foreign key; a failure at either step rolls back both.
        """
        try:
            edges = self.db.execute(
                delete(FamilyRelationship).where(
                    or_(
                        FamilyRelationship.from_member_id == member_id,
                        FamilyRelationship.to_member_id == member_id,
                    )
                )
            )
            result = self.db.execute(delete(FamilyMember).where(FamilyMember.id == member_id))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("rolled back deletion of family member %s", member_id)
            raise

        deleted = (result.rowcount or 0) > 0
        if deleted:
            logger.info("deleted family member %s and %d relationship(s)", member_id, edges.rowcount or 0)
        return deleted
