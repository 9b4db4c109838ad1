from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kinship.models.family import FamilyRelationship, RelationshipTypeEnum, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationshipPair:
    forward: FamilyRelationship
    reverse: FamilyRelationship


class RelationshipBuilder:
    """
    Records conceptually symmetric relationships as two directed edges.

    Both rows are flushed inside the session's transaction and committed
    together; if either insert fails nothing is kept.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def add_parent_child(self, parent_id: str, child_id: str, details: str | None = None) -> RelationshipPair:
        return self._add_pair(
            parent_id,
            child_id,
            forward_type=RelationshipTypeEnum.child,
            reverse_type=RelationshipTypeEnum.parent,
            details=details,
        )

    def add_sibling(self, member_a_id: str, member_b_id: str, details: str | None = None) -> RelationshipPair:
        return self._add_pair(
            member_a_id,
            member_b_id,
            forward_type=RelationshipTypeEnum.sibling,
            reverse_type=RelationshipTypeEnum.sibling,
            details=details,
        )

    def add_spouse(
        self,
        member_a_id: str,
        member_b_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        details: str | None = None,
    ) -> RelationshipPair:
        return self._add_pair(
            member_a_id,
            member_b_id,
            forward_type=RelationshipTypeEnum.spouse,
            reverse_type=RelationshipTypeEnum.spouse,
            details=details,
            start_date=start_date,
            end_date=end_date,
        )

    def _add_pair(
        self,
        from_id: str,
        to_id: str,
        *,
        forward_type: RelationshipTypeEnum,
        reverse_type: RelationshipTypeEnum,
        details: str | None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> RelationshipPair:
        now = utcnow()
        forward = FamilyRelationship(
            from_member_id=from_id,
            to_member_id=to_id,
            relationship_type=forward_type,
            relationship_details=details,
            start_date=start_date,
            end_date=end_date,
            created_at=now,
            updated_at=now,
        )
        reverse = FamilyRelationship(
            from_member_id=to_id,
            to_member_id=from_id,
            relationship_type=reverse_type,
            relationship_details=details,
            start_date=start_date,
            end_date=end_date,
            created_at=now,
            updated_at=now,
        )

        try:
            self.db.add(forward)
            self.db.flush()
            self.db.add(reverse)
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                "rolled back %s/%s pair between %s and %s",
                forward_type.value,
                reverse_type.value,
                from_id,
                to_id,
            )
            raise

        self.db.refresh(forward)
        self.db.refresh(reverse)
        logger.info("created %s/%s pair %s + %s", forward_type.value, reverse_type.value, forward.id, reverse.id)
        return RelationshipPair(forward=forward, reverse=reverse)
