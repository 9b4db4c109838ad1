from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from kinship.core.config import settings
from kinship.models.family import FamilyMember, FamilyRelationship, RelationshipTypeEnum
from kinship.services.errors import InvalidDegreeError
from kinship.services.records import MEMBER_NAME_ORDER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelatedMember:
    member: FamilyMember
    relationship_type: RelationshipTypeEnum
    relationship_details: str | None


@dataclass
class MemberWithRelations:
    member: FamilyMember
    parents: list[FamilyMember] = field(default_factory=list)
    children: list[FamilyMember] = field(default_factory=list)
    spouses: list[FamilyMember] = field(default_factory=list)
    siblings: list[FamilyMember] = field(default_factory=list)
    others: list[RelatedMember] = field(default_factory=list)


@dataclass
class FamilyTree:
    members: list[FamilyMember]
    relationships: list[FamilyRelationship]


def _touching(member_id: str, outgoing: RelationshipTypeEnum, incoming: RelationshipTypeEnum):
    """
    Join condition for members related to ``member_id``.

    An edge (from=X, to=Y, type=T) reads "Y is X's T", so a parent of X is
    either the target of X's "parent" edge or the source of a "child" edge
    pointing at X.
    """
    edge = FamilyRelationship
    return or_(
        and_(
            edge.from_member_id == member_id,
            edge.to_member_id == FamilyMember.id,
            edge.relationship_type == outgoing,
        ),
        and_(
            edge.to_member_id == member_id,
            edge.from_member_id == FamilyMember.id,
            edge.relationship_type == incoming,
        ),
    )


class RelativeLookup:
    """Answers "who is related to X" at bucket and subgraph granularity."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_member_with_relations(self, member_id: str) -> MemberWithRelations | None:
        member = self.db.get(FamilyMember, member_id)
        if member is None:
            return None

        return MemberWithRelations(
            member=member,
            parents=self._related(member_id, RelationshipTypeEnum.parent, RelationshipTypeEnum.child),
            children=self._related(member_id, RelationshipTypeEnum.child, RelationshipTypeEnum.parent),
            spouses=self._related(member_id, RelationshipTypeEnum.spouse, RelationshipTypeEnum.spouse),
            siblings=self._related(member_id, RelationshipTypeEnum.sibling, RelationshipTypeEnum.sibling),
            others=self._others(member_id),
        )

    def get_family_tree(self) -> FamilyTree:
        members = self.db.execute(select(FamilyMember).order_by(*MEMBER_NAME_ORDER)).scalars().all()
        relationships = self.db.execute(select(FamilyRelationship)).scalars().all()
        return FamilyTree(members=list(members), relationships=list(relationships))

    def get_member_family_tree(self, member_id: str, degree: int | None = None) -> FamilyTree | None:
        if degree is None:
            degree = settings.default_tree_degree
        if degree < 1 or degree > settings.max_tree_degree:
            raise InvalidDegreeError(degree, settings.max_tree_degree)

        if self.db.get(FamilyMember, member_id) is None:
            return None

        collected = sorted(self._expand(member_id, degree))
        edge = FamilyRelationship
        members = self.db.execute(
            select(FamilyMember).where(FamilyMember.id.in_(collected)).order_by(*MEMBER_NAME_ORDER)
        ).scalars().all()
        relationships = self.db.execute(
            select(edge)
            .where(edge.from_member_id.in_(collected), edge.to_member_id.in_(collected))
            .order_by(edge.from_member_id.asc(), edge.to_member_id.asc())
        ).scalars().all()
        return FamilyTree(members=list(members), relationships=list(relationships))

    def _related(
        self,
        member_id: str,
        outgoing: RelationshipTypeEnum,
        incoming: RelationshipTypeEnum,
    ) -> list[FamilyMember]:
        query = (
            select(FamilyMember)
            .join(FamilyRelationship, _touching(member_id, outgoing, incoming))
            .where(FamilyMember.id != member_id)
            .distinct()
            .order_by(*MEMBER_NAME_ORDER)
        )
        return list(self.db.execute(query).scalars().all())

    def _others(self, member_id: str) -> list[RelatedMember]:
        edge = FamilyRelationship
        rows = self.db.execute(
            select(FamilyMember, edge.relationship_type, edge.relationship_details)
            .join(edge, _touching(member_id, RelationshipTypeEnum.other, RelationshipTypeEnum.other))
            .where(FamilyMember.id != member_id)
            .order_by(*MEMBER_NAME_ORDER)
        ).all()

        # A mirrored pair of "other" edges with the same details is one relation.
        seen: set[tuple[str, str | None]] = set()
        others: list[RelatedMember] = []
        for member, relationship_type, details in rows:
            key = (member.id, details)
            if key in seen:
                continue
            seen.add(key)
            others.append(RelatedMember(member=member, relationship_type=relationship_type, relationship_details=details))
        return others

    def _expand(self, origin_id: str, degree: int) -> set[str]:
        """Breadth-first walk over edges in either direction, up to ``degree`` hops."""
        visited = {origin_id}
        frontier = {origin_id}
        for hop in range(1, degree + 1):
            next_frontier = self._neighbours(frontier) - visited
            if not next_frontier:
                logger.debug("tree expansion from %s exhausted at hop %d", origin_id, hop)
                break
            visited |= next_frontier
            frontier = next_frontier
        return visited

    def _neighbours(self, frontier: set[str]) -> set[str]:
        edge = FamilyRelationship
        ids = sorted(frontier)
        rows = self.db.execute(
            select(edge.from_member_id, edge.to_member_id).where(
                or_(edge.from_member_id.in_(ids), edge.to_member_id.in_(ids))
            )
        ).all()
        found: set[str] = set()
        for from_id, to_id in rows:
            if from_id in frontier:
                found.add(to_id)
            if to_id in frontier:
                found.add(from_id)
        return found
