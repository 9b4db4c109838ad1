from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kinship.core.auth import AuthContext, actor_of, get_auth_context
from kinship.core.db import get_db
from kinship.models.family import FamilyMember, FamilyRelationship, RelationshipTypeEnum
from kinship.schemas.family import (
    FamilyRelationshipCreate,
    FamilyRelationshipListResponse,
    FamilyRelationshipResponse,
    FamilyRelationshipUpdate,
    ParentChildCreate,
    RelationshipPairResponse,
    SiblingCreate,
    SpouseCreate,
)
from kinship.services.audit import record_audit_event
from kinship.services.builder import RelationshipBuilder, RelationshipPair
from kinship.services.members import MemberStore
from kinship.services.relationships import RelationshipStore

router = APIRouter(prefix="/v1/family/relationships", tags=["family"])

TARGET_TYPE = "family_relationship"


def _require_members(db: Session, *member_ids: str) -> list[FamilyMember]:
    store = MemberStore(db)
    members = [store.get_by_id(member_id) for member_id in member_ids]
    if any(member is None for member in members):
        raise HTTPException(status_code=404, detail="one or more family members not found")
    return members


def _describe(from_member: FamilyMember, to_member: FamilyMember, relationship_type: str) -> str:
    return (
        f"{from_member.first_name} {from_member.last_name} -> "
        f"{to_member.first_name} {to_member.last_name} ({relationship_type})"
    )


def _pair_response(pair: RelationshipPair) -> RelationshipPairResponse:
    return RelationshipPairResponse(
        forward=FamilyRelationshipResponse.model_validate(pair.forward, from_attributes=True),
        reverse=FamilyRelationshipResponse.model_validate(pair.reverse, from_attributes=True),
    )


def _audit_created(db: Session, ctx: AuthContext | None, relationship_ids: list[str], description: str) -> None:
    record_audit_event(
        db,
        actor=actor_of(ctx),
        action="create",
        target_type=TARGET_TYPE,
        target_id=relationship_ids[0],
        details={"relationship": description, "relationship_ids": relationship_ids},
    )


@router.get("", response_model=FamilyRelationshipListResponse)
def list_relationships(db: Session = Depends(get_db)):
    items = RelationshipStore(db).get_all()
    return FamilyRelationshipListResponse(
        items=[FamilyRelationshipResponse.model_validate(item, from_attributes=True) for item in items]
    )


@router.get("/member/{member_id}", response_model=FamilyRelationshipListResponse)
def list_member_relationships(member_id: str, db: Session = Depends(get_db)):
    items = RelationshipStore(db).get_by_member_id(member_id)
    return FamilyRelationshipListResponse(
        items=[FamilyRelationshipResponse.model_validate(item, from_attributes=True) for item in items]
    )


@router.get("/{relationship_id}", response_model=FamilyRelationshipResponse)
def get_relationship(relationship_id: str, db: Session = Depends(get_db)):
    relationship = RelationshipStore(db).get_by_id(relationship_id)
    if relationship is None:
        raise HTTPException(status_code=404, detail="family relationship not found")
    return FamilyRelationshipResponse.model_validate(relationship, from_attributes=True)


@router.post("", response_model=FamilyRelationshipResponse, status_code=201)
def create_relationship(
    payload: FamilyRelationshipCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    from_member, to_member = _require_members(db, payload.from_member_id, payload.to_member_id)
    description = _describe(from_member, to_member, payload.relationship_type)
    builder = RelationshipBuilder(db)

    try:
        relationship_type = RelationshipTypeEnum(payload.relationship_type)
        # Symmetric types are always stored as mirrored pairs; the edge that
        # matches the requested direction is returned.
        if relationship_type is RelationshipTypeEnum.parent:
            pair = builder.add_parent_child(payload.to_member_id, payload.from_member_id, payload.relationship_details)
            created, ids = pair.reverse, [pair.reverse.id, pair.forward.id]
        elif relationship_type is RelationshipTypeEnum.child:
            pair = builder.add_parent_child(payload.from_member_id, payload.to_member_id, payload.relationship_details)
            created, ids = pair.forward, [pair.forward.id, pair.reverse.id]
        elif relationship_type is RelationshipTypeEnum.sibling:
            pair = builder.add_sibling(payload.from_member_id, payload.to_member_id, payload.relationship_details)
            created, ids = pair.forward, [pair.forward.id, pair.reverse.id]
        elif relationship_type is RelationshipTypeEnum.spouse:
            pair = builder.add_spouse(
                payload.from_member_id,
                payload.to_member_id,
                start_date=payload.start_date,
                end_date=payload.end_date,
                details=payload.relationship_details,
            )
            created, ids = pair.forward, [pair.forward.id, pair.reverse.id]
        else:
            created = RelationshipStore(db).create(payload.model_dump())
            ids = [created.id]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except IntegrityError:
        raise HTTPException(status_code=409, detail="relationship violates referential integrity") from None

    response = FamilyRelationshipResponse.model_validate(created, from_attributes=True)
    _audit_created(db, ctx, ids, description)
    return response


@router.post("/parent-child", response_model=RelationshipPairResponse, status_code=201)
def create_parent_child(
    payload: ParentChildCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    parent, child = _require_members(db, payload.parent_id, payload.child_id)
    try:
        pair = RelationshipBuilder(db).add_parent_child(payload.parent_id, payload.child_id, payload.relationship_details)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="relationship violates referential integrity") from None

    response = _pair_response(pair)
    _audit_created(db, ctx, [response.forward.id, response.reverse.id], _describe(parent, child, "child"))
    return response


@router.post("/sibling", response_model=RelationshipPairResponse, status_code=201)
def create_sibling(
    payload: SiblingCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    member_a, member_b = _require_members(db, payload.member_a_id, payload.member_b_id)
    try:
        pair = RelationshipBuilder(db).add_sibling(payload.member_a_id, payload.member_b_id, payload.relationship_details)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="relationship violates referential integrity") from None

    response = _pair_response(pair)
    _audit_created(db, ctx, [response.forward.id, response.reverse.id], _describe(member_a, member_b, "sibling"))
    return response


@router.post("/spouse", response_model=RelationshipPairResponse, status_code=201)
def create_spouse(
    payload: SpouseCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    member_a, member_b = _require_members(db, payload.member_a_id, payload.member_b_id)
    try:
        pair = RelationshipBuilder(db).add_spouse(
            payload.member_a_id,
            payload.member_b_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            details=payload.relationship_details,
        )
    except IntegrityError:
        raise HTTPException(status_code=409, detail="relationship violates referential integrity") from None

    response = _pair_response(pair)
    _audit_created(db, ctx, [response.forward.id, response.reverse.id], _describe(member_a, member_b, "spouse"))
    return response


@router.patch("/{relationship_id}", response_model=FamilyRelationshipResponse)
def update_relationship(
    relationship_id: str,
    payload: FamilyRelationshipUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    changes = payload.model_dump(exclude_unset=True)
    relationship = RelationshipStore(db).update(relationship_id, changes)
    if relationship is None:
        raise HTTPException(status_code=404, detail="family relationship not found")

    response = FamilyRelationshipResponse.model_validate(relationship, from_attributes=True)
    if changes:
        record_audit_event(
            db,
            actor=actor_of(ctx),
            action="update",
            target_type=TARGET_TYPE,
            target_id=relationship_id,
            details={"relationship_type": response.relationship_type.value, "fields": sorted(changes)},
        )
    return response


@router.delete("/{relationship_id}", status_code=204)
def delete_relationship(
    relationship_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    store = RelationshipStore(db)
    relationship: FamilyRelationship | None = store.get_by_id(relationship_id)
    if relationship is None:
        raise HTTPException(status_code=404, detail="family relationship not found")

    relationship_type = relationship.relationship_type.value
    if not store.delete(relationship_id):
        raise HTTPException(status_code=404, detail="family relationship not found")

    record_audit_event(
        db,
        actor=actor_of(ctx),
        action="delete",
        target_type=TARGET_TYPE,
        target_id=relationship_id,
        details={"relationship_type": relationship_type},
    )
