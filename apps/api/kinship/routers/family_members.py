from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from kinship.core.auth import AuthContext, actor_of, get_auth_context
from kinship.core.db import get_db
from kinship.models.family import FamilyMember
from kinship.schemas.family import (
    FamilyMemberCreate,
    FamilyMemberListResponse,
    FamilyMemberResponse,
    FamilyMemberUpdate,
    FamilyMemberWithRelationsResponse,
    RelatedMemberResponse,
)
from kinship.services.audit import record_audit_event
from kinship.services.lookup import RelativeLookup
from kinship.services.members import MemberStore

router = APIRouter(prefix="/v1/family/members", tags=["family"])

TARGET_TYPE = "family_member"
# Explicit nulls are only honoured for optional columns.
NON_NULLABLE_FIELDS = frozenset({"first_name", "last_name", "gender", "is_alive"})


def _full_name(member: FamilyMember) -> str:
    return f"{member.first_name} {member.last_name}"


def _list_response(members: list[FamilyMember]) -> FamilyMemberListResponse:
    return FamilyMemberListResponse(
        items=[FamilyMemberResponse.model_validate(item, from_attributes=True) for item in members]
    )


@router.get("", response_model=FamilyMemberListResponse)
def list_members(db: Session = Depends(get_db)):
    return _list_response(MemberStore(db).get_all())


@router.get("/search", response_model=FamilyMemberListResponse)
def search_members(query: str = Query(default=""), db: Session = Depends(get_db)):
    term = query.strip()
    if not term:
        raise HTTPException(status_code=400, detail="search term required")
    return _list_response(MemberStore(db).search(term))


@router.get("/profile/{profile_id}", response_model=FamilyMemberListResponse)
def list_members_for_profile(profile_id: str, db: Session = Depends(get_db)):
    return _list_response(MemberStore(db).get_by_profile_id(profile_id))


@router.get("/{member_id}", response_model=FamilyMemberResponse)
def get_member(member_id: str, db: Session = Depends(get_db)):
    member = MemberStore(db).get_by_id(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="family member not found")
    return FamilyMemberResponse.model_validate(member, from_attributes=True)


@router.get("/{member_id}/relations", response_model=FamilyMemberWithRelationsResponse)
def get_member_with_relations(member_id: str, db: Session = Depends(get_db)):
    result = RelativeLookup(db).get_member_with_relations(member_id)
    if result is None:
        raise HTTPException(status_code=404, detail="family member not found")

    def as_response(items: list[FamilyMember]) -> list[FamilyMemberResponse]:
        return [FamilyMemberResponse.model_validate(item, from_attributes=True) for item in items]

    base = FamilyMemberResponse.model_validate(result.member, from_attributes=True)
    return FamilyMemberWithRelationsResponse(
        **base.model_dump(),
        parents=as_response(result.parents),
        children=as_response(result.children),
        spouses=as_response(result.spouses),
        siblings=as_response(result.siblings),
        others=[
            RelatedMemberResponse(
                member=FamilyMemberResponse.model_validate(item.member, from_attributes=True),
                relationship_type=item.relationship_type,
                relationship_details=item.relationship_details,
            )
            for item in result.others
        ],
    )


@router.post("", response_model=FamilyMemberResponse, status_code=201)
def create_member(
    payload: FamilyMemberCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    member = MemberStore(db).create(payload.model_dump())
    response = FamilyMemberResponse.model_validate(member, from_attributes=True)
    record_audit_event(
        db,
        actor=actor_of(ctx),
        action="create",
        target_type=TARGET_TYPE,
        target_id=response.id,
        details={"name": _full_name(member)},
    )
    return response


@router.patch("/{member_id}", response_model=FamilyMemberResponse)
def update_member(
    member_id: str,
    payload: FamilyMemberUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key not in NON_NULLABLE_FIELDS
    }
    member = MemberStore(db).update(member_id, changes)
    if member is None:
        raise HTTPException(status_code=404, detail="family member not found")

    response = FamilyMemberResponse.model_validate(member, from_attributes=True)
    # An empty change set is a no-op in the store and is not audited.
    if changes:
        record_audit_event(
            db,
            actor=actor_of(ctx),
            action="update",
            target_type=TARGET_TYPE,
            target_id=member_id,
            details={"name": _full_name(member), "fields": sorted(changes)},
        )
    return response


@router.delete("/{member_id}", status_code=204)
def delete_member(
    member_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext | None = Depends(get_auth_context),
):
    store = MemberStore(db)
    member = store.get_by_id(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="family member not found")

    name = _full_name(member)
    if not store.delete(member_id):
        raise HTTPException(status_code=404, detail="family member not found")

    record_audit_event(
        db,
        actor=actor_of(ctx),
        action="delete",
        target_type=TARGET_TYPE,
        target_id=member_id,
        details={"name": name},
    )
