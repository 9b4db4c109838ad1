from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from kinship.core.config import settings
from kinship.core.db import get_db
from kinship.schemas.family import FamilyMemberResponse, FamilyRelationshipResponse, FamilyTreeResponse
from kinship.services.errors import InvalidDegreeError
from kinship.services.lookup import FamilyTree, RelativeLookup

router = APIRouter(prefix="/v1/family/tree", tags=["family"])


def _tree_response(tree: FamilyTree) -> FamilyTreeResponse:
    return FamilyTreeResponse(
        members=[FamilyMemberResponse.model_validate(item, from_attributes=True) for item in tree.members],
        relationships=[
            FamilyRelationshipResponse.model_validate(item, from_attributes=True) for item in tree.relationships
        ],
    )


@router.get("", response_model=FamilyTreeResponse)
def get_family_tree(db: Session = Depends(get_db)):
    return _tree_response(RelativeLookup(db).get_family_tree())


@router.get("/member/{member_id}", response_model=FamilyTreeResponse)
def get_member_family_tree(
    member_id: str,
    degree: int = Query(default=settings.default_tree_degree),
    db: Session = Depends(get_db),
):
    try:
        tree = RelativeLookup(db).get_member_family_tree(member_id, degree)
    except InvalidDegreeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if tree is None:
        raise HTTPException(status_code=404, detail="family member not found")
    return _tree_response(tree)
