from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from kinship.models.family import GenderEnum, RelationshipTypeEnum

RELATIONSHIP_TYPE_PATTERN = "^(parent|child|spouse|sibling|other)$"
GENDER_PATTERN = "^(male|female|other)$"


class FamilyMemberCreate(BaseModel):
    profile_id: str | None = None
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    maiden_name: str | None = Field(default=None, max_length=255)
    gender: str = Field(pattern=GENDER_PATTERN)
    birth_date: date | None = None
    birth_place: str | None = Field(default=None, max_length=255)
    death_date: date | None = None
    death_place: str | None = Field(default=None, max_length=255)
    bio: str | None = None
    photo_url: str | None = Field(default=None, max_length=1024)
    is_alive: bool = True


class FamilyMemberUpdate(BaseModel):
    profile_id: str | None = None
    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    maiden_name: str | None = Field(default=None, max_length=255)
    gender: str | None = Field(default=None, pattern=GENDER_PATTERN)
    birth_date: date | None = None
    birth_place: str | None = Field(default=None, max_length=255)
    death_date: date | None = None
    death_place: str | None = Field(default=None, max_length=255)
    bio: str | None = None
    photo_url: str | None = Field(default=None, max_length=1024)
    is_alive: bool | None = None


class FamilyMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    profile_id: str | None = None
    first_name: str
    last_name: str
    maiden_name: str | None = None
    gender: GenderEnum
    birth_date: date | None = None
    birth_place: str | None = None
    death_date: date | None = None
    death_place: str | None = None
    bio: str | None = None
    photo_url: str | None = None
    is_alive: bool
    created_at: datetime
    updated_at: datetime


class RelatedMemberResponse(BaseModel):
    member: FamilyMemberResponse
    relationship_type: RelationshipTypeEnum
    relationship_details: str | None = None


class FamilyMemberWithRelationsResponse(FamilyMemberResponse):
    parents: list[FamilyMemberResponse]
    children: list[FamilyMemberResponse]
    spouses: list[FamilyMemberResponse]
    siblings: list[FamilyMemberResponse]
    others: list[RelatedMemberResponse]


class FamilyRelationshipCreate(BaseModel):
    from_member_id: str = Field(min_length=1)
    to_member_id: str = Field(min_length=1)
    relationship_type: str = Field(pattern=RELATIONSHIP_TYPE_PATTERN)
    relationship_details: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class FamilyRelationshipUpdate(BaseModel):
    relationship_details: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class FamilyRelationshipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    from_member_id: str
    to_member_id: str
    relationship_type: RelationshipTypeEnum
    relationship_details: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    created_at: datetime
    updated_at: datetime


class ParentChildCreate(BaseModel):
    parent_id: str = Field(min_length=1)
    child_id: str = Field(min_length=1)
    relationship_details: str | None = None


class SiblingCreate(BaseModel):
    member_a_id: str = Field(min_length=1)
    member_b_id: str = Field(min_length=1)
    relationship_details: str | None = None


class SpouseCreate(BaseModel):
    member_a_id: str = Field(min_length=1)
    member_b_id: str = Field(min_length=1)
    start_date: date | None = None
    end_date: date | None = None
    relationship_details: str | None = None


class RelationshipPairResponse(BaseModel):
    forward: FamilyRelationshipResponse
    reverse: FamilyRelationshipResponse


class FamilyTreeResponse(BaseModel):
    members: list[FamilyMemberResponse]
    relationships: list[FamilyRelationshipResponse]


class FamilyMemberListResponse(BaseModel):
    items: list[FamilyMemberResponse]


class FamilyRelationshipListResponse(BaseModel):
    items: list[FamilyRelationshipResponse]
