from __future__ import annotations

from typing import Any, Iterable

from kinship.models.family import FamilyMember, RelationshipTypeEnum
from kinship.services.errors import InvalidRelationshipTypeError

# Never taken from a caller payload; the stores own these columns.
STORE_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})

MEMBER_NAME_ORDER = (FamilyMember.last_name.asc(), FamilyMember.first_name.asc())


def pick_fields(data: dict[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """
    Filter a caller payload down to writable columns.

    Keys present with a None value are kept so callers can clear optional
    columns; unknown keys raise instead of being dropped.
    """
    allowed = frozenset(allowed)
    unknown = sorted(key for key in data if key not in allowed and key not in STORE_MANAGED_FIELDS)
    if unknown:
        raise ValueError(f"unknown field(s): {', '.join(unknown)}")
    return {key: value for key, value in data.items() if key in allowed}


def coerce_relationship_type(value: Any) -> RelationshipTypeEnum:
    if isinstance(value, RelationshipTypeEnum):
        return value
    try:
        return RelationshipTypeEnum(value)
    except ValueError:
        raise InvalidRelationshipTypeError(value) from None
