from kinship.routers import audit, family_members, family_relationships, family_tree, health

__all__ = [
    "health",
    "family_members",
    "family_relationships",
    "family_tree",
    "audit",
]
