"""family members, relationship edges, audit log

Revision ID: 0001_family_graph
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_family_graph"
down_revision = None
branch_labels = None
depends_on = None

gender_enum = sa.Enum("male", "female", "other", name="genderenum")
relationship_type_enum = sa.Enum("parent", "child", "spouse", "sibling", "other", name="relationshiptypeenum")


def upgrade() -> None:
    op.create_table(
        "family_members",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("profile_id", sa.String(length=36), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("maiden_name", sa.String(length=255), nullable=True),
        sa.Column("gender", gender_enum, nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("birth_place", sa.String(length=255), nullable=True),
        sa.Column("death_date", sa.Date(), nullable=True),
        sa.Column("death_place", sa.String(length=255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.String(length=1024), nullable=True),
        sa.Column("is_alive", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_family_members_profile_id", "family_members", ["profile_id"])
    op.create_index("ix_family_members_name", "family_members", ["last_name", "first_name"])

    op.create_table(
        "family_relationships",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("from_member_id", sa.String(length=36), sa.ForeignKey("family_members.id"), nullable=False),
        sa.Column("to_member_id", sa.String(length=36), sa.ForeignKey("family_members.id"), nullable=False),
        sa.Column("relationship_type", relationship_type_enum, nullable=False),
        sa.Column("relationship_details", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_family_relationships_from", "family_relationships", ["from_member_id", "relationship_type"])
    op.create_index("ix_family_relationships_to", "family_relationships", ["to_member_id", "relationship_type"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("actor", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("target_type", sa.String(length=64), nullable=False),
        sa.Column("target_id", sa.String(length=36), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_target_id", "audit_logs", ["target_id"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_created_at", table_name="audit_logs")
    op.drop_index("ix_audit_logs_target_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_family_relationships_to", table_name="family_relationships")
    op.drop_index("ix_family_relationships_from", table_name="family_relationships")
    op.drop_table("family_relationships")
    op.drop_index("ix_family_members_name", table_name="family_members")
    op.drop_index("ix_family_members_profile_id", table_name="family_members")
    op.drop_table("family_members")
    relationship_type_enum.drop(op.get_bind(), checkfirst=True)
    gender_enum.drop(op.get_bind(), checkfirst=True)
