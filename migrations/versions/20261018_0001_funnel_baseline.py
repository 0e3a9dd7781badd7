"""funnel baseline: stages, transition rules, leads, positions, visits, proposals

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "funnel_stages",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("stage_order", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stage_order", name="uq_funnel_stages_order"),
    )

    op.create_table(
        "funnel_transition_rules",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("origin_stage_id", sa.String(length=36), nullable=False),
        sa.Column("destination_stage_id", sa.String(length=36), nullable=False),
        sa.Column("allowed", sa.Boolean(), nullable=False),
        sa.Column("justification", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["origin_stage_id"], ["funnel_stages.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["destination_stage_id"], ["funnel_stages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("origin_stage_id", "destination_stage_id", name="uq_transition_rules_pair"),
    )

    op.create_table(
        "leads",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=False),
        sa.Column("source", sa.String(length=100), nullable=False),
        sa.Column("temperature", sa.String(length=10), nullable=False),
        sa.Column("budget_min", sa.Float(), nullable=True),
        sa.Column("budget_max", sa.Float(), nullable=True),
        sa.Column("interest", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("finalized", sa.Boolean(), nullable=False),
        sa.Column("finalized_at", sa.DateTime(), nullable=True),
        sa.Column("last_contact_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_leads_finalized", "leads", ["finalized"])

    op.create_table(
        "lead_funnel_positions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("lead_id", sa.String(length=36), nullable=False),
        sa.Column("stage_id", sa.String(length=36), nullable=False),
        sa.Column("entered_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["lead_id"], ["leads.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["stage_id"], ["funnel_stages.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lead_id", name="uq_lead_funnel_positions_lead"),
    )
    op.create_index("idx_lead_funnel_positions_stage", "lead_funnel_positions", ["stage_id"])

    op.create_table(
        "visits",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("lead_id", sa.String(length=36), nullable=False),
        sa.Column("property_ref", sa.String(length=100), nullable=False),
        sa.Column("agent_id", sa.String(length=36), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("visit_type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["lead_id"], ["leads.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_visits_lead", "visits", ["lead_id"])
    op.create_index("idx_visits_scheduled_at", "visits", ["scheduled_at"])

    op.create_table(
        "proposals",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=40), nullable=False),
        sa.Column("lead_id", sa.String(length=36), nullable=False),
        sa.Column("property_ref", sa.String(length=100), nullable=False),
        sa.Column("agent_id", sa.String(length=36), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("down_payment", sa.Float(), nullable=True),
        sa.Column("installments", sa.Integer(), nullable=True),
        sa.Column("uses_fgts", sa.Boolean(), nullable=False),
        sa.Column("special_conditions", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("valid_until", sa.Date(), nullable=False),
        sa.Column("archived", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["lead_id"], ["leads.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("idx_proposals_lead", "proposals", ["lead_id"])
    op.create_index("idx_proposals_status", "proposals", ["status"])

    op.create_table(
        "lead_interactions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("lead_id", sa.String(length=36), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["lead_id"], ["leads.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_lead_interactions_lead", "lead_interactions", ["lead_id"])

    op.create_table(
        "system_activities",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("kind", sa.String(length=40), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("lead_id", sa.String(length=36), nullable=True),
        sa.Column("proposal_id", sa.String(length=36), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["lead_id"], ["leads.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["proposal_id"], ["proposals.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_system_activities_kind", "system_activities", ["kind"])
    op.create_index("idx_system_activities_lead", "system_activities", ["lead_id"])


def downgrade() -> None:
    op.drop_index("idx_system_activities_lead", table_name="system_activities")
    op.drop_index("idx_system_activities_kind", table_name="system_activities")
    op.drop_table("system_activities")
    op.drop_index("idx_lead_interactions_lead", table_name="lead_interactions")
    op.drop_table("lead_interactions")
    op.drop_index("idx_proposals_status", table_name="proposals")
    op.drop_index("idx_proposals_lead", table_name="proposals")
    op.drop_table("proposals")
    op.drop_index("idx_visits_scheduled_at", table_name="visits")
    op.drop_index("idx_visits_lead", table_name="visits")
    op.drop_table("visits")
    op.drop_index("idx_lead_funnel_positions_stage", table_name="lead_funnel_positions")
    op.drop_table("lead_funnel_positions")
    op.drop_index("idx_leads_finalized", table_name="leads")
    op.drop_table("leads")
    op.drop_table("funnel_transition_rules")
    op.drop_table("funnel_stages")
