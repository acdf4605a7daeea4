"""Initial workload tracker schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

This migration creates:
1. employees with the reporting tree edges
2. effort_mappings
3. tasks / live_issues with their components and worklogs
4. projects and project_change_logs
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL"), nullable=True),
        sa.Column("updated_by", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL"), nullable=True),
    ]


def _create_work_item_tables(
    item_table: str,
    component_table: str,
    worklog_table: str,
    item_fk: str,
    component_fk: str,
) -> None:
    """Create one work item kind: items, their components and worklogs."""
    op.create_table(
        item_table,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("status", sa.String(32), nullable=False, server_default="Pending"),
        sa.Column("priority", sa.String(32)),
        sa.Column("workload_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("due_date", sa.Date()),
        sa.Column("assigned_employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("manager_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL")),
        sa.Column("version", sa.Integer(), nullable=False),
        *_audit_columns(),
    )
    op.create_index(f"ix_{item_table}_id", item_table, ["id"])
    op.create_index(f"ix_{item_table}_assigned_employee_id", item_table, ["assigned_employee_id"])
    op.create_index(f"ix_{item_table}_manager_id", item_table, ["manager_id"])

    op.create_table(
        component_table,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(item_fk, sa.Integer(), sa.ForeignKey(f"{item_table}.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(255), nullable=False),
        sa.Column("complexity", sa.String(64), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("hours_per_item", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(32), nullable=False, server_default="Pending"),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("file_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("file_type", sa.String(64)),
        sa.Column("version", sa.Integer(), nullable=False),
        *_audit_columns(),
    )
    op.create_index(f"ix_{component_table}_id", component_table, ["id"])
    op.create_index(f"ix_{component_table}_{item_fk}", component_table, [item_fk])

    op.create_table(
        worklog_table,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            component_fk,
            sa.Integer(),
            sa.ForeignKey(f"{component_table}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("hours_logged", sa.Float(), nullable=False),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("is_auto", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
    )
    op.create_index(f"ix_{worklog_table}_id", worklog_table, ["id"])
    op.create_index(f"ix_{worklog_table}_{component_fk}", worklog_table, [component_fk])
    op.create_index(f"ix_{worklog_table}_employee_id", worklog_table, ["employee_id"])


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("role", sa.String(32), nullable=False, server_default="employee"),
        sa.Column("reports_to", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL")),
        sa.Column("manager_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL")),
        sa.Column("application_name", sa.String(255)),
        sa.Column("designation", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_employees_id", "employees", ["id"])
    op.create_index("ix_employees_reports_to", "employees", ["reports_to"])
    op.create_index("ix_employees_manager_id", "employees", ["manager_id"])

    op.create_table(
        "effort_mappings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", sa.String(255), nullable=False),
        sa.Column("values", sa.JSON(), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_effort_mappings_id", "effort_mappings", ["id"])
    op.create_index("ix_effort_mappings_type", "effort_mappings", ["type"], unique=True)

    _create_work_item_tables("tasks", "task_components", "task_worklogs", "task_id", "task_component_id")
    _create_work_item_tables(
        "live_issues",
        "live_issue_components",
        "live_issue_worklogs",
        "live_issue_id",
        "live_issue_component_id",
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("manager_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL")),
        sa.Column("priority", sa.String(32)),
        sa.Column("stage", sa.String(64), nullable=False, server_default="BRS_Discussion"),
        sa.Column("start_date", sa.Date()),
        sa.Column("planned_end_date", sa.Date()),
        sa.Column("sprint_start_date", sa.Date()),
        sa.Column("sprint_end_date", sa.Date()),
        sa.Column("uat_release_date", sa.Date()),
        sa.Column("go_live_date", sa.Date()),
        sa.Column("on_track_status", sa.String(32), nullable=False, server_default="On Track"),
        sa.Column("man_days", sa.Integer()),
        sa.Column("project_cost", sa.Float()),
        sa.Column("remarks", sa.Text()),
        *_audit_columns(),
    )
    op.create_index("ix_projects_id", "projects", ["id"])
    op.create_index("ix_projects_manager_id", "projects", ["manager_id"])

    op.create_table(
        "project_change_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "project_id",
            sa.Integer(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("changed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("actor_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL")),
        sa.Column("field", sa.String(64), nullable=False),
        sa.Column("old_value", sa.Text()),
        sa.Column("new_value", sa.Text()),
    )
    op.create_index("ix_project_change_logs_id", "project_change_logs", ["id"])
    op.create_index("ix_project_change_logs_project_id", "project_change_logs", ["project_id"])


def downgrade() -> None:
    op.drop_table("project_change_logs")
    op.drop_table("projects")
    for table in (
        "live_issue_worklogs",
        "live_issue_components",
        "live_issues",
        "task_worklogs",
        "task_components",
        "tasks",
    ):
        op.drop_table(table)
    op.drop_table("effort_mappings")
    op.drop_table("employees")
