"""Initial schema: six source stores and the combined view

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _identity() -> list[sa.Column[object]]:
    return [sa.Column("id", sa.Uuid(), nullable=False)]


def _provenance() -> list[sa.Column[object]]:
    return [
        sa.Column("imported_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("import_batch", sa.String(), nullable=False),
    ]


def _access() -> list[sa.Column[object]]:
    return [
        sa.Column("access_group", sa.String(), nullable=False),
        sa.Column("account", sa.String(), nullable=False),
        sa.Column("application_name", sa.String(), nullable=False, server_default="N/A"),
        sa.Column("application_suite", sa.String(), nullable=False, server_default="N/A"),
        sa.Column("environment_tier", sa.String(), nullable=False, server_default="N/A"),
        sa.Column("criticality", sa.String(), nullable=False, server_default="N/A"),
    ]


def upgrade() -> None:
    op.create_table(
        "access_record",
        *_identity(),
        *_access(),
        *_provenance(),
        sa.PrimaryKeyConstraint("id", name="pk_access_record"),
        sa.UniqueConstraint(
            "access_group", "account", name="uq_access_record_access_group_account"
        ),
    )
    op.create_index("ix_access_record_application_name", "access_record", ["application_name"])

    op.create_table(
        "employment_record",
        *_identity(),
        sa.Column("account", sa.String(), nullable=False),
        sa.Column("department", sa.String(), nullable=True),
        sa.Column("job_role", sa.String(), nullable=True),
        sa.Column("division", sa.String(), nullable=True),
        sa.Column("leave_date", sa.Date(), nullable=True),
        sa.Column("department_simple", sa.String(), nullable=True),
        *_provenance(),
        sa.PrimaryKeyConstraint("id", name="pk_employment_record"),
        sa.UniqueConstraint("account", name="uq_employment_record_account"),
    )
    op.create_index("ix_employment_record_department", "employment_record", ["department"])

    op.create_table(
        "packaging_record",
        *_identity(),
        sa.Column("application_name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("readiness_date", sa.Date(), nullable=True),
        *_provenance(),
        sa.PrimaryKeyConstraint("id", name="pk_packaging_record"),
        sa.UniqueConstraint("application_name", name="uq_packaging_record_application_name"),
    )

    op.create_table(
        "testing_record",
        *_identity(),
        sa.Column("application_name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("result", sa.String(), nullable=False),
        sa.Column("test_date", sa.Date(), nullable=True),
        sa.Column("plan_date", sa.Date(), nullable=True),
        sa.Column("comments", sa.String(), nullable=True),
        *_provenance(),
        sa.PrimaryKeyConstraint("id", name="pk_testing_record"),
        sa.UniqueConstraint("application_name", name="uq_testing_record_application_name"),
    )

    op.create_table(
        "migration_plan_record",
        *_identity(),
        sa.Column("application_name", sa.String(), nullable=False),
        sa.Column("application_new", sa.String(), nullable=True),
        sa.Column("suite_new", sa.String(), nullable=True),
        sa.Column("target_application", sa.String(), nullable=True),
        sa.Column("scope_division", sa.String(), nullable=True),
        sa.Column("platform", sa.String(), nullable=True),
        sa.Column("readiness", sa.String(), nullable=True),
        *_provenance(),
        sa.PrimaryKeyConstraint("id", name="pk_migration_plan_record"),
        sa.UniqueConstraint(
            "application_name", name="uq_migration_plan_record_application_name"
        ),
    )

    op.create_table(
        "cluster_record",
        *_identity(),
        sa.Column("department", sa.String(), nullable=False),
        sa.Column("department_simple", sa.String(), nullable=True),
        sa.Column("domain", sa.String(), nullable=True),
        sa.Column("migration_cluster", sa.String(), nullable=True),
        sa.Column("cluster_readiness", sa.String(), nullable=True),
        *_provenance(),
        sa.PrimaryKeyConstraint("id", name="pk_cluster_record"),
        sa.UniqueConstraint("department", name="uq_cluster_record_department"),
    )

    op.create_table(
        "combined_record",
        *_identity(),
        *_access(),
        sa.Column("department", sa.String(), nullable=True),
        sa.Column("job_role", sa.String(), nullable=True),
        sa.Column("division", sa.String(), nullable=True),
        sa.Column("leave_date", sa.Date(), nullable=True),
        sa.Column("package_status", sa.String(), nullable=True),
        sa.Column("package_readiness_date", sa.Date(), nullable=True),
        sa.Column("test_status", sa.String(), nullable=True),
        sa.Column("test_date", sa.Date(), nullable=True),
        sa.Column("test_result", sa.String(), nullable=True),
        sa.Column("test_plan_date", sa.Date(), nullable=True),
        sa.Column("test_comments", sa.String(), nullable=True),
        sa.Column("application_new", sa.String(), nullable=True),
        sa.Column("suite_new", sa.String(), nullable=True),
        sa.Column("target_application", sa.String(), nullable=True),
        sa.Column("scope_division", sa.String(), nullable=True),
        sa.Column("migration_platform", sa.String(), nullable=True),
        sa.Column("migration_readiness", sa.String(), nullable=True),
        sa.Column("department_simple", sa.String(), nullable=True),
        sa.Column("domain", sa.String(), nullable=True),
        sa.Column("migration_cluster", sa.String(), nullable=True),
        sa.Column("cluster_readiness", sa.String(), nullable=True),
        *_provenance(),
        sa.PrimaryKeyConstraint("id", name="pk_combined_record"),
        sa.UniqueConstraint(
            "access_group", "account", name="uq_combined_record_access_group_account"
        ),
    )
    op.create_index(
        "ix_combined_record_application_name", "combined_record", ["application_name"]
    )
    op.create_index("ix_combined_record_department", "combined_record", ["department"])


def downgrade() -> None:
    op.drop_index("ix_combined_record_department", table_name="combined_record")
    op.drop_index("ix_combined_record_application_name", table_name="combined_record")
    op.drop_table("combined_record")
    op.drop_table("cluster_record")
    op.drop_table("migration_plan_record")
    op.drop_table("testing_record")
    op.drop_table("packaging_record")
    op.drop_index("ix_employment_record_department", table_name="employment_record")
    op.drop_table("employment_record")
    op.drop_index("ix_access_record_application_name", table_name="access_record")
    op.drop_table("access_record")
