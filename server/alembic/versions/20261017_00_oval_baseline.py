"""OVAL baseline schema (fetch meta + definition tree)

Revision ID: 20261017_00
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_00"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "fetch_meta",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("file_name"),
    )
    op.create_table(
        "roots",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("family", sa.String(64), nullable=False),
        sa.Column("os_version", sa.String(64), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "definitions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("root_id", sa.Integer(), nullable=False),
        sa.Column("definition_id", sa.String(255)),
        sa.Column("title", sa.Text()),
        sa.Column("description", sa.Text()),
        sa.ForeignKeyConstraint(["root_id"], ["roots.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "packages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("definition_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("version", sa.String(255)),
        sa.Column("not_fixed_yet", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["definition_id"], ["definitions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "references",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("definition_id", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(64)),
        sa.Column("ref_id", sa.String(255)),
        sa.Column("ref_url", sa.Text()),
        sa.ForeignKeyConstraint(["definition_id"], ["definitions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "advisories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("definition_id", sa.Integer(), nullable=False),
        sa.Column("severity", sa.String(64)),
        sa.Column("issued", sa.DateTime(timezone=True)),
        sa.Column("updated", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(["definition_id"], ["definitions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "cves",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("advisory_id", sa.Integer(), nullable=False),
        sa.Column("cve_id", sa.String(64), nullable=False),
        sa.Column("cvss2", sa.String(255)),
        sa.Column("cvss3", sa.String(255)),
        sa.Column("cwe", sa.String(255)),
        sa.Column("impact", sa.String(64)),
        sa.Column("href", sa.Text()),
        sa.Column("public", sa.String(64)),
        sa.ForeignKeyConstraint(["advisory_id"], ["advisories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "bugzillas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("advisory_id", sa.Integer(), nullable=False),
        sa.Column("bugzilla_id", sa.String(64)),
        sa.Column("url", sa.Text()),
        sa.Column("title", sa.Text()),
        sa.ForeignKeyConstraint(["advisory_id"], ["advisories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "cpes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("advisory_id", sa.Integer(), nullable=False),
        sa.Column("cpe", sa.String(255), nullable=False),
        sa.ForeignKeyConstraint(["advisory_id"], ["advisories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "debians",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("definition_id", sa.Integer(), nullable=False),
        sa.Column("cve_id", sa.String(64)),
        sa.Column("more_info", sa.Text()),
        sa.Column("date", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(["definition_id"], ["definitions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_definition_root_id", "definitions", ["root_id"], unique=False)
    op.create_index("idx_packages_definition_id", "packages", ["definition_id"], unique=False)
    op.create_index("idx_packages_name", "packages", ["name"], unique=False)
    op.create_index("idx_reference_definition_id", "references", ["definition_id"], unique=False)
    op.create_index("idx_advisories_definition_id", "advisories", ["definition_id"], unique=False)
    op.create_index("idx_cves_advisory_id", "cves", ["advisory_id"], unique=False)
    op.create_index("idx_bugzillas_advisory_id", "bugzillas", ["advisory_id"], unique=False)
    op.create_index("idx_cpes_advisory_id", "cpes", ["advisory_id"], unique=False)
    op.create_index("idx_debian_definition_id", "debians", ["definition_id"], unique=False)
    op.create_index("idx_debian_cve_id", "debians", ["cve_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_debian_cve_id", table_name="debians")
    op.drop_index("idx_debian_definition_id", table_name="debians")
    op.drop_index("idx_cpes_advisory_id", table_name="cpes")
    op.drop_index("idx_bugzillas_advisory_id", table_name="bugzillas")
    op.drop_index("idx_cves_advisory_id", table_name="cves")
    op.drop_index("idx_advisories_definition_id", table_name="advisories")
    op.drop_index("idx_reference_definition_id", table_name="references")
    op.drop_index("idx_packages_name", table_name="packages")
    op.drop_index("idx_packages_definition_id", table_name="packages")
    op.drop_index("idx_definition_root_id", table_name="definitions")
    for table in ("debians", "cpes", "bugzillas", "cves", "advisories", "references", "packages", "definitions", "roots", "fetch_meta"):
        op.drop_table(table)
