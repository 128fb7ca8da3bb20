"""Create companies and invoices tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `companies` and `invoices` with the invoice → company foreign key.
How:   invoices.comp_code references companies.code with ON DELETE CASCADE,
       so deleting a company removes its invoices in the database.

Rollback: downgrade() drops both tables (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create both tables, then the comp_code lookup index."""
    op.create_table(
        "companies",
        sa.Column("code", sa.String(100), nullable=False, comment="Slug of the company name, URL-safe"),
        sa.Column("name", sa.String(255), nullable=False, comment="Display name"),
        sa.Column("description", sa.Text(), nullable=True, comment="Free text description"),
        sa.PrimaryKeyConstraint("code"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comp_code", sa.String(100), nullable=False, comment="Code of the billed company"),
        sa.Column("amt", sa.Float(), nullable=False, comment="Invoice amount"),
        sa.Column(
            "paid",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Whether the invoice has been paid",
        ),
        sa.Column(
            "add_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
            comment="When the invoice was created (UTC)",
        ),
        sa.Column(
            "paid_date",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When the invoice last became paid; NULL while unpaid",
        ),
        sa.ForeignKeyConstraint(["comp_code"], ["companies.code"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Company detail lists invoice ids by comp_code
    op.create_index("idx_invoices_comp_code", "invoices", ["comp_code"])


def downgrade() -> None:
    """Drop invoices first; it references companies."""
    op.drop_index("idx_invoices_comp_code", table_name="invoices")
    op.drop_table("invoices")
    op.drop_table("companies")
