"""
BizTime Backend — Company SQLAlchemy Model
===========================================

What:  ORM model representing the `companies` table.
Who:   Used by CompanyService and InvoiceService (join target) and by Alembic.

Table Design Rationale:
    - code: Short slug primary key (e.g. "acme-corp"); doubles as the URL segment
    - name: Display name, unique so two companies can't share a slug source
    - description: Free text, nullable
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from biztime.database import Base

if TYPE_CHECKING:
    from biztime.models.invoice import Invoice


class Company(Base):
    """
    A company that invoices are billed to.

    Lifecycle:
        1. Created by POST /companies; code derived from the name
        2. Name/description edited by PUT; code never changes
        3. Deleted by DELETE; the store cascades to its invoices
    """

    __tablename__ = "companies"

    code: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Slug of the company name, URL-safe",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Display name",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Free text description",
    )

    # passive_deletes: leave ON DELETE CASCADE to the database
    invoices: Mapped[List["Invoice"]] = relationship(
        back_populates="company",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Company(code='{self.code}', name='{self.name}')>"
