"""
BizTime Backend — Invoice SQLAlchemy Model
===========================================

What:  ORM model representing the `invoices` table.
Who:   Used by InvoiceService for CRUD operations and by Alembic.

Table Design Rationale:
    - id: Integer surrogate key, assigned by the database
    - comp_code: Foreign key to companies.code, ON DELETE CASCADE
    - amt: Monetary amount
    - paid / paid_date: Paid flag and when it last became true (see
      InvoiceService.update_invoice for the transition rules)
    - add_date: UTC with timezone, assigned at insert
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, false, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from biztime.database import Base

if TYPE_CHECKING:
    from biztime.models.company import Company


def utcnow() -> datetime:
    """Timezone-aware current time; every timestamp we write is UTC."""
    return datetime.now(timezone.utc)


class Invoice(Base):
    """
    An amount billed to one company.

    State:
        Unpaid (paid=false, paid_date=NULL) ⇄ Paid (paid=true, paid_date set)

    Query Patterns:
        - List: SELECT id, comp_code ... ORDER BY id
        - Company detail: SELECT id WHERE comp_code = :code
          → Uses idx_invoices_comp_code
        - Detail: invoices JOIN companies ON comp_code = code WHERE id = :id
    """

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    comp_code: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("companies.code", ondelete="CASCADE"),
        nullable=False,
        comment="Code of the billed company",
    )

    amt: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Invoice amount",
    )

    paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Whether the invoice has been paid",
    )

    # Python-side default so INSERT ... RETURNING hands back a real timestamp
    # on every backend; server_default covers rows written outside the ORM
    add_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.current_timestamp(),
        comment="When the invoice was created (UTC)",
    )

    paid_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="When the invoice last became paid; NULL while unpaid",
    )

    company: Mapped["Company"] = relationship(back_populates="invoices")

    __table_args__ = (
        Index("idx_invoices_comp_code", "comp_code"),
    )

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, comp_code='{self.comp_code}', "
            f"amt={self.amt}, paid={self.paid})>"
        )
