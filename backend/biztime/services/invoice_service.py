"""
BizTime Backend — Invoice Service
==================================

What:  Business logic for the /invoices resource.
Why:   Keeps SQL, row-count branching and the paid-date rule out of routes.
How:   Parameterized statements through run_query(); zero rows become
       NotFoundError.
Who:   Called by routes/invoices.py.

Paid State Machine:
    ┌──────────┐   paid=true (stamp paid_date)   ┌──────────┐
    │  Unpaid  │ ──────────────────────────────▶ │   Paid   │
    │ date=NULL│ ◀────────────────────────────── │ date=set │
    └──────────┘   paid=false (clear paid_date)  └──────────┘
    Paid→Paid and Unpaid→Unpaid leave paid_date alone.

Consistency:
    update_invoice reads the current paid_date and writes the new one in the
    same request transaction, with the read taking a row lock (FOR UPDATE)
    on backends that support it. A concurrent update or delete waits.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import run_query
from biztime.exceptions import NotFoundError
from biztime.models import Company, Invoice
from biztime.models.invoice import utcnow
from biztime.schemas.common import StatusResponse
from biztime.schemas.invoice import (
    InvoiceCompany,
    InvoiceCreate,
    InvoiceDetail,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceOut,
    InvoiceResponse,
    InvoiceSummary,
    InvoiceUpdate,
)

logger = logging.getLogger(__name__)

# Every column of the flat invoice shape, in response order
_INVOICE_COLUMNS = (
    Invoice.id,
    Invoice.comp_code,
    Invoice.amt,
    Invoice.paid,
    Invoice.add_date,
    Invoice.paid_date,
)

# invoices.id is a 32-bit serial; ids outside 1..2^31-1 can never match a row
_MAX_INVOICE_ID = 2**31 - 1


def check_invoice_id(invoice_id: int) -> None:
    """Raise NotFoundError for ids the id column cannot hold."""
    if not 1 <= invoice_id <= _MAX_INVOICE_ID:
        raise NotFoundError(resource="invoice", resource_id=invoice_id)


def resolve_paid_date(
    current_paid_date: Optional[datetime],
    paid: bool,
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Decide the paid_date to store alongside a new `paid` value.

    - Not yet stamped and now paid → stamp with `now`
    - Now unpaid → NULL
    - Otherwise (already paid, staying paid) → keep the existing stamp
    """
    if current_paid_date is None and paid:
        return now or utcnow()
    if not paid:
        return None
    return current_paid_date


class InvoiceService:
    """
    Business logic layer for invoice operations.

    Responsibilities:
        - list_invoices(): id and comp_code of every invoice, by id
        - get_invoice(): one invoice joined with its company
        - require_invoice(): existence check, ahead of body validation on PUT
        - create_invoice(): insert for an existing company
        - update_invoice(): amount and paid flag, with the paid_date rule
        - delete_invoice(): remove
    """

    async def list_invoices(self, db: AsyncSession) -> InvoiceListResponse:
        result = await run_query(
            db,
            select(Invoice.id, Invoice.comp_code).order_by(Invoice.id),
            "list invoices",
        )
        return InvoiceListResponse(
            invoices=[InvoiceSummary(id=row.id, comp_code=row.comp_code) for row in result.all()]
        )

    async def get_invoice(self, db: AsyncSession, invoice_id: int) -> InvoiceDetailResponse:
        """
        Retrieve one invoice with its company nested in place of comp_code.

        Query plan:
            SELECT i.id, i.amt, i.paid, i.add_date, i.paid_date,
                   c.code, c.name, c.description
            FROM invoices i JOIN companies c ON i.comp_code = c.code
            WHERE i.id = :id

        Raises:
            NotFoundError: No invoice has this id (→ 404)
        """
        check_invoice_id(invoice_id)
        result = await run_query(
            db,
            select(
                Invoice.id,
                Invoice.amt,
                Invoice.paid,
                Invoice.add_date,
                Invoice.paid_date,
                Company.code,
                Company.name,
                Company.description,
            )
            .join(Company, Invoice.comp_code == Company.code)
            .where(Invoice.id == invoice_id),
            "fetch invoice",
        )
        row = result.mappings().one_or_none()
        if row is None:
            raise NotFoundError(resource="invoice", resource_id=invoice_id)

        return InvoiceDetailResponse(
            invoice=InvoiceDetail(
                id=row["id"],
                company=InvoiceCompany(
                    code=row["code"],
                    name=row["name"],
                    description=row["description"],
                ),
                amt=row["amt"],
                paid=row["paid"],
                add_date=row["add_date"],
                paid_date=row["paid_date"],
            )
        )

    async def require_invoice(self, db: AsyncSession, invoice_id: int) -> None:
        """Raise NotFoundError unless an invoice with this id exists."""
        check_invoice_id(invoice_id)
        result = await run_query(
            db,
            select(Invoice.id).where(Invoice.id == invoice_id),
            "check invoice exists",
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="invoice", resource_id=invoice_id)

    async def create_invoice(self, db: AsyncSession, payload: InvoiceCreate) -> InvoiceResponse:
        """
        Insert an unpaid invoice for an existing company.

        The company is looked up first so a bad comp_code answers 404 with
        the code in the message, instead of a bare foreign key violation.

        Raises:
            NotFoundError: comp_code names no company (→ 404)
            ConflictError: Company deleted between lookup and insert (→ 409)
        """
        company_result = await run_query(
            db,
            select(Company.code).where(Company.code == payload.comp_code),
            "fetch invoice company",
        )
        if company_result.scalar_one_or_none() is None:
            raise NotFoundError(resource="company", resource_id=payload.comp_code)

        result = await run_query(
            db,
            insert(Invoice)
            .values(comp_code=payload.comp_code, amt=payload.amt)
            .returning(*_INVOICE_COLUMNS),
            "create invoice",
        )
        invoice = result.mappings().one()
        logger.info("Invoice created: %s for %s", invoice["id"], payload.comp_code)
        return InvoiceResponse(invoice=InvoiceOut(**invoice))

    async def update_invoice(
        self, db: AsyncSession, invoice_id: int, payload: InvoiceUpdate
    ) -> InvoiceResponse:
        """
        Update amount and paid flag, moving paid_date per the state machine.

        Steps:
            1. Lock and read the current paid_date (404 if absent)
            2. resolve_paid_date() picks the new value
            3. UPDATE ... RETURNING the full row

        Raises:
            NotFoundError: No invoice has this id (→ 404)
        """
        check_invoice_id(invoice_id)
        current_result = await run_query(
            db,
            select(Invoice.paid_date).where(Invoice.id == invoice_id).with_for_update(),
            "fetch invoice paid date",
        )
        current = current_result.one_or_none()
        if current is None:
            raise NotFoundError(resource="invoice", resource_id=invoice_id)

        paid_date = resolve_paid_date(current.paid_date, payload.paid)

        result = await run_query(
            db,
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(amt=payload.amt, paid=payload.paid, paid_date=paid_date)
            .returning(*_INVOICE_COLUMNS)
            .execution_options(synchronize_session=False),
            "update invoice",
        )
        invoice = result.mappings().one_or_none()
        if invoice is None:
            raise NotFoundError(resource="invoice", resource_id=invoice_id)

        logger.info(
            "Invoice updated: %s (paid=%s, paid_date=%s)",
            invoice_id,
            payload.paid,
            paid_date,
        )
        return InvoiceResponse(invoice=InvoiceOut(**invoice))

    async def delete_invoice(self, db: AsyncSession, invoice_id: int) -> StatusResponse:
        check_invoice_id(invoice_id)
        result = await run_query(
            db,
            delete(Invoice)
            .where(Invoice.id == invoice_id)
            .returning(Invoice.id)
            .execution_options(synchronize_session=False),
            "delete invoice",
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="invoice", resource_id=invoice_id)

        logger.info("Invoice deleted: %s", invoice_id)
        return StatusResponse(status="deleted")


# ── Singleton Instance ────────────────────────────────────────────────────
invoice_service = InvoiceService()
