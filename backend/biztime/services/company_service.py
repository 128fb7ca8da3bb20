"""
BizTime Backend — Company Service
==================================

What:  Business logic for the /companies resource.
Why:   Keeps SQL and row-count branching out of the route handlers.
How:   One parameterized statement per operation (two for the detail view),
       sent through run_query(); zero rows become NotFoundError.
Who:   Called by routes/companies.py.

Design Decision:
    CompanyService is stateless. The AsyncSession is passed into every call
    by the route (FastAPI dependency), never looked up from module state.
"""

import logging
import re

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import run_query
from biztime.exceptions import NotFoundError, ValidationError
from biztime.models import Company, Invoice
from biztime.schemas.company import (
    CompanyCreate,
    CompanyDetail,
    CompanyDetailResponse,
    CompanyListResponse,
    CompanyOut,
    CompanyResponse,
    CompanySummary,
    CompanyUpdate,
)
from biztime.schemas.common import StatusResponse

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str, max_len: int = 100) -> str:
    """
    Lower-case `value` and collapse every run of non-alphanumerics to "-".

    "Acme Corp" → "acme-corp", "  I.B.M.  " → "i-b-m".
    Returns "" when nothing alphanumeric is left; callers reject that.
    """
    slug = _NON_ALNUM.sub("-", value.strip().lower()).strip("-")
    return slug[:max_len].rstrip("-")


class CompanyService:
    """
    Business logic layer for company operations.

    Responsibilities:
        - list_companies(): code and name of every company, by name
        - get_company(): one company plus its invoice ids
        - create_company(): slug the name, insert
        - update_company(): edit name/description
        - delete_company(): remove (invoices cascade in the database)
    """

    async def list_companies(self, db: AsyncSession) -> CompanyListResponse:
        result = await run_query(
            db,
            select(Company.code, Company.name).order_by(Company.name),
            "list companies",
        )
        return CompanyListResponse(
            companies=[CompanySummary(code=row.code, name=row.name) for row in result.all()]
        )

    async def get_company(self, db: AsyncSession, code: str) -> CompanyDetailResponse:
        """
        Retrieve a single company with the ids of its invoices.

        Query plan:
            SELECT code, name, description FROM companies WHERE code = :code
            SELECT id FROM invoices WHERE comp_code = :code ORDER BY id
            → second query uses idx_invoices_comp_code

        Raises:
            NotFoundError: No company has this code (→ 404)
        """
        company_result = await run_query(
            db,
            select(Company.code, Company.name, Company.description).where(Company.code == code),
            "fetch company",
        )
        company = company_result.mappings().one_or_none()
        if company is None:
            raise NotFoundError(resource="company", resource_id=code)

        invoice_result = await run_query(
            db,
            select(Invoice.id).where(Invoice.comp_code == code).order_by(Invoice.id),
            "fetch company invoices",
        )
        invoice_ids = list(invoice_result.scalars().all())

        return CompanyDetailResponse(
            company=CompanyDetail(**company, invoices=invoice_ids)
        )

    async def create_company(self, db: AsyncSession, payload: CompanyCreate) -> CompanyResponse:
        """
        Insert a company whose code is the slug of its name.

        The body has already been validated by the time we get here, so the
        slug is always derived from a present, non-blank name.

        Raises:
            ValidationError: The name has no characters a slug can keep (→ 400)
            ConflictError: Code or name already taken (→ 409)
        """
        code = slugify(payload.name)
        if not code:
            raise ValidationError(
                message=f"Cannot derive a company code from name '{payload.name}'",
                field="name",
            )

        result = await run_query(
            db,
            insert(Company)
            .values(code=code, name=payload.name, description=payload.description)
            .returning(Company.code, Company.name, Company.description),
            "create company",
        )
        company = result.mappings().one()
        logger.info("Company created: %s", code)
        return CompanyResponse(company=CompanyOut(**company))

    async def update_company(
        self, db: AsyncSession, code: str, payload: CompanyUpdate
    ) -> CompanyResponse:
        """
        Update name and description; the code never changes.

        Raises:
            NotFoundError: No company has this code (→ 404)
        """
        result = await run_query(
            db,
            update(Company)
            .where(Company.code == code)
            .values(name=payload.name, description=payload.description)
            .returning(Company.code, Company.name, Company.description)
            .execution_options(synchronize_session=False),
            "update company",
        )
        company = result.mappings().one_or_none()
        if company is None:
            raise NotFoundError(resource="company", resource_id=code)

        logger.info("Company updated: %s", code)
        return CompanyResponse(company=CompanyOut(**company))

    async def delete_company(self, db: AsyncSession, code: str) -> StatusResponse:
        result = await run_query(
            db,
            delete(Company)
            .where(Company.code == code)
            .returning(Company.code)
            .execution_options(synchronize_session=False),
            "delete company",
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="company", resource_id=code)

        logger.info("Company deleted: %s", code)
        return StatusResponse(status="deleted")


# ── Singleton Instance ────────────────────────────────────────────────────
company_service = CompanyService()
