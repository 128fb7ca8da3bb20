"""
BizTime Backend — Invoice Route Handlers
=========================================

What:  /invoices list, detail, create, update, delete.
How:   Extracts path/body parameters, delegates to InvoiceService, returns JSON.

Path parameter:
    invoice_id is typed `int`; a non-numeric id fails FastAPI validation and
    is answered 400 by the RequestValidationError handler in main.py.

PUT precedence:
    existing_invoice runs as a dependency, before FastAPI validates the
    body, so PUT on a missing invoice is 404 whatever the body holds.
"""

import logging

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import get_db_session
from biztime.schemas.common import ErrorResponse, StatusResponse
from biztime.schemas.invoice import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceUpdate,
)
from biztime.services.invoice_service import invoice_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Invoices"])

_NOT_FOUND = {404: {"description": "Invoice not found", "model": ErrorResponse}}


async def existing_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> int:
    await invoice_service.require_invoice(db, invoice_id)
    return invoice_id


@router.get(
    "",
    response_model=InvoiceListResponse,
    summary="List invoices",
    description="Returns id and comp_code of every invoice, ordered by id.",
)
async def list_invoices(db: AsyncSession = Depends(get_db_session)) -> InvoiceListResponse:
    return await invoice_service.list_invoices(db)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceDetailResponse,
    responses=_NOT_FOUND,
    summary="Get an invoice with its company",
)
async def get_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceDetailResponse:
    return await invoice_service.get_invoice(db, invoice_id)


@router.post(
    "",
    response_model=InvoiceResponse,
    responses={
        400: {"description": "Missing comp_code or amt", "model": ErrorResponse},
        404: {"description": "Company not found", "model": ErrorResponse},
    },
    summary="Create an invoice",
    description="New invoices start unpaid; add_date is assigned by the server.",
)
async def create_invoice(
    payload: InvoiceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceResponse:
    return await invoice_service.create_invoice(db, payload)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        **_NOT_FOUND,
        400: {"description": "Missing amt or paid", "model": ErrorResponse},
    },
    summary="Update an invoice's amount and paid status",
    description=(
        "Paying an unpaid invoice stamps paid_date with the current time; "
        "un-paying it clears paid_date."
    ),
)
async def update_invoice(
    invoice_id: int = Depends(existing_invoice),
    payload: InvoiceUpdate = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceResponse:
    return await invoice_service.update_invoice(db, invoice_id, payload)


@router.delete(
    "/{invoice_id}",
    response_model=StatusResponse,
    responses=_NOT_FOUND,
    summary="Delete an invoice",
)
async def delete_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> StatusResponse:
    return await invoice_service.delete_invoice(db, invoice_id)
