"""
BizTime Backend — Company Route Handlers
=========================================

What:  /companies list, detail, create, update, delete.
How:   Extracts path/body parameters, delegates to CompanyService, returns JSON.
       Not-found and validation failures are raised by the service and
       formatted by the global exception handlers in main.py.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from biztime.database import get_db_session
from biztime.schemas.common import ErrorResponse, StatusResponse
from biztime.schemas.company import (
    CompanyCreate,
    CompanyDetailResponse,
    CompanyListResponse,
    CompanyResponse,
    CompanyUpdate,
)
from biztime.services.company_service import company_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])

_NOT_FOUND = {404: {"description": "Company not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=CompanyListResponse,
    summary="List companies",
    description="Returns code and name of every company, ordered by name.",
)
async def list_companies(db: AsyncSession = Depends(get_db_session)) -> CompanyListResponse:
    return await company_service.list_companies(db)


@router.get(
    "/{code}",
    response_model=CompanyDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a company with its invoice ids",
)
async def get_company(code: str, db: AsyncSession = Depends(get_db_session)) -> CompanyDetailResponse:
    return await company_service.get_company(db, code)


@router.post(
    "",
    status_code=201,
    response_model=CompanyResponse,
    responses={
        400: {"description": "Missing or unusable name", "model": ErrorResponse},
        409: {"description": "Company already exists", "model": ErrorResponse},
    },
    summary="Create a company",
    description="The company code is derived from the name (e.g. 'Acme Corp' → 'acme-corp').",
)
async def create_company(
    payload: CompanyCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CompanyResponse:
    return await company_service.create_company(db, payload)


@router.put(
    "/{code}",
    response_model=CompanyResponse,
    responses={
        **_NOT_FOUND,
        400: {"description": "Missing name", "model": ErrorResponse},
    },
    summary="Update a company's name and description",
)
async def update_company(
    code: str,
    payload: CompanyUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> CompanyResponse:
    return await company_service.update_company(db, code, payload)


@router.delete(
    "/{code}",
    response_model=StatusResponse,
    responses=_NOT_FOUND,
    summary="Delete a company and its invoices",
)
async def delete_company(code: str, db: AsyncSession = Depends(get_db_session)) -> StatusResponse:
    return await company_service.delete_company(db, code)
