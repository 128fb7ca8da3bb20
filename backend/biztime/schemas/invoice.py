"""
BizTime Backend — Invoice Request/Response Schemas
===================================================

What:  Pydantic models defining the /invoices API contract.
Why:   Input presence checks, response projection, OpenAPI docs.

Two invoice shapes are returned:
    - Flat (InvoiceOut): carries comp_code; used by POST and PUT
    - Joined (InvoiceDetail): replaces comp_code with the nested company;
      used by GET /invoices/{id}
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class InvoiceCreate(BaseModel):
    """Body of POST /invoices."""
    comp_code: str = Field(min_length=1, description="Code of the company being billed")
    amt: float = Field(description="Invoice amount")

    @field_validator("comp_code")
    @classmethod
    def comp_code_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("comp_code must not be blank")
        return v.strip()


class InvoiceUpdate(BaseModel):
    """
    Body of PUT /invoices/{id}.

    `paid` drives the paid_date transition:
        false → true stamps paid_date, true → false clears it.
    """
    amt: float = Field(description="New invoice amount")
    paid: bool = Field(description="Whether the invoice is paid")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class InvoiceSummary(BaseModel):
    id: int
    comp_code: str

    model_config = {"from_attributes": True}


class InvoiceListResponse(BaseModel):
    """GET /invoices — ordered by id, unpaginated."""
    invoices: List[InvoiceSummary]


class InvoiceOut(BaseModel):
    id: int = Field(description="Invoice id")
    comp_code: str = Field(description="Code of the billed company")
    amt: float = Field(description="Invoice amount")
    paid: bool = Field(description="Whether the invoice is paid")
    add_date: datetime = Field(description="When the invoice was created (UTC ISO 8601)")
    paid_date: Optional[datetime] = Field(
        default=None,
        description="When the invoice became paid (null while unpaid)",
    )

    model_config = {"from_attributes": True}


class InvoiceResponse(BaseModel):
    """POST /invoices and PUT /invoices/{id}."""
    invoice: InvoiceOut


class InvoiceCompany(BaseModel):
    code: str
    name: str
    description: Optional[str] = None


class InvoiceDetail(BaseModel):
    id: int
    amt: float
    paid: bool
    add_date: datetime
    paid_date: Optional[datetime] = None
    company: InvoiceCompany


class InvoiceDetailResponse(BaseModel):
    """GET /invoices/{id}."""
    invoice: InvoiceDetail
