"""
BizTime Backend — Company Request/Response Schemas
===================================================

What:  Pydantic models defining the /companies API contract.
Why:   Input presence checks, response projection, OpenAPI docs.

Projection rules:
    - List items carry code and name only; description never appears there
    - Detail adds description and the ids of the company's invoices
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CompanyCreate(BaseModel):
    """
    Body of POST /companies.

    The code is not accepted from the client; the service derives it
    from `name` after this model has been validated.
    """
    name: str = Field(min_length=1, description="Display name; the company code is its slug")
    description: Optional[str] = Field(default=None, description="Free text description")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class CompanyUpdate(CompanyCreate):
    """Body of PUT /companies/{code}. Same fields as creation; code is immutable."""


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CompanySummary(BaseModel):
    code: str
    name: str

    model_config = {"from_attributes": True}


class CompanyListResponse(BaseModel):
    """GET /companies — ordered by name, unpaginated."""
    companies: List[CompanySummary]


class CompanyOut(BaseModel):
    code: str = Field(description="Company code (slug)")
    name: str = Field(description="Display name")
    description: Optional[str] = Field(default=None, description="Free text description")

    model_config = {"from_attributes": True}


class CompanyResponse(BaseModel):
    """POST /companies (201) and PUT /companies/{code}."""
    company: CompanyOut


class CompanyDetail(CompanyOut):
    invoices: List[int] = Field(
        default_factory=list,
        description="Ids of this company's invoices, ascending",
    )


class CompanyDetailResponse(BaseModel):
    """GET /companies/{code}."""
    company: CompanyDetail
