"""Pydantic schemas for HR/admin authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field

from pulse.api.schemas.base import CamelModel
from pulse.infrastructure.db.models import AccountRole

# --- Request Schemas ---


class LoginRequest(CamelModel):
    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=1, description="Account password")


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="New password (min 8 characters)",
    )


# --- Response Schemas ---


class AccountSummary(CamelModel):
    id: int
    email: str
    role: AccountRole
    company_id: int


class LoginResponse(CamelModel):
    success: bool = True
    account: AccountSummary


class CompanyOut(CamelModel):
    id: int
    domain: str
    name: str
    hr_email: str | None = None
    created_at: datetime
    updated_at: datetime


class HRAccountOut(CamelModel):
    """Account listing entry. The password hash is never part of it."""

    id: int
    company_id: int
    email: str
    role: AccountRole
    must_reset_password: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    company: CompanyOut | None = None
