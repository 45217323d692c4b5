"""Pydantic schemas for participant identification."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, EmailStr, Field

from pulse.api.schemas.base import CamelModel
from pulse.domain.reference_data import is_free_email


def _reject_free_mail(email: str) -> str:
    if is_free_email(email):
        raise ValueError("Please use your corporate email address")
    return email


CorporateEmail = Annotated[EmailStr, AfterValidator(_reject_free_mail)]


class ValidateEmailRequest(CamelModel):
    """Identify a participant and record whichever demographics were sent."""

    email: CorporateEmail = Field(..., description="Corporate email address")
    first_name: str | None = Field(None, max_length=128)
    last_name: str | None = Field(None, max_length=128)
    department: str | None = Field(None, max_length=128)
    education_level: str | None = Field(None, max_length=128)
    gender: str | None = Field(None, max_length=64)
    age: str | None = Field(None, max_length=32)
    working_tenure: str | None = Field(None, max_length=64)

    def demographics(self) -> dict[str, str | None]:
        """Only the fields present in the request body."""
        return self.model_dump(exclude_unset=True, exclude={"email"})


class EmployeeOut(CamelModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    department: str | None = None
    education_level: str | None = None
    gender: str | None = None
    age: str | None = None
    working_tenure: str | None = None
    company_id: int | None = None
    created_at: datetime
    updated_at: datetime


class ValidateEmailResponse(CamelModel):
    user: EmployeeOut
    email: str
