"""Participant identification routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.api.deps import get_db_session
from pulse.api.schemas.employees import (
    CorporateEmail,
    EmployeeOut,
    ValidateEmailRequest,
    ValidateEmailResponse,
)
from pulse.domain.services.employees import EmployeeService

router = APIRouter(prefix="/auth", tags=["Participants"])


@router.post(
    "/validate",
    response_model=ValidateEmailResponse,
    summary="Identify a participant",
    description="Check the email is corporate and create or update the participant record.",
)
async def validate_email(
    payload: ValidateEmailRequest,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> ValidateEmailResponse:
    employee = await EmployeeService(session).upsert(payload.email, **payload.demographics())
    return ValidateEmailResponse(user=EmployeeOut.model_validate(employee), email=employee.email)


@router.get("/user", response_model=EmployeeOut, summary="Look up a participant")
async def get_user(
    email: CorporateEmail = Query(...),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> EmployeeOut:
    employee = await EmployeeService(session).get(email)
    return EmployeeOut.model_validate(employee)
