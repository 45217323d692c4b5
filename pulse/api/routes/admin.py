"""Admin-only routes: tenants, participants and certifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.api.deps import get_db_session, require_admin
from pulse.api.schemas.admin import CertificationCreate, CertificationOut
from pulse.api.schemas.base import SuccessResponse
from pulse.api.schemas.employees import EmployeeOut
from pulse.api.schemas.hr import CompanyOut
from pulse.domain.services.certifications import CertificationService
from pulse.domain.services.companies import CompanyService
from pulse.domain.services.employees import EmployeeService
from pulse.infrastructure.db.models import HRAccount

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/companies", response_model=list[CompanyOut])
async def list_companies(
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[CompanyOut]:
    companies = await CompanyService(session).list_companies()
    return [CompanyOut.model_validate(company) for company in companies]


@router.get("/employees", response_model=list[EmployeeOut])
async def list_employees(
    company_id: int | None = Query(None, alias="companyId"),
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[EmployeeOut]:
    employees = await EmployeeService(session).list_employees(company_id)
    return [EmployeeOut.model_validate(employee) for employee in employees]


@router.post("/certifications", response_model=CertificationOut)
async def create_certification(
    payload: CertificationCreate,
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> CertificationOut:
    """Issue an active certification to a company."""
    certification = await CertificationService(session).issue(
        company_id=payload.company_id,
        title=payload.title,
        issued_by=account.id,
        description=payload.description,
        valid_until=payload.valid_until,
        metadata=payload.metadata,
    )
    return CertificationOut.from_model(certification)


@router.get("/certifications", response_model=list[CertificationOut])
async def list_certifications(
    company_id: int | None = Query(None, alias="companyId"),
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[CertificationOut]:
    certifications = await CertificationService(session).list_certifications(company_id)
    return [CertificationOut.from_model(certification) for certification in certifications]


@router.patch("/certifications/{certification_id}/revoke", response_model=SuccessResponse)
async def revoke_certification(
    certification_id: int,
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SuccessResponse:
    await CertificationService(session).revoke(certification_id)
    return SuccessResponse()

