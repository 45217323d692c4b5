"""
HR/admin dashboard routes.

HR accounts always read their own company. Admins read every company, or
the one they name with ``companyId``.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.api.deps import get_db_session, require_admin, require_hr
from pulse.api.schemas.dashboard import (
    CompanyInsightOut,
    DemographicBreakdownOut,
    ResponseWithUserOut,
    SectionAveragesOut,
    SurveyStatsOut,
    WellbeingMetricsOut,
)
from pulse.api.schemas.hr import HRAccountOut
from pulse.api.schemas.survey import SurveyResponseOut
from pulse.core.errors import InvalidRequestError
from pulse.domain.models import WellbeingFilters
from pulse.domain.services.analytics import AnalyticsService
from pulse.domain.services.auth_service import AuthService, scoped_company_id
from pulse.domain.services.export import build_responses_csv, export_filename
from pulse.infrastructure.db.models import HRAccount

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = structlog.get_logger()

CompanyIdQuery = Query(None, alias="companyId", description="Admin only: narrow to one company")


@router.get("/stats", response_model=SurveyStatsOut)
async def stats(
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SurveyStatsOut:
    result = await AnalyticsService(session).stats(scoped_company_id(account, company_id))
    return SurveyStatsOut.model_validate(result)


@router.get("/section-averages", response_model=SectionAveragesOut)
async def section_averages(
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SectionAveragesOut:
    result = await AnalyticsService(session).section_averages(
        scoped_company_id(account, company_id)
    )
    return SectionAveragesOut.model_validate(result)


@router.get("/responses", response_model=list[SurveyResponseOut])
async def responses(
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[SurveyResponseOut]:
    """Completed responses, most recent first."""
    rows = await AnalyticsService(session).completed_responses(
        scoped_company_id(account, company_id)
    )
    return [SurveyResponseOut.model_validate(row) for row in rows]


@router.get("/company-insights", response_model=list[CompanyInsightOut])
async def company_insights(
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[CompanyInsightOut]:
    insights = await AnalyticsService(session).company_insights(
        scoped_company_id(account, company_id)
    )
    return [CompanyInsightOut.model_validate(insight) for insight in insights]


@router.get("/responses-with-users", response_model=list[ResponseWithUserOut])
async def responses_with_users(
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[ResponseWithUserOut]:
    items = await AnalyticsService(session).responses_with_employees(
        scoped_company_id(account, company_id)
    )
    return [ResponseWithUserOut.from_item(item) for item in items]


@router.get("/response/{response_number}", response_model=ResponseWithUserOut)
async def response_by_number(
    response_number: str,
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> ResponseWithUserOut:
    """Look up a response by its public number."""
    try:
        number = int(response_number)
    except ValueError as exc:
        raise InvalidRequestError("Invalid response number") from exc

    item = await AnalyticsService(session).response_by_number(number)
    return ResponseWithUserOut.from_item(item)


@router.get("/wellbeing-metrics", response_model=WellbeingMetricsOut)
async def wellbeing_metrics(
    department: str | None = Query(None),
    education_level: str | None = Query(None, alias="educationLevel"),
    gender: str | None = Query(None),
    working_tenure: str | None = Query(None, alias="workingTenure"),
    company_domain: str | None = Query(None, alias="companyDomain"),
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> WellbeingMetricsOut:
    """Composite indices; demographic filters match exactly (case-sensitive)."""
    filters = WellbeingFilters(
        department=department,
        education_level=education_level,
        gender=gender,
        working_tenure=working_tenure,
        company_domain=company_domain,
        company_id=scoped_company_id(account, company_id),
    )
    result = await AnalyticsService(session).wellbeing(filters)
    return WellbeingMetricsOut.model_validate(result)


@router.get("/demographic-breakdown", response_model=DemographicBreakdownOut)
async def demographic_breakdown(
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> DemographicBreakdownOut:
    result = await AnalyticsService(session).demographic_breakdown(
        scoped_company_id(account, company_id)
    )
    return DemographicBreakdownOut.model_validate(result)


@router.get("/hr-accounts", response_model=list[HRAccountOut])
async def hr_accounts(
    account: HRAccount = Depends(require_admin),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[HRAccountOut]:
    accounts = await AuthService(session).list_accounts()
    return [HRAccountOut.model_validate(item) for item in accounts]


@router.get("/export-csv", response_class=Response)
async def export_csv(
    company_id: int | None = CompanyIdQuery,
    account: HRAccount = Depends(require_hr),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> Response:
    """Completed responses with participant details as a CSV download."""
    scope = scoped_company_id(account, company_id)
    items = await AnalyticsService(session).responses_with_employees(scope)
    await logger.ainfo("responses_exported", account_id=account.id, company_id=scope, rows=len(items))
    return Response(
        content=build_responses_csv(items),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )
