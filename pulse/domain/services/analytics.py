"""
Read-only aggregation over survey responses for the HR/admin dashboard.

Every operation takes an optional ``company_id``. The service applies it
when given and reads globally otherwise; deciding which callers may read
globally is the authorization layer's job (see ``scoped_company_id``).

Averages use the pooled rule from ``pulse.domain.scoring``: unanswered or
unknown labels are left out of numerator and denominator alike, and an
empty input gives 0.0.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.errors import NotFoundError
from pulse.domain import scoring
from pulse.domain.models import (
    CompanyInsight,
    DemographicBreakdown,
    LabelCount,
    SectionAverages,
    SurveyStats,
    WellbeingFilters,
    WellbeingIndices,
)
from pulse.domain.reference_data import company_name_for
from pulse.infrastructure.db.models import Employee, SurveyResponse

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()

UNKNOWN_DOMAIN = "unknown"


class ResponseNotFoundError(NotFoundError):
    default_message = "Response not found"


@dataclass(slots=True)
class ResponseWithEmployee:
    """A survey response joined to the employee who wrote it."""

    response: SurveyResponse
    employee: Employee


def _scoped(stmt: Select[Any], company_id: int | None) -> Select[Any]:
    if company_id is not None:
        stmt = stmt.where(SurveyResponse.company_id == company_id)
    return stmt


def _completed(stmt: Select[Any], company_id: int | None) -> Select[Any]:
    return _scoped(stmt.where(SurveyResponse.is_complete.is_(True)), company_id)


def _labels(values: list[str | None]) -> list[LabelCount]:
    return [LabelCount(name=name, count=count) for name, count in scoring.tally(values)]


class AnalyticsService:
    """Dashboard statistics over the survey response store."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def stats(self, company_id: int | None = None) -> SurveyStats:
        stmt = _scoped(
            select(
                func.count(SurveyResponse.id),
                func.coalesce(
                    func.sum(case((SurveyResponse.is_complete.is_(True), 1), else_=0)), 0
                ),
            ),
            company_id,
        )
        total, completed = (await self.session.execute(stmt)).one()
        return SurveyStats(total_responses=int(total), completed_responses=int(completed))

    async def completed_responses(self, company_id: int | None = None) -> list[SurveyResponse]:
        """Completed responses, most recently completed first."""
        stmt = _completed(select(SurveyResponse), company_id).order_by(
            SurveyResponse.completed_at.desc().nulls_last(),
            SurveyResponse.response_number.desc(),
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def section_averages(self, company_id: int | None = None) -> SectionAverages:
        answer_maps = await self._completed_answer_maps(company_id)
        return SectionAverages.from_letters(scoring.section_averages(answer_maps))

    async def company_insights(self, company_id: int | None = None) -> list[CompanyInsight]:
        """Per-domain counts plus the pooled average of every answer in completed responses.

        Responses with no recorded domain are grouped under ``"unknown"``.
        """
        stmt = _scoped(
            select(
                SurveyResponse.company_domain,
                SurveyResponse.is_complete,
                SurveyResponse.answers,
            ),
            company_id,
        )
        rows = (await self.session.execute(stmt)).all()

        totals: dict[str, int] = defaultdict(int)
        completed: dict[str, list[dict[str, str]]] = defaultdict(list)
        for domain, is_complete, answers in rows:
            key = domain or UNKNOWN_DOMAIN
            totals[key] += 1
            if is_complete:
                completed[key].append(answers or {})

        return [
            CompanyInsight(
                company_domain=domain,
                company_name=company_name_for(domain),
                total_responses=totals[domain],
                completed_responses=len(completed[domain]),
                average_score=scoring.average_of_all(completed[domain]),
            )
            for domain in sorted(totals)
        ]

    async def wellbeing(self, filters: WellbeingFilters | None = None) -> WellbeingIndices:
        """Composite indices over completed responses matching ``filters``.

        Demographic filters compare with SQL equality, so matching is
        case-sensitive. Responses without an employee row never match.
        """
        filters = filters or WellbeingFilters()
        stmt = (
            select(SurveyResponse.answers)
            .join(Employee, Employee.email == SurveyResponse.user_email)
            .where(SurveyResponse.is_complete.is_(True))
        )
        for column, value in (
            (Employee.department, filters.department),
            (Employee.education_level, filters.education_level),
            (Employee.gender, filters.gender),
            (Employee.working_tenure, filters.working_tenure),
            (SurveyResponse.company_domain, filters.company_domain),
        ):
            if value:
                stmt = stmt.where(column == value)
        stmt = _scoped(stmt, filters.company_id)

        answer_maps = [answers or {} for answers in (await self.session.execute(stmt)).scalars()]
        await logger.adebug("wellbeing_computed", responses=len(answer_maps))
        return WellbeingIndices(**scoring.wellbeing_indices(answer_maps))

    async def demographic_breakdown(self, company_id: int | None = None) -> DemographicBreakdown:
        """Tally employee attributes over completed responses.

        A missing attribute is skipped for that attribute only.
        """
        stmt = _completed(
            select(
                Employee.department,
                Employee.education_level,
                Employee.gender,
                Employee.working_tenure,
                Employee.age,
            ).join(SurveyResponse, SurveyResponse.user_email == Employee.email),
            company_id,
        )
        rows = (await self.session.execute(stmt)).all()
        return DemographicBreakdown(
            departments=_labels([row.department for row in rows]),
            education_levels=_labels([row.education_level for row in rows]),
            genders=_labels([row.gender for row in rows]),
            tenures=_labels([row.working_tenure for row in rows]),
            ages=_labels([row.age for row in rows]),
        )

    async def responses_with_employees(
        self, company_id: int | None = None
    ) -> list[ResponseWithEmployee]:
        stmt = _completed(
            select(SurveyResponse, Employee).join(
                Employee, Employee.email == SurveyResponse.user_email
            ),
            company_id,
        ).order_by(
            SurveyResponse.completed_at.desc().nulls_last(),
            SurveyResponse.response_number.desc(),
        )
        rows = (await self.session.execute(stmt)).all()
        return [ResponseWithEmployee(response=response, employee=employee) for response, employee in rows]

    async def response_by_number(self, response_number: int) -> ResponseWithEmployee:
        """Resolve a public response number; orphaned responses count as missing."""
        stmt = (
            select(SurveyResponse, Employee)
            .join(Employee, Employee.email == SurveyResponse.user_email)
            .where(SurveyResponse.response_number == response_number)
        )
        row = (await self.session.execute(stmt)).first()
        if row is None:
            raise ResponseNotFoundError()
        response, employee = row
        return ResponseWithEmployee(response=response, employee=employee)

    async def _completed_answer_maps(self, company_id: int | None) -> list[dict[str, str]]:
        stmt = _completed(select(SurveyResponse.answers), company_id)
        return [answers or {} for answers in (await self.session.execute(stmt)).scalars()]
