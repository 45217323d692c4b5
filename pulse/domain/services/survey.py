"""
Survey response store.

- save_progress merges a partial answer map into the stored one key by key,
  so a participant can save one section at a time.
- submit_final replaces the answer map with the full, already validated set
  and marks the response complete.
- The first completed submission for a company provisions its HR account.

Every write is a read-modify-write guarded by the ``version`` column of
SurveyResponse; a write based on a stale read is retried from a fresh read.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from pulse.core.config import get_settings
from pulse.core.errors import InternalError
from pulse.domain.reference_data import email_domain
from pulse.domain.services.auth_service import AccountExistsError, AuthService
from pulse.domain.services.companies import CompanyService
from pulse.domain.services.employees import EmployeeService
from pulse.infrastructure.db.models import AccountRole, HRAccount, IdCounter, SurveyResponse

logger = structlog.get_logger()

RESPONSE_NUMBER_COUNTER = "survey_response_number"
MAX_WRITE_ATTEMPTS = 3


class ConcurrentUpdateError(InternalError):
    """Raised when a response keeps changing underneath every write attempt."""


class SurveyService:
    """Create, merge and finalize a participant's answer map."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.companies = CompanyService(session)
        self.employees = EmployeeService(session)
        self.accounts = AuthService(session)

    async def get_by_email(self, email: str) -> SurveyResponse | None:
        stmt = (
            select(SurveyResponse)
            .where(SurveyResponse.user_email == email)
            .execution_options(populate_existing=True)
        )
        return await self.session.scalar(stmt)

    async def save_progress(
        self,
        email: str,
        answers: Mapping[str, str],
        *,
        is_complete: bool = False,
    ) -> SurveyResponse:
        """Merge ``answers`` into the stored map; keys not sent are preserved."""
        incoming = dict(answers)

        def merge(response: SurveyResponse) -> None:
            response.answers = {**(response.answers or {}), **incoming}
            response.is_complete = is_complete

        response = await self._write(email, merge)
        await logger.ainfo(
            "survey_saved",
            email=email,
            response_number=response.response_number,
            answered=len(response.answers),
            keys_received=len(incoming),
            is_complete=is_complete,
        )
        return response

    async def submit_final(self, email: str, answers: Mapping[str, str]) -> SurveyResponse:
        """Replace the answer map with the full set and mark it complete.

        The caller is responsible for validating that all 50 answers are present.
        """
        full = dict(answers)
        completed_at = datetime.now(UTC)

        def finalize(response: SurveyResponse) -> None:
            response.answers = full
            response.is_complete = True
            response.completed_at = completed_at

        response = await self._write(email, finalize)
        company_id = response.company_id
        response_number = response.response_number

        if company_id is not None:
            await self._provision_hr_account(company_id, email_domain(email))
        await self.session.refresh(response)

        await logger.ainfo(
            "survey_submitted",
            email=email,
            response_number=response_number,
            company_id=company_id,
        )
        return response

    async def _write(
        self, email: str, mutate: Callable[[SurveyResponse], None]
    ) -> SurveyResponse:
        domain = email_domain(email)
        company = await self.companies.get_or_create(domain)
        company_id = company.id
        await self.employees.ensure(email)

        for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
            response = await self.get_by_email(email)
            if response is None:
                response = SurveyResponse(
                    user_email=email,
                    response_number=await self._next_response_number(),
                    answers={},
                    company_domain=domain,
                    company_id=company_id,
                )
                self.session.add(response)
            else:
                # First write wins for the denormalised company fields
                if not response.company_domain:
                    response.company_domain = domain
                if response.company_id is None:
                    response.company_id = company_id

            mutate(response)
            try:
                await self.session.commit()
            except (StaleDataError, IntegrityError) as exc:
                await self.session.rollback()
                await logger.awarning(
                    "survey_write_conflict",
                    email=email,
                    attempt=attempt,
                    error=type(exc).__name__,
                )
                continue

            await self.session.refresh(response)
            return response

        raise ConcurrentUpdateError()

    async def _next_response_number(self) -> int:
        stmt = (
            update(IdCounter)
            .where(IdCounter.key == RESPONSE_NUMBER_COUNTER)
            .values(value=IdCounter.value + 1)
            .returning(IdCounter.value)
            .execution_options(synchronize_session=False)
        )
        number = (await self.session.execute(stmt)).scalar_one_or_none()
        if number is None:
            # Counter row is normally seeded by the initial migration
            self.session.add(IdCounter(key=RESPONSE_NUMBER_COUNTER, value=1))
            await self.session.flush()
            number = 1
        return number

    async def _provision_hr_account(self, company_id: int, domain: str) -> HRAccount | None:
        """Create ``hr@<domain>`` unless an account with that email exists."""
        hr_email = f"hr@{domain}"
        if await self.accounts.get_account_by_email(hr_email) is not None:
            return None

        settings = get_settings()
        try:
            account = await self.accounts.create_account(
                company_id=company_id,
                email=hr_email,
                password=settings.hr_default_password,
                role=AccountRole.HR,
            )
        except AccountExistsError:
            # A concurrent first submission from the same company won the insert
            await logger.ainfo("hr_account_exists", email=hr_email)
            return None

        await logger.ainfo("hr_account_provisioned", account_id=account.id, company_id=company_id)
        return account
