from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.errors import NotFoundError
from pulse.domain.reference_data import company_name_for
from pulse.infrastructure.db.models import Company

logger = structlog.get_logger()


class CompanyNotFoundError(NotFoundError):
    default_message = "Company not found"


class CompanyService:
    """Tenant lookup and lazy creation from email domains."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, company_id: int) -> Company:
        company = await self.session.get(Company, company_id)
        if company is None:
            raise CompanyNotFoundError(f"Company {company_id} not found")
        return company

    async def get_by_domain(self, domain: str) -> Company | None:
        stmt = select(Company).where(Company.domain == domain)
        return await self.session.scalar(stmt)

    async def get_or_create(self, domain: str) -> Company:
        """Return the company for ``domain``, creating it on first sight.

        Two first-time requests for the same domain may both try to insert;
        the loser re-reads the winner's row.
        """
        company = await self.get_by_domain(domain)
        if company is not None:
            return company

        company = Company(domain=domain, name=company_name_for(domain), hr_email=f"hr@{domain}")
        self.session.add(company)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.get_by_domain(domain)
            if existing is None:
                raise
            return existing

        await self.session.refresh(company)
        await logger.ainfo("company_created", company_id=company.id, domain=domain)
        return company

    async def list_companies(self) -> list[Company]:
        stmt = select(Company).order_by(Company.created_at.desc(), Company.id.desc())
        return list((await self.session.execute(stmt)).scalars().all())
