from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.errors import NotFoundError
from pulse.domain.reference_data import email_domain
from pulse.domain.services.companies import CompanyService
from pulse.infrastructure.db.models import Employee

logger = structlog.get_logger()

DEMOGRAPHIC_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "department",
    "education_level",
    "gender",
    "age",
    "working_tenure",
)


class EmployeeNotFoundError(NotFoundError):
    default_message = "User not found"


class EmployeeService:
    """Survey participants keyed by email."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.companies = CompanyService(session)

    async def get(self, email: str) -> Employee:
        employee = await self.session.get(Employee, email)
        if employee is None:
            raise EmployeeNotFoundError()
        return employee

    async def upsert(self, email: str, **profile: Any) -> Employee:
        """Create or update an employee.

        Only the demographic fields passed in ``profile`` are written; fields
        that are not passed keep their stored values.
        """
        unknown = set(profile) - set(DEMOGRAPHIC_FIELDS)
        if unknown:
            raise ValueError(f"Unknown employee field(s): {', '.join(sorted(unknown))}")

        company = await self.companies.get_or_create(email_domain(email))
        values = {**profile, "company": company.name, "company_id": company.id}

        employee = await self.session.get(Employee, email, populate_existing=True)
        if employee is None:
            employee = Employee(email=email)
            self.session.add(employee)
        for field_name, value in values.items():
            setattr(employee, field_name, value)

        try:
            await self.session.commit()
        except IntegrityError:
            # Another request inserted the same email first; apply on top of it
            await self.session.rollback()
            employee = await self.session.get(Employee, email, populate_existing=True)
            if employee is None:
                raise
            for field_name, value in values.items():
                setattr(employee, field_name, value)
            await self.session.commit()

        await self.session.refresh(employee)
        await logger.ainfo(
            "employee_upserted",
            email=email,
            company_id=values["company_id"],
            fields=sorted(profile),
        )
        return employee

    async def ensure(self, email: str) -> Employee:
        """Return the employee row for ``email``, creating a bare one if missing."""
        employee = await self.session.get(Employee, email)
        if employee is not None:
            return employee
        return await self.upsert(email)

    async def list_employees(self, company_id: int | None = None) -> list[Employee]:
        stmt = select(Employee).order_by(Employee.created_at.desc(), Employee.email)
        if company_id is not None:
            stmt = stmt.where(Employee.company_id == company_id)
        return list((await self.session.execute(stmt)).scalars().all())
