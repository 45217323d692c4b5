"""
Company certifications issued by platform admins.

Certificate numbers look like ``CERT-<epoch millis>-<7 base36 chars>``. The
unique constraint on the column is the real guarantee: a colliding insert is
rolled back and retried with a fresh number.
"""

from __future__ import annotations

import secrets
import string
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pulse.core.errors import InternalError, NotFoundError
from pulse.domain.services.companies import CompanyService
from pulse.infrastructure.db.models import Certification, CertificationStatus

logger = structlog.get_logger()

CERTIFICATE_SUFFIX_ALPHABET = string.digits + string.ascii_uppercase
CERTIFICATE_SUFFIX_LENGTH = 7
MAX_ISSUE_ATTEMPTS = 3


class CertificationNotFoundError(NotFoundError):
    default_message = "Certification not found"


def generate_certificate_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    millis = int(now.timestamp() * 1000)
    suffix = "".join(
        secrets.choice(CERTIFICATE_SUFFIX_ALPHABET) for _ in range(CERTIFICATE_SUFFIX_LENGTH)
    )
    return f"CERT-{millis}-{suffix}"


class CertificationService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.companies = CompanyService(session)

    async def get(self, certification_id: int) -> Certification:
        stmt = (
            select(Certification)
            .options(selectinload(Certification.company), selectinload(Certification.issuer))
            .where(Certification.id == certification_id)
            .execution_options(populate_existing=True)
        )
        certification = await self.session.scalar(stmt)
        if certification is None:
            raise CertificationNotFoundError()
        return certification

    async def issue(
        self,
        *,
        company_id: int,
        title: str,
        issued_by: int,
        description: str | None = None,
        valid_until: datetime | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Certification:
        """Issue an active certification valid from now."""
        await self.companies.get(company_id)

        for attempt in range(1, MAX_ISSUE_ATTEMPTS + 1):
            certification = Certification(
                company_id=company_id,
                certificate_number=generate_certificate_number(),
                issued_by=issued_by,
                title=title,
                description=description,
                valid_from=datetime.now(UTC),
                valid_until=valid_until,
                status=CertificationStatus.ACTIVE,
                metadata_=metadata,
            )
            self.session.add(certification)
            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                await logger.awarning(
                    "certificate_number_collision",
                    company_id=company_id,
                    attempt=attempt,
                )
                continue

            await logger.ainfo(
                "certification_issued",
                certification_id=certification.id,
                certificate_number=certification.certificate_number,
                company_id=company_id,
                issued_by=issued_by,
            )
            return await self.get(certification.id)

        raise InternalError("Could not allocate a unique certificate number")

    async def revoke(self, certification_id: int) -> Certification:
        """Mark a certification revoked. Revoking twice is not an error."""
        certification = await self.get(certification_id)
        if certification.status != CertificationStatus.REVOKED:
            certification.status = CertificationStatus.REVOKED
            await self.session.commit()
            await logger.ainfo("certification_revoked", certification_id=certification_id)
        return await self.get(certification_id)

    async def list_certifications(self, company_id: int | None = None) -> list[Certification]:
        stmt = (
            select(Certification)
            .options(selectinload(Certification.company), selectinload(Certification.issuer))
            .order_by(Certification.created_at.desc(), Certification.id.desc())
        )
        if company_id is not None:
            stmt = stmt.where(Certification.company_id == company_id)
        return list((await self.session.execute(stmt)).scalars().all())
