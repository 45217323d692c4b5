"""Pydantic schemas for admin-only endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from pulse.api.schemas.base import CamelModel
from pulse.api.schemas.hr import CompanyOut
from pulse.infrastructure.db.models import AccountRole, Certification, CertificationStatus


class CertificationCreate(CamelModel):
    company_id: int = Field(..., description="Company receiving the certification")
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    valid_until: datetime | None = None
    metadata: dict[str, Any] | None = None


class IssuerOut(CamelModel):
    id: int
    email: str
    role: AccountRole


class CertificationOut(CamelModel):
    id: int
    company_id: int
    certificate_number: str
    issued_by: int
    title: str
    description: str | None = None
    valid_from: datetime
    valid_until: datetime | None = None
    status: CertificationStatus
    metadata: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime
    company: CompanyOut | None = None
    issued_by_account: IssuerOut | None = None

    @classmethod
    def from_model(cls, certification: Certification) -> CertificationOut:
        return cls(
            id=certification.id,
            company_id=certification.company_id,
            certificate_number=certification.certificate_number,
            issued_by=certification.issued_by,
            title=certification.title,
            description=certification.description,
            valid_from=certification.valid_from,
            valid_until=certification.valid_until,
            status=certification.status,
            metadata=certification.metadata_,
            created_at=certification.created_at,
            updated_at=certification.updated_at,
            company=CompanyOut.model_validate(certification.company)
            if certification.company is not None
            else None,
            issued_by_account=IssuerOut.model_validate(certification.issuer)
            if certification.issuer is not None
            else None,
        )
