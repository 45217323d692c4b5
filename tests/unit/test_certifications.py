"""Unit tests for the certification workflow."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.errors import InternalError
from pulse.domain.services import certifications as certifications_module
from pulse.domain.services.auth_service import AuthService
from pulse.domain.services.certifications import (
    CertificationNotFoundError,
    CertificationService,
    generate_certificate_number,
)
from pulse.domain.services.companies import CompanyNotFoundError, CompanyService
from pulse.infrastructure.db.models import AccountRole, CertificationStatus, HRAccount

CERT_PATTERN = re.compile(r"^CERT-\d{13}-[0-9A-Z]{7}$")


async def _admin(db: AsyncSession) -> HRAccount:
    company = await CompanyService(db).get_or_create("pulsehq.com")
    return await AuthService(db).create_account(
        company_id=company.id, email="admin@pulsehq.com", password="admin-pass", role=AccountRole.ADMIN
    )


def test_certificate_number_format() -> None:
    number = generate_certificate_number(datetime(2026, 10, 19, tzinfo=UTC))
    assert CERT_PATTERN.match(number)
    assert number.startswith("CERT-1792368000000-")


async def test_issue_sets_active_and_valid_from(db: AsyncSession) -> None:
    admin = await _admin(db)
    company = await CompanyService(db).get_or_create("acme.com")
    valid_until = datetime.now(UTC) + timedelta(days=365)

    certification = await CertificationService(db).issue(
        company_id=company.id,
        title="Great Place to Work",
        issued_by=admin.id,
        description="Top decile engagement",
        valid_until=valid_until,
        metadata={"score": 4.6},
    )

    assert certification.status == CertificationStatus.ACTIVE
    assert CERT_PATTERN.match(certification.certificate_number)
    assert certification.valid_from is not None
    assert certification.metadata_ == {"score": 4.6}
    assert certification.company.domain == "acme.com"
    assert certification.issuer.email == "admin@pulsehq.com"


async def test_issue_for_unknown_company(db: AsyncSession) -> None:
    admin = await _admin(db)
    with pytest.raises(CompanyNotFoundError):
        await CertificationService(db).issue(company_id=9999, title="x", issued_by=admin.id)


async def test_colliding_numbers_are_retried(db: AsyncSession, monkeypatch: pytest.MonkeyPatch) -> None:
    admin = await _admin(db)
    company = await CompanyService(db).get_or_create("acme.com")
    numbers = iter(["CERT-1-AAAAAAA", "CERT-1-AAAAAAA", "CERT-1-BBBBBBB"])
    monkeypatch.setattr(certifications_module, "generate_certificate_number", lambda: next(numbers))
    service = CertificationService(db)

    company_id, admin_id = company.id, admin.id
    first = await service.issue(company_id=company_id, title="One", issued_by=admin_id)
    first_number = first.certificate_number
    second = await service.issue(company_id=company_id, title="Two", issued_by=admin_id)

    assert first_number == "CERT-1-AAAAAAA"
    assert second.certificate_number == "CERT-1-BBBBBBB"


async def test_gives_up_after_three_collisions(db: AsyncSession, monkeypatch: pytest.MonkeyPatch) -> None:
    admin = await _admin(db)
    company = await CompanyService(db).get_or_create("acme.com")
    monkeypatch.setattr(certifications_module, "generate_certificate_number", lambda: "CERT-1-SAMESAM")
    service = CertificationService(db)
    await service.issue(company_id=company.id, title="One", issued_by=admin.id)

    with pytest.raises(InternalError):
        await service.issue(company_id=company.id, title="Two", issued_by=admin.id)


async def test_revoke_twice_stays_revoked(db: AsyncSession) -> None:
    admin = await _admin(db)
    company = await CompanyService(db).get_or_create("acme.com")
    service = CertificationService(db)
    certification = await service.issue(company_id=company.id, title="One", issued_by=admin.id)

    first = await service.revoke(certification.id)
    second = await service.revoke(certification.id)

    assert first.status == CertificationStatus.REVOKED
    assert second.status == CertificationStatus.REVOKED


async def test_revoke_unknown(db: AsyncSession) -> None:
    with pytest.raises(CertificationNotFoundError):
        await CertificationService(db).revoke(12345)


async def test_list_filters_by_company_newest_first(db: AsyncSession) -> None:
    admin = await _admin(db)
    acme = await CompanyService(db).get_or_create("acme.com")
    globex = await CompanyService(db).get_or_create("globex.io")
    service = CertificationService(db)
    await service.issue(company_id=acme.id, title="First", issued_by=admin.id)
    await service.issue(company_id=globex.id, title="Other", issued_by=admin.id)
    await service.issue(company_id=acme.id, title="Second", issued_by=admin.id)

    everything = await service.list_certifications()
    acme_only = await service.list_certifications(acme.id)

    assert len(everything) == 3
    assert [item.title for item in acme_only] == ["Second", "First"]
