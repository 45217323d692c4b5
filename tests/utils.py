from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pulse.domain.reference_data import email_domain
from pulse.domain.scoring import QUESTION_KEYS
from pulse.domain.services.auth_service import AuthService
from pulse.domain.services.companies import CompanyService
from pulse.infrastructure.db.models import AccountRole, HRAccount

ADMIN_EMAIL = "admin@pulsehq.com"
ADMIN_PASSWORD = "admin-password"
HR_DEFAULT_PASSWORD = "12345678"


def full_answers(label: str = "agree", **overrides: str) -> dict[str, str]:
    """All 50 answers set to ``label``; ``q7="neutral"`` style overrides by number."""
    answers = {key: label for key in QUESTION_KEYS}
    for name, value in overrides.items():
        answers[name.removeprefix("q")] = value
    return answers


def section_answers(first: int, last: int, label: str) -> dict[str, str]:
    return {str(number): label for number in range(first, last + 1)}


async def seed_account(
    session_factory: async_sessionmaker[AsyncSession],
    email: str,
    password: str,
    *,
    role: AccountRole = AccountRole.HR,
) -> HRAccount:
    async with session_factory() as session:
        company = await CompanyService(session).get_or_create(email_domain(email))
        return await AuthService(session).create_account(
            company_id=company.id, email=email, password=password, role=role
        )


def register_employee(client: TestClient, email: str, **demographics: str) -> None:
    response = client.post("/auth/validate", json={"email": email, **demographics})
    assert response.status_code == 200, response.text


def complete_survey(client: TestClient, email: str, label: str = "agree", **demographics: str) -> dict:
    """Register a participant and submit a full survey for them."""
    register_employee(client, email, **demographics)
    response = client.post("/survey/submit", json={"email": email, "answers": full_answers(label)})
    assert response.status_code == 200, response.text
    return response.json()


def login(client: TestClient, email: str, password: str) -> None:
    client.cookies.clear()
    response = client.post("/hr/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
