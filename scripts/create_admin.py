"""Create a platform admin account.

Usage: poetry run python scripts/create_admin.py <email> <password>

The account is attached to the company of the email's domain, which is
created if it does not exist yet. An existing account is reported, not
modified.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Make the pulse package importable when the script runs from any directory
sys.path.insert(0, str(Path(__file__).parent.parent))

from pulse.core.config import get_settings
from pulse.core.logging import setup_logging
from pulse.domain.reference_data import email_domain
from pulse.domain.services.auth_service import AuthService
from pulse.domain.services.companies import CompanyService
from pulse.infrastructure.db.models import AccountRole
from pulse.infrastructure.db.session import build_engine, build_session_factory


async def create_admin(email: str, password: str) -> None:
    settings = get_settings()
    engine = build_engine(settings.async_database_url)
    session_factory = build_session_factory(engine)

    try:
        async with session_factory() as session:
            accounts = AuthService(session)
            existing = await accounts.get_account_by_email(email)
            if existing is not None:
                print(f"Account {existing.email} already exists (role: {existing.role.value})")
                return

            company = await CompanyService(session).get_or_create(email_domain(email))
            account = await accounts.create_account(
                company_id=company.id,
                email=email,
                password=password,
                role=AccountRole.ADMIN,
            )
            print(f"Created admin {account.email} (id {account.id}) for company {company.domain}")
    finally:
        await engine.dispose()


async def main() -> None:
    if len(sys.argv) < 3:
        print("Usage: poetry run python scripts/create_admin.py <email> <password>")
        sys.exit(1)

    setup_logging(get_settings().log_level)
    await create_admin(sys.argv[1], sys.argv[2])


if __name__ == "__main__":
    asyncio.run(main())
