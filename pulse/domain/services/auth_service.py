"""HR/admin accounts, password hashing and cookie sessions."""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from passlib.context import CryptContext
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pulse.core.auth import as_utc, generate_session_token, session_expiry
from pulse.core.config import get_settings
from pulse.core.errors import (
    AccountNotFoundError,
    ForbiddenRoleError,
    InvalidRequestError,
    UnauthenticatedError,
)
from pulse.infrastructure.db.models import AccountRole, AuthSession, HRAccount

logger = structlog.get_logger()

# bcrypt with the configured cost factor (10 rounds by default)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().password_hash_rounds,
)

# Unknown emails still pay for one bcrypt verify
_UNKNOWN_ACCOUNT_HASH = pwd_context.hash("unknown-account")


class InvalidCredentialsError(UnauthenticatedError):
    """Raised when login credentials are invalid."""

    default_message = "Invalid email or password"


class IncorrectPasswordError(InvalidRequestError):
    """Raised when the current password given for a change does not match."""

    default_message = "Current password is incorrect"


class AccountExistsError(InvalidRequestError):
    """Raised when creating an account whose email is already taken."""

    default_message = "Account already exists"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def scoped_company_id(account: HRAccount, requested: int | None = None) -> int | None:
    """Company filter a caller is allowed to read.

    HR accounts are pinned to their own company whatever they ask for; admins
    read everything, or the company they explicitly request.
    """
    if account.role == AccountRole.ADMIN:
        return requested
    return account.company_id


class AuthService:
    """Service for account and session operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Accounts ---

    async def get_account(self, account_id: int) -> HRAccount | None:
        return await self.session.get(HRAccount, account_id)

    async def get_account_by_email(self, email: str) -> HRAccount | None:
        stmt = select(HRAccount).where(HRAccount.email == email.lower())
        return await self.session.scalar(stmt)

    async def create_account(
        self,
        *,
        company_id: int,
        email: str,
        password: str,
        role: AccountRole = AccountRole.HR,
    ) -> HRAccount:
        account = HRAccount(
            company_id=company_id,
            email=email.lower(),
            password_hash=hash_password(password),
            role=role,
            must_reset_password=True,
        )
        try:
            self.session.add(account)
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("account_duplicate_email", email=email)
            raise AccountExistsError(f"Account with email {email} already exists") from exc

        await self.session.refresh(account)
        await logger.ainfo(
            "account_created", account_id=account.id, email=account.email, role=role.value
        )
        return account

    async def list_accounts(self) -> list[HRAccount]:
        stmt = (
            select(HRAccount)
            .options(selectinload(HRAccount.company))
            .order_by(HRAccount.created_at.desc(), HRAccount.id.desc())
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def validate_credentials(self, email: str, password: str) -> HRAccount | None:
        """Return the account only if the password matches; fails closed."""
        account = await self.get_account_by_email(email)
        if account is None:
            verify_password(password, _UNKNOWN_ACCOUNT_HASH)
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    async def login(self, *, email: str, password: str) -> tuple[HRAccount, AuthSession]:
        """Authenticate and open a new session."""
        await logger.ainfo("login_attempt", email=email)

        account = await self.validate_credentials(email, password)
        if account is None:
            await logger.awarning("login_failed", email=email)
            raise InvalidCredentialsError()

        auth_session = await self.create_session(account.id)
        await self.session.execute(
            update(HRAccount)
            .where(HRAccount.id == account.id)
            .values(last_login_at=datetime.now(UTC))
        )
        await self.session.commit()
        await self.session.refresh(account)

        await logger.ainfo("login_success", account_id=account.id, role=account.role.value)
        return account, auth_session

    async def change_password(
        self, account: HRAccount, *, current_password: str, new_password: str
    ) -> HRAccount:
        if not verify_password(current_password, account.password_hash):
            raise IncorrectPasswordError()

        account.password_hash = hash_password(new_password)
        account.must_reset_password = False
        await self.session.commit()
        await self.session.refresh(account)

        await logger.ainfo("password_changed", account_id=account.id)
        return account

    # --- Sessions ---

    async def create_session(self, account_id: int) -> AuthSession:
        auth_session = AuthSession(
            account_id=account_id,
            token=generate_session_token(),
            expires_at=session_expiry(),
        )
        self.session.add(auth_session)
        await self.session.commit()
        await self.session.refresh(auth_session)
        return auth_session

    async def get_valid_session(self, token: str) -> AuthSession | None:
        """Return the session for ``token`` only while it is unexpired.

        Expiry is filtered in SQL and checked again here, so an expired row
        that has not been purged yet never authenticates.
        """
        now = datetime.now(UTC)
        stmt = select(AuthSession).where(
            AuthSession.token == token,
            AuthSession.expires_at > now,
        )
        auth_session = await self.session.scalar(stmt)
        if auth_session is None:
            return None
        if as_utc(auth_session.expires_at) <= now:
            return None
        return auth_session

    async def delete_session(self, token: str) -> None:
        """Remove a session. Unknown tokens are ignored."""
        await self.session.execute(
            delete(AuthSession)
            .where(AuthSession.token == token)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

    async def purge_expired_sessions(self) -> int:
        result = await self.session.execute(
            delete(AuthSession)
            .where(AuthSession.expires_at <= datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        purged = result.rowcount or 0
        await logger.ainfo("sessions_purged", count=purged)
        return purged

    # --- Authorization gate ---

    async def require_account(self, token: str | None, *, admin_only: bool = False) -> HRAccount:
        """Resolve a session token to its account, enforcing the admin role if asked."""
        if not token:
            raise UnauthenticatedError("Not authenticated")

        auth_session = await self.get_valid_session(token)
        if auth_session is None:
            raise UnauthenticatedError("Invalid or expired session")

        account = await self.get_account(auth_session.account_id)
        if account is None:
            raise AccountNotFoundError()

        if admin_only and account.role != AccountRole.ADMIN:
            await logger.awarning("admin_access_denied", account_id=account.id)
            raise ForbiddenRoleError()

        return account
