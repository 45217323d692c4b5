"""Initial schema for companies, accounts, sessions, survey responses and certifications

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

account_role_enum = sa.Enum("hr", "admin", name="account_role")
certification_status_enum = sa.Enum("active", "revoked", "expired", name="certification_status")
json_document = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("domain", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("hr_email", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_companies_domain", "companies", ["domain"], unique=True)

    op.create_table(
        "hr_accounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", account_role_enum, nullable=False, server_default="hr"),
        sa.Column(
            "must_reset_password", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_hr_accounts_company_id", "hr_accounts", ["company_id"])
    op.create_index("ix_hr_accounts_email", "hr_accounts", ["email"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("hr_accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index("ix_sessions_account_id", "sessions", ["account_id"])
    op.create_index("ix_sessions_token", "sessions", ["token"], unique=True)
    op.create_index("ix_sessions_expires_at", "sessions", ["expires_at"])

    op.create_table(
        "users",
        sa.Column("email", sa.String(length=255), primary_key=True),
        sa.Column("first_name", sa.String(length=128), nullable=True),
        sa.Column("last_name", sa.String(length=128), nullable=True),
        sa.Column("company", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=128), nullable=True),
        sa.Column("education_level", sa.String(length=128), nullable=True),
        sa.Column("gender", sa.String(length=64), nullable=True),
        sa.Column("age", sa.String(length=32), nullable=True),
        sa.Column("working_tenure", sa.String(length=64), nullable=True),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_users_company_id", "users", ["company_id"])

    op.create_table(
        "survey_responses",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("response_number", sa.Integer(), nullable=False),
        sa.Column(
            "user_email",
            sa.String(length=255),
            sa.ForeignKey("users.email", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("company_domain", sa.String(length=255), nullable=True),
        sa.Column("answers", json_document, nullable=False),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
    )
    op.create_index(
        "ix_survey_responses_response_number", "survey_responses", ["response_number"], unique=True
    )
    op.create_index("ix_survey_responses_company_id", "survey_responses", ["company_id"])
    op.create_index("ix_survey_responses_company_domain", "survey_responses", ["company_domain"])
    op.create_index("ix_survey_responses_is_complete", "survey_responses", ["is_complete"])

    op.create_table(
        "id_counters",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.Integer(), nullable=False, server_default="0"),
    )
    op.bulk_insert(
        sa.table("id_counters", sa.column("key", sa.String), sa.column("value", sa.Integer)),
        [{"key": "survey_response_number", "value": 0}],
    )

    op.create_table(
        "certifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("certificate_number", sa.String(length=64), nullable=False, unique=True),
        sa.Column(
            "issued_by",
            sa.Integer(),
            sa.ForeignKey("hr_accounts.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "valid_from", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "status", certification_status_enum, nullable=False, server_default="active"
        ),
        sa.Column("metadata", json_document, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_certifications_company_id", "certifications", ["company_id"])


def downgrade() -> None:
    op.drop_index("ix_certifications_company_id", table_name="certifications")
    op.drop_table("certifications")
    op.drop_table("id_counters")
    op.drop_index("ix_survey_responses_is_complete", table_name="survey_responses")
    op.drop_index("ix_survey_responses_company_domain", table_name="survey_responses")
    op.drop_index("ix_survey_responses_company_id", table_name="survey_responses")
    op.drop_index("ix_survey_responses_response_number", table_name="survey_responses")
    op.drop_table("survey_responses")
    op.drop_index("ix_users_company_id", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_sessions_expires_at", table_name="sessions")
    op.drop_index("ix_sessions_token", table_name="sessions")
    op.drop_index("ix_sessions_account_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_hr_accounts_email", table_name="hr_accounts")
    op.drop_index("ix_hr_accounts_company_id", table_name="hr_accounts")
    op.drop_table("hr_accounts")
    op.drop_index("ix_companies_domain", table_name="companies")
    op.drop_table("companies")
    certification_status_enum.drop(op.get_bind(), checkfirst=True)
    account_role_enum.drop(op.get_bind(), checkfirst=True)
