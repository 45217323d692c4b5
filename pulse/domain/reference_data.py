"""Static reference data served to survey clients."""

from __future__ import annotations

FREE_EMAIL_DOMAINS: frozenset[str] = frozenset(
    {
        "gmail.com",
        "yahoo.com",
        "hotmail.com",
        "outlook.com",
        "icloud.com",
        "mail.com",
        "aol.com",
        "protonmail.com",
    }
)

DEPARTMENTS: tuple[str, ...] = (
    "Human Resources",
    "Finance",
    "Engineering",
    "Sales",
    "Marketing",
    "Operations",
    "Customer Support",
    "Product",
    "Legal",
    "Other",
)

EDUCATION_LEVELS: tuple[str, ...] = (
    "High School",
    "Associate Degree",
    "Bachelor's Degree",
    "Master's Degree",
    "Doctoral Degree",
    "Other",
)

GENDERS: tuple[str, ...] = (
    "Male",
    "Female",
    "Non-binary",
    "Prefer not to say",
)

WORKING_TENURES: tuple[str, ...] = (
    "Less than 1 year",
    "1-2 years",
    "3-5 years",
    "6-10 years",
    "More than 10 years",
)


def email_domain(email: str) -> str:
    """Lower-cased domain part of an email address."""
    return email.lower().rsplit("@", 1)[-1]


def company_name_for(domain: str) -> str:
    """Display name derived from the first label of a domain."""
    return domain.split(".", 1)[0]


def is_free_email(email: str) -> bool:
    return email_domain(email) in FREE_EMAIL_DOMAINS
