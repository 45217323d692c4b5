"""CSV rendering of completed responses joined to their employees."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime

from pulse.core.auth import as_utc
from pulse.domain import scoring
from pulse.domain.services.analytics import ResponseWithEmployee

CSV_HEADER: tuple[str, ...] = (
    "Response Number",
    "Email",
    "First Name",
    "Last Name",
    "Department",
    "Education Level",
    "Gender",
    "Working Tenure",
    "Completed At",
    *(f"Section {section.letter} Avg" for section in scoring.SECTIONS),
)


def quote(value: str | None) -> str:
    """Double-quote a text field, doubling embedded quotes. Empty stays empty."""
    if not value:
        return ""
    return '"' + value.replace('"', '""') + '"'


def format_timestamp(value: datetime | None) -> str:
    """ISO 8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if value is None:
        return ""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def section_cells(answers: scoring.AnswerMap) -> list[str]:
    """Per-section average for one response, over answered questions only."""
    return [
        f"{scoring.pooled_average([answers], section.questions):.2f}"
        for section in scoring.SECTIONS
    ]


def csv_row(item: ResponseWithEmployee) -> str:
    response, employee = item.response, item.employee
    cells = [
        str(response.response_number),
        quote(employee.email),
        quote(employee.first_name),
        quote(employee.last_name),
        quote(employee.department),
        quote(employee.education_level),
        quote(employee.gender),
        quote(employee.working_tenure),
        format_timestamp(response.completed_at),
        *section_cells(response.answers or {}),
    ]
    return ",".join(cells)


def build_responses_csv(items: Iterable[ResponseWithEmployee]) -> str:
    lines = [",".join(CSV_HEADER)]
    lines.extend(csv_row(item) for item in items)
    return "\n".join(lines) + "\n"


def export_filename(today: date | None = None) -> str:
    today = today or datetime.now(UTC).date()
    return f"survey-responses-{today.isoformat()}.csv"
