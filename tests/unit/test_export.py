from __future__ import annotations

from datetime import UTC, date, datetime

from pulse.domain.services.analytics import ResponseWithEmployee
from pulse.domain.services.export import (
    CSV_HEADER,
    build_responses_csv,
    export_filename,
    quote,
)
from pulse.infrastructure.db.models import Employee, SurveyResponse
from tests.utils import full_answers, section_answers


def _item(answers: dict[str, str], **employee_fields: str | None) -> ResponseWithEmployee:
    employee = Employee(email="ana@acme.com", **employee_fields)
    response = SurveyResponse(
        response_number=7,
        user_email="ana@acme.com",
        answers=answers,
        is_complete=True,
        completed_at=datetime(2026, 10, 19, 8, 30, tzinfo=UTC),
    )
    return ResponseWithEmployee(response=response, employee=employee)


def test_header_row() -> None:
    csv_text = build_responses_csv([])
    assert csv_text == ",".join(CSV_HEADER) + "\n"
    assert csv_text.startswith("Response Number,Email,First Name,Last Name,Department,")
    assert csv_text.rstrip().endswith("Section D Avg,Section E Avg")


def test_quote_doubles_embedded_quotes_and_blanks_empty_values() -> None:
    assert quote('Ana "The Boss"') == '"Ana ""The Boss"""'
    assert quote(None) == ""
    assert quote("") == ""


def test_row_fields() -> None:
    answers = full_answers("agree")
    line = build_responses_csv([_item(answers, first_name="Ana", last_name=None, department="R&D, Labs")]).splitlines()[1]

    assert line == (
        '7,"ana@acme.com","Ana",,"R&D, Labs",,,,2026-10-19T08:30:00.000Z,'
        "4.00,4.00,4.00,4.00,4.00"
    )


def test_section_average_skips_unanswered_questions() -> None:
    answers = section_answers(1, 10, "strongly_agree")
    answers["1"] = "strongly_disagree"
    del answers["7"]

    line = build_responses_csv([_item(answers)]).splitlines()[1]
    cells = line.split(",")

    # (1 + 5 * 8) / 9 answered questions
    assert cells[-5] == "4.56"
    assert cells[-4:] == ["0.00", "0.00", "0.00", "0.00"]


def test_export_filename() -> None:
    assert export_filename(date(2026, 10, 19)) == "survey-responses-2026-10-19.csv"
