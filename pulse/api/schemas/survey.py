"""Pydantic schemas for the survey endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, Field, StringConstraints

from pulse.api.schemas.base import CamelModel
from pulse.api.schemas.employees import CorporateEmail
from pulse.domain.scoring import QUESTION_COUNT, Answer

# Question numbers "1".."50", no leading zeros
QuestionKey = Annotated[str, StringConstraints(pattern=r"^(?:[1-9]|[1-4][0-9]|50)$")]
AnswerMapIn = dict[QuestionKey, Answer]


def _require_every_question(answers: dict[str, Answer]) -> dict[str, Answer]:
    if len(answers) != QUESTION_COUNT:
        raise ValueError(f"All {QUESTION_COUNT} questions must be answered")
    return answers


def answer_values(answers: dict[str, Answer]) -> dict[str, str]:
    """Plain label strings as stored in the answer map."""
    return {key: answer.value for key, answer in answers.items()}


class SaveSurveyRequest(CamelModel):
    email: CorporateEmail
    answers: AnswerMapIn
    is_complete: bool = False


class SubmitSurveyRequest(CamelModel):
    email: CorporateEmail
    answers: Annotated[AnswerMapIn, AfterValidator(_require_every_question)]


class SurveyResponseOut(CamelModel):
    id: str
    response_number: int
    user_email: str
    company_id: int | None = None
    company_domain: str | None = None
    answers: dict[str, str] = Field(default_factory=dict)
    is_complete: bool
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


# --- Survey metadata ---


class SectionOut(CamelModel):
    letter: str
    title: str
    first_question: int
    last_question: int


class AnswerOptionOut(CamelModel):
    value: str
    score: int


class SurveyMetaResponse(CamelModel):
    question_count: int
    sections: list[SectionOut]
    answer_scale: list[AnswerOptionOut]
    departments: list[str]
    education_levels: list[str]
    genders: list[str]
    working_tenures: list[str]
