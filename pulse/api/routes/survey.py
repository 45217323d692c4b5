"""Survey answer routes: fetch, partial save, final submission, metadata."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.api.deps import get_db_session
from pulse.api.schemas.employees import CorporateEmail
from pulse.api.schemas.survey import (
    AnswerOptionOut,
    SaveSurveyRequest,
    SectionOut,
    SubmitSurveyRequest,
    SurveyMetaResponse,
    SurveyResponseOut,
    answer_values,
)
from pulse.domain import reference_data, scoring
from pulse.domain.services.survey import SurveyService

router = APIRouter(prefix="/survey", tags=["Survey"])


@router.get("/response", response_model=SurveyResponseOut | None)
async def get_response(
    email: CorporateEmail = Query(...),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SurveyResponseOut | None:
    """Return the participant's stored answers, or null before the first save."""
    response = await SurveyService(session).get_by_email(email)
    if response is None:
        return None
    return SurveyResponseOut.model_validate(response)


@router.post("/save", response_model=SurveyResponseOut)
async def save_progress(
    payload: SaveSurveyRequest,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SurveyResponseOut:
    """Merge a partial answer map into the stored one."""
    response = await SurveyService(session).save_progress(
        payload.email,
        answer_values(payload.answers),
        is_complete=payload.is_complete,
    )
    return SurveyResponseOut.model_validate(response)


@router.post("/submit", response_model=SurveyResponseOut)
async def submit(
    payload: SubmitSurveyRequest,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SurveyResponseOut:
    """Finalize the survey with all 50 answers."""
    response = await SurveyService(session).submit_final(
        payload.email, answer_values(payload.answers)
    )
    return SurveyResponseOut.model_validate(response)


@router.get("/meta", response_model=SurveyMetaResponse)
async def survey_meta() -> SurveyMetaResponse:
    """Sections, answer scale and demographic options for survey clients."""
    return SurveyMetaResponse(
        question_count=scoring.QUESTION_COUNT,
        sections=[
            SectionOut(
                letter=section.letter,
                title=section.title,
                first_question=section.first,
                last_question=section.last,
            )
            for section in scoring.SECTIONS
        ],
        answer_scale=[AnswerOptionOut(value=answer.value, score=answer.score) for answer in scoring.Answer],
        departments=list(reference_data.DEPARTMENTS),
        education_levels=list(reference_data.EDUCATION_LEVELS),
        genders=list(reference_data.GENDERS),
        working_tenures=list(reference_data.WORKING_TENURES),
    )
