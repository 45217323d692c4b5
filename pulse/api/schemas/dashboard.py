from __future__ import annotations

from pulse.api.schemas.base import CamelModel
from pulse.api.schemas.employees import EmployeeOut
from pulse.api.schemas.survey import SurveyResponseOut
from pulse.domain.services.analytics import ResponseWithEmployee


class SurveyStatsOut(CamelModel):
    total_responses: int
    completed_responses: int
    in_progress_responses: int


class SectionAveragesOut(CamelModel):
    section_a: float
    section_b: float
    section_c: float
    section_d: float
    section_e: float


class CompanyInsightOut(CamelModel):
    company_domain: str
    company_name: str
    total_responses: int
    completed_responses: int
    average_score: float


class WellbeingMetricsOut(CamelModel):
    success_score: float
    pride_index: float
    happiness_level: float
    overall_satisfaction: float


class LabelCountOut(CamelModel):
    name: str
    count: int


class DemographicBreakdownOut(CamelModel):
    departments: list[LabelCountOut]
    education_levels: list[LabelCountOut]
    genders: list[LabelCountOut]
    tenures: list[LabelCountOut]
    ages: list[LabelCountOut]


class ResponseWithUserOut(SurveyResponseOut):
    user: EmployeeOut

    @classmethod
    def from_item(cls, item: ResponseWithEmployee) -> ResponseWithUserOut:
        response = SurveyResponseOut.model_validate(item.response)
        return cls(**response.model_dump(), user=EmployeeOut.model_validate(item.employee))
