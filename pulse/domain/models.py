from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class SurveyStats:
    total_responses: int
    completed_responses: int

    @property
    def in_progress_responses(self) -> int:
        return self.total_responses - self.completed_responses


@dataclass(slots=True)
class SectionAverages:
    section_a: float = 0.0
    section_b: float = 0.0
    section_c: float = 0.0
    section_d: float = 0.0
    section_e: float = 0.0

    @classmethod
    def from_letters(cls, averages: dict[str, float]) -> SectionAverages:
        return cls(**{f"section_{letter.lower()}": value for letter, value in averages.items()})


@dataclass(slots=True)
class CompanyInsight:
    company_domain: str
    company_name: str
    total_responses: int = 0
    completed_responses: int = 0
    average_score: float = 0.0


@dataclass(slots=True)
class WellbeingFilters:
    """Equality filters for wellbeing indices. Matching is case-sensitive."""

    department: str | None = None
    education_level: str | None = None
    gender: str | None = None
    working_tenure: str | None = None
    company_domain: str | None = None
    company_id: int | None = None


@dataclass(slots=True)
class WellbeingIndices:
    success_score: float = 0.0
    pride_index: float = 0.0
    happiness_level: float = 0.0
    overall_satisfaction: float = 0.0


@dataclass(slots=True)
class LabelCount:
    name: str
    count: int


@dataclass(slots=True)
class DemographicBreakdown:
    departments: list[LabelCount] = field(default_factory=list)
    education_levels: list[LabelCount] = field(default_factory=list)
    genders: list[LabelCount] = field(default_factory=list)
    tenures: list[LabelCount] = field(default_factory=list)
    ages: list[LabelCount] = field(default_factory=list)
