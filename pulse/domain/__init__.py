from pulse.domain.models import (
    CompanyInsight,
    DemographicBreakdown,
    LabelCount,
    SectionAverages,
    SurveyStats,
    WellbeingFilters,
    WellbeingIndices,
)

__all__ = [
    "CompanyInsight",
    "DemographicBreakdown",
    "LabelCount",
    "SectionAverages",
    "SurveyStats",
    "WellbeingFilters",
    "WellbeingIndices",
]
