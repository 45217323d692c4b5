"""Domain services."""

from pulse.domain.services.analytics import (
    AnalyticsService,
    ResponseNotFoundError,
    ResponseWithEmployee,
)
from pulse.domain.services.auth_service import AuthService, scoped_company_id
from pulse.domain.services.certifications import (
    CertificationNotFoundError,
    CertificationService,
)
from pulse.domain.services.companies import CompanyNotFoundError, CompanyService
from pulse.domain.services.employees import EmployeeNotFoundError, EmployeeService
from pulse.domain.services.survey import ConcurrentUpdateError, SurveyService

__all__ = [
    "AnalyticsService",
    "AuthService",
    "CertificationNotFoundError",
    "CertificationService",
    "CompanyNotFoundError",
    "CompanyService",
    "ConcurrentUpdateError",
    "EmployeeNotFoundError",
    "EmployeeService",
    "ResponseNotFoundError",
    "ResponseWithEmployee",
    "SurveyService",
]
