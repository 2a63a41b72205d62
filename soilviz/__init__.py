"""soilviz: US soil survey, ecological site and cropland data for a point."""

__version__ = "0.1.0"

from .models import SiteReport
from .service import SoilSurveyService

__all__ = ["SiteReport", "SoilSurveyService"]
