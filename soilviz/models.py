"""Top-level result models for soilviz site reports."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from soilviz.cdl.models import CDLYearData
from soilviz.esd.models import FarmerFriendlyESD
from soilviz.lcc.models import FormattedLCC
from soilviz.osd.models import OSDDescriptionEntry
from soilviz.ssurgo.models import MapUnit


class SiteReport(BaseModel):
    """Everything known about the soil at one point.

    Upstream failures never raise; they are recorded in ``errors`` (a
    section could not be produced) or ``warnings`` (a section was skipped
    or is unavailable for this location).
    """

    latitude: float
    longitude: float
    coordinates: str = Field(..., description="Display form, e.g. '45.000000°N, 120.000000°W'")
    us_region: str | None = Field(None, description="CONUS, AK or HI")
    map_unit: MapUnit | None = None
    dominant_component: str | None = None
    lcc: FormattedLCC | None = None
    ecological_site: FarmerFriendlyESD | None = None
    osd_description: OSDDescriptionEntry | None = None
    cdl_history: list[CDLYearData] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def ok(self) -> bool:
        return not self.errors


class ProviderStatus(BaseModel):
    name: str
    available: bool
    coverage: str | None = None
    error: str | None = None
