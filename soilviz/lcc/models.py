"""Models for Land Capability Classification (LCC) output."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LCCClass = Literal["I", "II", "III", "IV", "V", "VI", "VII", "VIII"]

ROMAN_CLASSES: list[str] = ["I", "II", "III", "IV", "V", "VI", "VII", "VIII"]


class LimitationType(str, Enum):
    EROSION = "erosion"
    WETNESS = "wetness"
    SOIL_LIMITATIONS = "soil_limitations"
    CLIMATE = "climate"
    ROOTING_DEPTH = "rooting_depth"
    FLOODING = "flooding"
    SLOPE = "slope"


class LimitationSeverity(str, Enum):
    SLIGHT = "slight"
    MODERATE = "moderate"
    SEVERE = "severe"
    VERY_SEVERE = "very_severe"


class LCCRating(BaseModel):
    """A capability class with its subclass letters, e.g. III + 'ew'."""

    model_config = ConfigDict(populate_by_name=True)

    lcc_class: LCCClass = Field(..., alias="class")
    subclass: str = Field("", description="Subclass letters such as 'e' or 'ew'")

    @property
    def rank(self) -> int:
        return ROMAN_CLASSES.index(self.lcc_class) + 1


class LCCLimitation(BaseModel):
    type: LimitationType
    severity: LimitationSeverity
    description: str
    value: float | str | None = None


class LCCDescription(BaseModel):
    summary: str
    description: str
    management: str
    crops: str


class SubclassDescription(BaseModel):
    code: str
    name: str
    description: str
    management: str


class ManagementSummary(BaseModel):
    suitable_crops: list[str] = Field(default_factory=list)
    conservation_practices: list[str] = Field(default_factory=list)
    key_considerations: list[str] = Field(default_factory=list)


class DominantLCC(BaseModel):
    irrigated: LCCRating | None = None
    nonirrigated: LCCRating | None = None


class ComponentLCCSummary(BaseModel):
    name: str | None = None
    percent: float | None = None
    irrigated_class: str | None = None
    irrigated_subclass: str | None = None
    nonirrigated_class: str | None = None
    nonirrigated_subclass: str | None = None


class FormattedLCC(BaseModel):
    """Land capability of a map unit, reported for both irrigation conditions."""

    dominant_lcc: DominantLCC = Field(default_factory=DominantLCC)
    irrigated_description: LCCDescription
    nonirrigated_description: LCCDescription
    irrigated_limitations: list[LCCLimitation] = Field(default_factory=list)
    nonirrigated_limitations: list[LCCLimitation] = Field(default_factory=list)
    components: list[ComponentLCCSummary] = Field(default_factory=list)
    irrigated_management: ManagementSummary = Field(default_factory=ManagementSummary)
    nonirrigated_management: ManagementSummary = Field(default_factory=ManagementSummary)
