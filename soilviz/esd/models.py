"""Models for EDIT ecological site descriptions."""

from typing import Any

from pydantic import BaseModel, Field


class EcoclassId(BaseModel):
    """An ecological site id split into the parts used to build EDIT URLs."""

    catalog: str = Field("esd", description="EDIT catalog, always 'esd'")
    geo_unit: str = Field(..., description="MLRA geographic unit, e.g. '128X'")
    ecoclass: str = Field(..., description="Full id, e.g. 'F128XY001TN'")


class ESDImage(BaseModel):
    url: str
    caption: str


class BasicInfo(BaseModel):
    site_name: str
    location: str
    suitability: str
    key_message: str
    ecoclass_concept: str = ""


class LandCharacteristics(BaseModel):
    terrain: str
    landforms: str
    soils: str
    climate: str
    elevation: str
    slopes: str


class Productivity(BaseModel):
    dominant_vegetation: str
    expected_yields: str = ""
    best_uses: list[str] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)


class Management(BaseModel):
    opportunities: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    considerations: list[str] = Field(default_factory=list)


class Resources(BaseModel):
    images: list[ESDImage] = Field(default_factory=list)
    additional_info: str | None = None


class FarmerFriendlyESD(BaseModel):
    """Ecological site description summarized for land managers."""

    basic_info: BasicInfo
    land_characteristics: LandCharacteristics
    productivity: Productivity
    management: Management
    resources: Resources
    raw_data: dict[str, Any] | None = Field(
        None, description="Full EDIT payload for detailed display"
    )
