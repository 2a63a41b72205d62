"""Models for Cropland Data Layer lookups."""

from typing import Any

from pydantic import BaseModel, Field


class CDLYearData(BaseModel):
    """Crop classification of one point in one CDL year."""

    year: int
    crop_code: int
    crop_name: str
    color: str
    confidence: int | None = Field(
        None, description="Percent; estimated from NASS accuracy when not reported"
    )
    crop_type: str | None = None
    transition_warning: str | None = None


class STACAsset(BaseModel):
    href: str
    type: str | None = None
    title: str | None = None
    roles: list[str] = Field(default_factory=list)


class STACItem(BaseModel):
    id: str
    type: str = "Feature"
    assets: dict[str, STACAsset] = Field(default_factory=dict)
    bbox: list[float] | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class CDLLegendEntry(BaseModel):
    label: str
    color: str
    value: int
