"""Pydantic models for Official Series Description (OSD) data."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RangeCharacteristic(BaseModel):
    """A key property pulled from RANGE IN CHARACTERISTICS, with why it matters."""

    property: str
    value: str
    importance: str


class OSDNarrative(BaseModel):
    """Plain-language narrative built from an OSD text file."""

    series_name: str
    description: str = Field("", description="First descriptive paragraph")
    range_in_characteristics: str = ""
    geographic_setting: str = ""
    drainage_and_permeability: str = ""
    use_and_vegetation: str = ""
    full_description: str = Field(
        "", description="Farmer-friendly paragraphs separated by blank lines"
    )
    range_characteristics: list[RangeCharacteristic] | None = None


class OSDDescriptionEntry(BaseModel):
    """One record of the generated description database (camelCase on disk)."""

    model_config = ConfigDict(populate_by_name=True)

    series: str
    description: str
    range_characteristics: list[RangeCharacteristic] | None = Field(
        None, alias="rangeCharacteristics"
    )
    last_updated: str = Field(..., alias="lastUpdated")


class BuildReport(BaseModel):
    """Summary of a batch OSD -> JSON conversion run."""

    processed: int = 0
    errors: int = 0
    entries: int = 0
    subdirectories: int = 0
    output_file: str
    samples: dict[str, str] = Field(
        default_factory=dict, description="First descriptions, truncated for display"
    )
    failed_files: list[str] = Field(default_factory=list)


# Structured parse of a full OSD text file


class HorizonColor(BaseModel):
    dry: str | None = None
    moist: str | None = None


class DepthRange(BaseModel):
    top: int
    bottom: int


class OSDHorizon(BaseModel):
    """One horizon line from the TYPICAL PEDON section."""

    name: str
    depth: str = Field(..., description="Display depth, e.g. '0-8 inches'")
    depth_range: DepthRange
    texture: str = "Unknown"
    color: HorizonColor = Field(default_factory=HorizonColor)
    structure: str = "Unknown"
    consistence: str = "Unknown"
    features: list[str] = Field(default_factory=list)
    ph: float | None = None
    reaction: str = "Unknown"
    effervescence: str = "None"
    other: list[str] = Field(default_factory=list)


class EstablishedInfo(BaseModel):
    revision: str = ""
    date: str = ""


class TypicalPedon(BaseModel):
    description: str = ""
    horizons: list[OSDHorizon] = Field(default_factory=list)


class RangeInCharacteristics(BaseModel):
    mean_annual_soil_temp: str = ""
    clay_content: str = ""
    organic_matter: str = ""
    other: list[str] = Field(default_factory=list)


class GeographicSetting(BaseModel):
    landforms: list[str] = Field(default_factory=list)
    parent_material: str = ""
    slopes: str = ""
    climate: str = ""
    precipitation: str = ""
    temperature: str = ""
    frost_free_period: str = ""


class DrainageInfo(BaseModel):
    drainage_class: str = Field("", alias="class")
    permeability: str = ""
    runoff: str = ""
    water_table: str = ""

    model_config = ConfigDict(populate_by_name=True)


class UseAndVegetation(BaseModel):
    use: str = ""
    vegetation: str = ""


class Distribution(BaseModel):
    extent: str = ""
    mlra: list[str] = Field(default_factory=list)


class NamedRemark(BaseModel):
    name: str
    description: str


class Remarks(BaseModel):
    diagnostic_horizons: list[NamedRemark] = Field(default_factory=list)
    features: list[NamedRemark] = Field(default_factory=list)


class OSDRecord(BaseModel):
    """Structured content of one OSD text file."""

    series_name: str = ""
    state: str = ""
    established: EstablishedInfo = Field(default_factory=EstablishedInfo)
    taxonomic_class: str = ""
    typical_pedon: TypicalPedon = Field(default_factory=TypicalPedon)
    range_in_characteristics: RangeInCharacteristics = Field(
        default_factory=RangeInCharacteristics
    )
    geographic_setting: GeographicSetting = Field(default_factory=GeographicSetting)
    drainage: DrainageInfo = Field(default_factory=DrainageInfo)
    use_and_vegetation: UseAndVegetation = Field(default_factory=UseAndVegetation)
    distribution: Distribution = Field(default_factory=Distribution)
    remarks: Remarks = Field(default_factory=Remarks)


# UC Davis soil-series API


class SeriesHorizon(BaseModel):
    name: str | None = None
    depth: str
    depth_cm: DepthRange
    texture: str | None = None
    color: HorizonColor = Field(default_factory=HorizonColor)
    ph: float | None = None
    ph_class: str | None = None
    narrative: str | None = None


class ParentMaterial(BaseModel):
    material: str | None = None
    percentage: int


class ClimateStat(BaseModel):
    """Distribution of a climate variable across the series' mapped extent."""

    min: float = 0
    median: float = 0
    max: float = 0
    unit: str | None = None


class SeriesClimate(BaseModel):
    elevation: ClimateStat
    precipitation: ClimateStat
    temperature: ClimateStat
    frost_free_days: ClimateStat
    growing_degree_days: ClimateStat


class SeriesClassification(BaseModel):
    family: str | None = None
    order: str | None = None
    suborder: str | None = None
    great_group: str | None = None
    sub_group: str | None = None
    particle_size: str | None = None
    mineralogy: str | None = None
    temperature_regime: str | None = None
    reaction: str | None = None


class SeriesProperties(BaseModel):
    drainage: str | None = None
    established: int | None = None
    benchmark: bool = False
    status: str | None = None
    type_location: str | None = None
    mlra_office: str | None = None


class SeriesExtent(BaseModel):
    acres: float | None = None
    polygons: int | None = None
    mlra: list[str] = Field(default_factory=list)


class SeriesGeomorphology(BaseModel):
    terrace: list[dict[str, Any]] = Field(default_factory=list)
    flats: list[dict[str, Any]] = Field(default_factory=list)
    shape_across: list[dict[str, Any]] = Field(default_factory=list)
    shape_down: list[dict[str, Any]] = Field(default_factory=list)


class FormattedSeries(BaseModel):
    """Display-ready summary of a UC Davis soil-series response."""

    series_name: str | None = None
    classification: SeriesClassification
    properties: SeriesProperties
    extent: SeriesExtent
    horizons: list[SeriesHorizon] = Field(default_factory=list)
    parent_material: list[ParentMaterial] = Field(default_factory=list)
    climate: SeriesClimate
    geomorphology: SeriesGeomorphology
    ecological_sites: list[dict[str, Any]] = Field(default_factory=list)
    associated_soils: list[str] = Field(default_factory=list)
