"""SSURGO map unit, component, horizon and interpretation records.

Field names follow the SSURGO column names returned by Soil Data Access so
that rows can be validated directly. SDA serializes every value as a string;
pydantic coerces numeric columns.
"""

from pydantic import BaseModel, Field


class Horizon(BaseModel):
    """One ``chorizon`` row (representative values)."""

    chkey: str
    hzname: str | None = None
    hzdept_r: float | None = Field(None, description="Top depth (cm)")
    hzdepb_r: float | None = Field(None, description="Bottom depth (cm)")
    sandtotal_r: float | None = None
    silttotal_r: float | None = None
    claytotal_r: float | None = None
    om_r: float | None = Field(None, description="Organic matter (%)")
    ph1to1h2o_r: float | None = None
    awc_r: float | None = Field(None, description="Available water capacity (cm/cm)")
    ksat_r: float | None = Field(None, description="Saturated conductivity (um/s)")
    dbthirdbar_r: float | None = None
    cec7_r: float | None = None
    pi_r: float | None = None
    lep_r: float | None = None
    ec_r: float | None = None


class Interpretation(BaseModel):
    """A ``cointerp`` rating for a component."""

    name: str | None = Field(None, description="Rule name (mrulename)")
    depth: int | None = Field(None, description="Rule depth (ruledepth)")
    rating: str | None = Field(None, description="Rating class (interphr)")
    value: float = Field(0.0, description="Rating value (interphrc), 0 when absent")


class Component(BaseModel):
    """A map unit component with its limitations, taxonomy and horizons."""

    cokey: str
    compname: str | None = None
    comppct_r: float | None = None
    majcompflag: str | None = None
    slope_r: float | None = None
    runoff: str | None = None
    nirrcapcl: str | None = None
    nirrcapscl: str | None = None
    irrcapcl: str | None = None
    irrcapscl: str | None = None
    drainagecl: str | None = None
    hydricrating: str | None = None
    taxtempcl: str | None = None
    frostact: str | None = None
    ecoclassid: str | None = None
    ecoclassname: str | None = None
    taxclname: str | None = None
    taxorder: str | None = None
    taxsuborder: str | None = None
    taxgrtgroup: str | None = None
    taxsubgrp: str | None = None
    pondfreqcl: str | None = None
    ponddurcl: str | None = None
    flodfreqcl: str | None = None
    floddurcl: str | None = None
    reskind: str | None = None
    resdept_r: float | None = None
    reshard: str | None = None
    wtdepannmin: float | None = Field(None, description="Annual minimum water table depth (cm)")
    horizons: list[Horizon] = Field(default_factory=list)
    interpretations: list[Interpretation] = Field(default_factory=list)

    @property
    def is_major(self) -> bool:
        return self.majcompflag == "Yes"

    @property
    def surface_horizon(self) -> Horizon | None:
        return self.horizons[0] if self.horizons else None


class MapUnit(BaseModel):
    """SSURGO map unit intersecting a point."""

    mukey: str
    musym: str | None = None
    muname: str | None = None
    muacres: float | None = None
    areasymbol: str | None = None
    areaname: str | None = None
    components: list[Component] = Field(default_factory=list)

    def dominant_component(self) -> Component | None:
        """Largest major component, else the first component."""
        major = [c for c in self.components if c.is_major]
        if major:
            return max(major, key=lambda c: c.comppct_r or 0)
        return self.components[0] if self.components else None
