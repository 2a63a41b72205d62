"""SSURGO soil survey data through USDA NRCS Soil Data Access."""

from soilviz.ssurgo.models import Component, Horizon, Interpretation, MapUnit
from soilviz.ssurgo.sda import SoilDataAccessClient

__all__ = ["Component", "Horizon", "Interpretation", "MapUnit", "SoilDataAccessClient"]
