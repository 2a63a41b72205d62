"""Ecological site descriptions from the EDIT database."""

from soilviz.esd.client import (
    EcologicalSiteNotFoundError,
    EditClient,
    parse_ecoclass_id,
)
from soilviz.esd.formatter import format_esd_for_farmers
from soilviz.esd.models import EcoclassId, FarmerFriendlyESD

__all__ = [
    "EcoclassId",
    "EcologicalSiteNotFoundError",
    "EditClient",
    "FarmerFriendlyESD",
    "format_esd_for_farmers",
    "parse_ecoclass_id",
]
