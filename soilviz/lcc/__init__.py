"""Land Capability Classification interpretation."""

from soilviz.lcc.formatter import (
    format_lcc_data,
    generate_management_summary,
    get_class_description,
    get_subclass_descriptions,
    identify_limitations,
    parse_lcc_class,
    parse_lcc_subclass,
)
from soilviz.lcc.models import FormattedLCC, LCCLimitation, LCCRating

__all__ = [
    "FormattedLCC",
    "LCCLimitation",
    "LCCRating",
    "format_lcc_data",
    "generate_management_summary",
    "get_class_description",
    "get_subclass_descriptions",
    "identify_limitations",
    "parse_lcc_class",
    "parse_lcc_subclass",
]
