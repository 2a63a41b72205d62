"""Farmer-facing translations of SSURGO capability, hydrology and drainage codes."""

from typing import Any

from soilviz.config import get_interpretations_config

DEFAULT_COLOR = "#9ca3af"

CAPABILITY_COLORS = {
    "1": "#10b981",
    "2": "#22c55e",
    "3": "#eab308",
    "4": "#f97316",
    "5": "#ef4444",
    "6": "#dc2626",
    "7": "#b91c1c",
    "8": "#6b7280",
}

HYDROLOGY_COLORS = {
    "A": "#3b82f6",
    "B": "#06b6d4",
    "C": "#eab308",
    "D": "#ef4444",
}


def get_capability_interpretation(class_num: str | int) -> dict[str, Any] | None:
    """Interpretation for an LCC class number 1-8."""
    classes = get_interpretations_config().get("land_capability", {}).get("classes", {})
    return classes.get(str(class_num))


def get_subclass_interpretation(code: str) -> dict[str, Any] | None:
    """Interpretation for an LCC subclass letter (e, w, s, c)."""
    subclasses = (
        get_interpretations_config().get("land_capability", {}).get("subclasses", {})
    )
    return subclasses.get(code.lower()) if code else None


def get_hydrologic_group_interpretation(group: str) -> dict[str, Any] | None:
    """Interpretation for a hydrologic soil group.

    Dual groups such as ``A/D`` resolve to their drained (first) letter.
    """
    if not group:
        return None
    groups = get_interpretations_config().get("hydrologic_groups", {})
    return groups.get(group.strip().upper()[:1])


def get_drainage_interpretation(drainage_class: str) -> dict[str, Any] | None:
    """Interpretation for a drainage class name, matched case-insensitively."""
    if not drainage_class:
        return None
    classes = get_interpretations_config().get("drainage_classes", {})
    wanted = drainage_class.strip().lower()
    for name, interpretation in classes.items():
        if name.lower() == wanted:
            return interpretation
    return None


def get_capability_color(class_num: str | int) -> str:
    return CAPABILITY_COLORS.get(str(class_num), DEFAULT_COLOR)


def get_hydrology_color(group: str) -> str:
    return HYDROLOGY_COLORS.get(group, DEFAULT_COLOR)


def get_drainage_color(drainage_class: str) -> str:
    """Map a drainage class to a traffic-light color.

    Checks run from driest to wettest; "poorly" catches both the somewhat
    poorly and very poorly classes.
    """
    normalized = drainage_class.lower()
    if "excessively" in normalized:
        return "#f97316"
    if "well" in normalized:
        return "#22c55e"
    if "moderately" in normalized:
        return "#06b6d4"
    if "poorly" in normalized:
        return "#eab308"
    return DEFAULT_COLOR
