# structurescan/schemas/labels.py
from __future__ import annotations

from enum import Enum

# =========================
# Classifier output classes
# =========================


class DamageClass(str, Enum):
    """
    The six classifier outputs, declared in model output order.
    Position in this enum IS the index in the raw confidence vector.
    """

    crack_high = "crack_high"
    crack_moderate = "crack_moderate"
    crack_low = "crack_low"
    paint = "paint"
    algae = "algae"
    plain = "plain"

    @property
    def position(self) -> int:
        return _CLASS_ORDER.index(self)


_CLASS_ORDER: list[DamageClass] = list(DamageClass)

# Damage classes only (Plain excluded)
DAMAGE_CLASSES: tuple[DamageClass, ...] = tuple(c for c in DamageClass if c is not DamageClass.plain)


# =========================
# Damage taxonomy
# =========================


class DamageType(str, Enum):
    spalling = "Spalling"
    major_crack = "Major Crack"
    minor_crack = "Minor Crack"
    paint_damage = "Paint Damage"
    algae = "Algae"


class DamageLevel(str, Enum):
    high = "High"
    moderate = "Moderate"
    low = "Low"


class ImageRisk(str, Enum):
    """Single-photo (and aggregated) risk verdict. Total order: High > Moderate > Low > None."""

    high = "High"
    moderate = "Moderate"
    low = "Low"
    none = "None"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]

    @property
    def risk_label(self) -> str:
        """Report form used by the results screens and stored documents."""
        if self is ImageRisk.none:
            return "No Risk"
        return f"{self.value} Risk"


_RISK_RANK: dict[ImageRisk, int] = {
    ImageRisk.none: 0,
    ImageRisk.low: 1,
    ImageRisk.moderate: 2,
    ImageRisk.high: 3,
}


class SeverityTier(str, Enum):
    high = "HIGH"
    moderate = "MODERATE"
    low = "LOW"
    good = "GOOD"


# =========================
# Closed mappings
# =========================

# Classifier class → reported damage type (Plain has no damage type)
CLASS_TO_DAMAGE_TYPE: dict[DamageClass, DamageType] = {
    DamageClass.crack_high: DamageType.spalling,
    DamageClass.crack_moderate: DamageType.major_crack,
    DamageClass.crack_low: DamageType.minor_crack,
    DamageClass.paint: DamageType.paint_damage,
    DamageClass.algae: DamageType.algae,
}

# Reverse of the above; a damage type always comes from exactly one class
DAMAGE_TYPE_CLASS: dict[DamageType, DamageClass] = {t: c for c, t in CLASS_TO_DAMAGE_TYPE.items()}

# Each damage type is always reported with exactly one level
DAMAGE_TYPE_LEVEL: dict[DamageType, DamageLevel] = {
    DamageType.spalling: DamageLevel.high,
    DamageType.major_crack: DamageLevel.high,
    DamageType.minor_crack: DamageLevel.low,
    DamageType.paint_damage: DamageLevel.low,
    DamageType.algae: DamageLevel.moderate,
}

# Label shown for an arg-max on the Plain class
PLAIN_LABEL = "Plain"


# =========================
# Building areas
# =========================


class AreaType(str, Enum):
    foundation = "FOUNDATION"
    exterior_walls = "EXTERIOR_WALLS"
    load_bearing_walls = "LOAD_BEARING_WALLS"
    columns = "COLUMNS"
    basement = "BASEMENT"
    roof = "ROOF"
    interior_walls = "INTERIOR_WALLS"
    ceiling = "CEILING"
    floors = "FLOORS"
    windows_doors = "WINDOWS_DOORS"
    plumbing = "PLUMBING"
    electrical = "ELECTRICAL"
    hvac = "HVAC"
    other = "OTHER"

    @property
    def display_name(self) -> str:
        return AREA_TYPE_INFO[self][0]

    @property
    def description(self) -> str:
        return AREA_TYPE_INFO[self][1]


AREA_TYPE_INFO: dict[AreaType, tuple[str, str]] = {
    AreaType.foundation: ("Foundation", "Building foundation and footing"),
    AreaType.exterior_walls: ("Exterior Walls", "Outer load-bearing walls"),
    AreaType.load_bearing_walls: ("Load-Bearing Walls", "Interior structural walls"),
    AreaType.columns: ("Columns/Pillars", "Vertical support structures"),
    AreaType.basement: ("Basement", "Below-grade structure"),
    AreaType.roof: ("Roof", "Roof surface and structure"),
    AreaType.interior_walls: ("Interior Walls", "Non-load-bearing partition walls"),
    AreaType.ceiling: ("Ceiling", "Interior ceiling finishes"),
    AreaType.floors: ("Floors", "Floor surfaces and finishes"),
    AreaType.windows_doors: ("Windows & Doors", "Openings and fixtures"),
    AreaType.plumbing: ("Plumbing", "Water and drainage systems"),
    AreaType.electrical: ("Electrical", "Electrical systems and fixtures"),
    AreaType.hvac: ("HVAC", "Heating, ventilation, and air conditioning"),
    AreaType.other: ("Other", "Other building components"),
}


def area_type_from_name(name: str) -> AreaType:
    """
    Resolve a folder/area name to an AreaType by enum value or display name
    (case-insensitive, '-', '_' and spaces interchangeable). Unknown → OTHER.
    """

    def _norm(s: str) -> str:
        return "".join(ch for ch in s.lower() if ch.isalnum())

    key = _norm(name)
    if not key:
        return AreaType.other
    for at in AreaType:
        if key in (_norm(at.value), _norm(at.display_name)):
            return at
    return AreaType.other

