"""Basal Metabolic Rate resolution.

BMR feeds the deficit calculation. Sources, most accurate first:

1. Measured BMR from a body composition scan
2. Katch-McArdle from lean body mass (needs a body fat reading)
3. Mifflin-St Jeor from weight, height, age and sex
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from bodyintel.tracking.models import BodyCompositionScan
from bodyintel.tracking.rounding import round_half_up


class Sex(Enum):
    """Sex for the Mifflin-St Jeor constant."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class BMRSource(Enum):
    """Where a BMR value came from."""
    SCAN = "scan"
    KATCH_MCARDLE = "katch_mcardle"
    MIFFLIN_ST_JEOR = "mifflin_st_jeor"
    NONE = "none"


# Mifflin-St Jeor sex constants; 'other' uses the midpoint
MIFFLIN_SEX_CONSTANTS = {
    Sex.MALE: 5,
    Sex.FEMALE: -161,
    Sex.OTHER: -78,
}


@dataclass(frozen=True)
class BMRResult:
    """A resolved BMR and its source."""

    bmr: int
    source: BMRSource


def calculate_bmr_katch_mcardle(lean_body_mass_kg: float) -> int:
    """Calculate BMR from lean body mass using Katch-McArdle.

    BMR = 370 + 21.6 x lean body mass (kg). Sex-independent.
    """
    return round_half_up(370 + 21.6 * lean_body_mass_kg)


def calculate_bmr_mifflin_st_jeor(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Sex,
) -> int:
    """Calculate BMR using the Mifflin-St Jeor equation.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimetres
        age: Age in years
        sex: Sex

    Returns:
        BMR in kcal/day
    """
    base = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    return round_half_up(base + MIFFLIN_SEX_CONSTANTS[sex])


def lean_body_mass(scan: BodyCompositionScan) -> Optional[float]:
    """Lean body mass in kg from a scan's fat mass or body fat percent."""
    if scan.fat_mass is not None:
        return scan.weight - scan.fat_mass
    if scan.body_fat_percent > 0:
        return scan.weight * (1 - scan.body_fat_percent / 100)
    return None


def latest_scan(scans: Sequence[BodyCompositionScan]) -> Optional[BodyCompositionScan]:
    if not scans:
        return None
    return max(scans, key=lambda s: s.date)


def latest_scan_bmr(scans: Sequence[BodyCompositionScan]) -> Optional[float]:
    """BMR from the most recent scan that measured one."""
    latest = latest_scan([s for s in scans if s.has_bmr])
    return latest.bmr if latest else None


def resolve_bmr(
    scan_bmr: Optional[float] = None,
    lean_body_mass_kg: Optional[float] = None,
    weight_kg: Optional[float] = None,
    height_cm: Optional[float] = None,
    age: Optional[int] = None,
    sex: Optional[str] = None,
) -> BMRResult:
    """Pick the most accurate BMR available.

    Returns:
        BMRResult; bmr 0 with source 'none' when nothing is usable
    """
    if scan_bmr is not None and scan_bmr > 0:
        return BMRResult(bmr=round_half_up(scan_bmr), source=BMRSource.SCAN)

    if lean_body_mass_kg is not None and lean_body_mass_kg > 0:
        return BMRResult(
            bmr=calculate_bmr_katch_mcardle(lean_body_mass_kg),
            source=BMRSource.KATCH_MCARDLE,
        )

    if weight_kg and height_cm and age:
        sex_enum = Sex(sex.lower()) if sex and sex.lower() in ("male", "female") else Sex.OTHER
        return BMRResult(
            bmr=calculate_bmr_mifflin_st_jeor(weight_kg, height_cm, age, sex_enum),
            source=BMRSource.MIFFLIN_ST_JEOR,
        )

    return BMRResult(bmr=0, source=BMRSource.NONE)


def resolve_bmr_from_history(
    scans: Sequence[BodyCompositionScan],
    latest_weight_kg: Optional[float] = None,
    height_cm: Optional[float] = None,
    age: Optional[int] = None,
    sex: Optional[str] = None,
) -> BMRResult:
    """Resolve BMR from a scan series plus optional profile data."""
    newest = latest_scan(scans)
    weight_kg = latest_weight_kg if latest_weight_kg is not None else (
        newest.weight if newest else None
    )
    return resolve_bmr(
        scan_bmr=latest_scan_bmr(scans),
        lean_body_mass_kg=lean_body_mass(newest) if newest else None,
        weight_kg=weight_kg,
        height_cm=height_cm,
        age=age,
        sex=sex,
    )
