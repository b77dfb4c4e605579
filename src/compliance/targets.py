"""
FuelEU Maritime GHG intensity target schedule.

Regulation (EU) 2023/1805, Article 4(2): the yearly limit on the GHG
intensity of energy used on board is the 2020 reference value reduced by a
fixed percentage, stepping every five years.

The absolute targets are stored as published constants alongside the
percentages. They are never recomputed at lookup time.
"""

from dataclasses import dataclass
from typing import List

# gCO2eq/MJ (2020 EU MRV reference)
REFERENCE_GHG = 91.16

# (first year of band, reduction %, target gCO2eq/MJ)
TARGET_BANDS = [
    (2025, 2.0, 89.3368),
    (2030, 6.0, 85.6904),
    (2035, 14.5, 77.9418),
    (2040, 31.0, 62.9004),
    (2045, 62.0, 34.6408),
    (2050, 80.0, 18.232),
]

REDUCTION_TARGETS = {start: pct for start, pct, _ in TARGET_BANDS}
TARGET_GHG_INTENSITY = {start: target for start, _, target in TARGET_BANDS}

FIRST_TARGET_YEAR = TARGET_BANDS[0][0]


@dataclass
class TargetBand:
    """One step of the reduction schedule."""
    start_year: int
    end_year: int  # inclusive; -1 for open-ended
    reduction_pct: float
    target_intensity: float


def target_for(year: int) -> float:
    """Return the target GHG intensity (gCO2eq/MJ) applicable in ``year``."""
    target = REFERENCE_GHG
    for start, _, band_target in TARGET_BANDS:
        if year < start:
            break
        target = band_target
    return target


def reduction_for(year: int) -> float:
    """Return the reduction percentage applicable in ``year``."""
    pct = 0.0
    for start, band_pct, _ in TARGET_BANDS:
        if year < start:
            break
        pct = band_pct
    return pct


def schedule() -> List[TargetBand]:
    """List every band of the schedule in chronological order."""
    bands = []
    for i, (start, pct, target) in enumerate(TARGET_BANDS):
        end = TARGET_BANDS[i + 1][0] - 1 if i + 1 < len(TARGET_BANDS) else -1
        bands.append(TargetBand(
            start_year=start,
            end_year=end,
            reduction_pct=pct,
            target_intensity=target,
        ))
    return bands
