"""Loan-to-value ratio bands."""
from __future__ import annotations

from enum import Enum
from typing import List

from .calculators import safe_number
from .presets import LVR_BAND_LIMITS


class LvrBand(str, Enum):
    BAND_0_50 = "0-50"
    BAND_50_60 = "50-60"
    BAND_60_70 = "60-70"
    BAND_70_80 = "70-80"
    BAND_80_85 = "80-85"

    @property
    def min_lvr(self) -> float:
        return LVR_BAND_LIMITS[self.value][0]

    @property
    def max_lvr(self) -> float:
        return LVR_BAND_LIMITS[self.value][1]


ALL_BANDS: List[LvrBand] = list(LvrBand)

# Highest band first, the order the orchestrator prefers matches in
BANDS_DESCENDING: List[LvrBand] = list(reversed(ALL_BANDS))


def band_upper_bound(band) -> float:
    """Upper LVR of ``band`` as a decimal, e.g. ``0.8`` for ``70-80``."""
    return LvrBand(band).max_lvr


def get_lvr_band_from_lvr(lvr) -> LvrBand:
    """Map an LVR (decimal) to the band containing it.

    Bands are (lower, upper]; the lowest band also absorbs zero and negative
    values and anything above 85% is clamped into ``80-85``.
    """

    value = safe_number(lvr)
    for band in ALL_BANDS:
        if value <= band.max_lvr:
            return band
    return LvrBand.BAND_80_85


def is_lvr_within_band(lvr, band) -> bool:
    """True when ``lower < lvr <= upper`` for ``band``."""
    band = LvrBand(band)
    value = safe_number(lvr)
    return band.min_lvr < value <= band.max_lvr
