"""
UTR to NTRP conversion.

UTR (1.0-16.5) maps onto NTRP (2.5-7.0) piecewise linearly: each whole UTR
point between 1 and 10 is worth half an NTRP point, anything below 1.0 is
floored at 2.5 and anything from 10.0 up is capped at 7.0. Converted ratings
are reported on the half-point NTRP grid, rounding ties upwards.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from courtmate.features.scheduling.domain.errors import InvalidParameterError

UTR_MIN = 1.0
UTR_MAX = 16.5
NTRP_MIN = 2.5
NTRP_MAX = 7.0
UTR_CAP = 10.0
NTRP_PER_UTR = 0.5


def utr_to_ntrp_raw(utr: float) -> float:
    """Unrounded NTRP equivalent of a UTR rating."""
    if not math.isfinite(utr):
        raise InvalidParameterError(f"UTR rating must be a finite number, got {utr!r}", "utr")

    if utr < UTR_MIN:
        return NTRP_MIN
    if utr >= UTR_CAP:
        return NTRP_MAX

    band = min(math.floor(utr), int(UTR_CAP) - 1)
    band_floor = NTRP_MIN + (band - UTR_MIN) * NTRP_PER_UTR
    return band_floor + (utr - band) * NTRP_PER_UTR


def round_to_half(value: float) -> float:
    """Round to the nearest 0.5, ties go up (5.25 -> 5.5)."""
    doubled = Decimal(str(value)) * 2
    return float(doubled.quantize(Decimal("1"), rounding=ROUND_HALF_UP) / 2)


def utr_to_ntrp(utr: float) -> float:
    return round_to_half(utr_to_ntrp_raw(utr))
