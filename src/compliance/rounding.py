"""
Canonical rounding for FuelEU quantities.

Physical quantities (gCO2eq, MJ, gCO2eq/MJ) are carried at 5 decimal
places; monetary penalties are whole EUR.
"""

DECIMALS = 5


def round5(value: float) -> float:
    """Round a gCO2eq / MJ quantity to 5 decimal places."""
    result = round(value, DECIMALS)
    # Normalise -0.0 so stored values compare and serialise cleanly
    return result + 0.0 if result == 0 else result


def round_penalty_eur(value: float) -> int:
    """Round a penalty amount to the nearest whole EUR."""
    return int(round(value))
