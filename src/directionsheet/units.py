# units.py
from decimal import Decimal
from numbers import Real
from typing import Optional

METERS_PER_KILOMETER = 1000
MILES_PER_KILOMETER = 0.621371


def meters_to_miles(value) -> Optional[float]:
    """
    Converts a distance in meters to miles.

    Safe to use anywhere a formula would be: non-numeric input (text, blanks,
    booleans, complex numbers, None) gives back None instead of raising.
    """
    if isinstance(value, Decimal):
        # Decimal does not mix with the float factor
        value = float(value)
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    return value / METERS_PER_KILOMETER * MILES_PER_KILOMETER
