# itinerary.py
# Typed records built from the routing provider's response.

from dataclasses import dataclass, field
from typing import Tuple

from .units import meters_to_miles


@dataclass(frozen=True)
class Step:
    """One instruction of a route, already stripped of markup."""
    instruction: str
    distance_meters: float


@dataclass(frozen=True)
class Itinerary:
    """A successful route lookup: total distance plus the ordered steps."""
    distance_meters: float
    steps: Tuple[Step, ...]


@dataclass(frozen=True)
class DisplayRow:
    instruction: str
    meters: float
    miles: float = field(init=False)

    def __post_init__(self):
        # frozen, so go through object.__setattr__
        object.__setattr__(self, "miles", meters_to_miles(self.meters))

    def as_list(self) -> list:
        return [self.instruction, self.meters, self.miles]
