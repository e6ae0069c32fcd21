"""
Per-object bookkeeping of the three closest medoids.

Each object keeps a Reco with its nearest, second and third nearest medoid
(slot index into the medoid list plus distance). Unassigned entries carry slot
None and an infinite distance, so they compare as "infinitely far".
"""

from dataclasses import dataclass
import math
from typing import Optional

__all__ = [
    "DistancePair",
    "UNASSIGNED",
    "Reco",
    "loss_ratio",
]


@dataclass(frozen=True)
class DistancePair:
    """Medoid slot and the distance to it."""

    i: Optional[int]
    d: float

    @property
    def assigned(self) -> bool:
        return self.i is not None


UNASSIGNED = DistancePair(None, math.inf)


@dataclass
class Reco:
    """Nearest, second and third nearest medoid of one object."""

    near: DistancePair = UNASSIGNED
    seco: DistancePair = UNASSIGNED
    third: DistancePair = UNASSIGNED

    def insert(self, slot: int, d: float) -> None:
        """
        Sorted insert of a medoid into the fixed-size triplet.

        Ties keep the entry already present in front.

        @param slot: medoid slot index
        @param d: distance of this object to the medoid in that slot
        """
        if d < self.near.d:
            self.third = self.seco
            self.seco = self.near
            self.near = DistancePair(slot, d)
        elif not self.seco.assigned or d < self.seco.d:
            self.third = self.seco
            self.seco = DistancePair(slot, d)
        elif not self.third.assigned or d < self.third.d:
            self.third = DistancePair(slot, d)

    def promote(self, slot: int) -> None:
        """
        Make the object itself the nearest medoid at distance zero.

        @param slot: medoid slot the object now occupies
        """
        self.third = self.seco
        self.seco = self.near
        self.near = DistancePair(slot, 0)


def loss_ratio(a, b) -> float:
    """
    Distance ratio a / b used by the medoid silhouette.

    Returns 0 when either distance is exactly zero, so an object that coincides
    with its medoid (or with two medoids) never divides by zero.

    @param a: distance to the nearest medoid
    @param b: distance to the second nearest medoid
    @return: a / b as float, or 0.0
    """
    if a == 0 or b == 0:
        return 0.0
    return float(a) / float(b)
