"""
bid.py
Defines the Bid model for Liar's Dice, including range checks and the bid ordering.
Related modules:
- actions.py: Uses Bid in BidAction.
- rules.py: Builds the legality predicate on top of in_range and is_higher_than.
"""

from dataclasses import dataclass
from typing import Optional


MIN_FACE = 1
MAX_FACE = 6


@dataclass(frozen=True)
class Bid:
    """
    A claim that at least `count` dice across both hands show `face`.
    Args:
        count (int): Number of dice claimed.
        face (int): Face value claimed (1-6).
    """
    count: int
    face: int

    def in_range(self, total_dice: int) -> bool:
        """
        Checks the bid against the table limits.
        Args:
            total_dice (int): Dice in play across both hands.
        Returns:
            bool: True if face is in [1, 6] and count is in [1, total_dice].
        """
        return MIN_FACE <= self.face <= MAX_FACE and 1 <= self.count <= total_dice

    def is_higher_than(self, other: Optional['Bid']) -> bool:
        """
        Checks if this bid strictly outranks another bid: a higher count, or the same count
        with a higher face. Every bid outranks no bid at all.
        """
        if other is None:
            return True
        if self.count != other.count:
            return self.count > other.count
        return self.face > other.face

    def __str__(self):
        return f"{self.count} x {self.face}"
