"""
dice.py
Defines dice rolling utilities for the Liar's Dice engine.
Related modules:
- engine.py: Uses DiceRoller to roll both hands at the start of every round.
"""

import random
from typing import List, Optional


def roll_die(rng: random.Random) -> int:
    """
    Roll a single six-sided die using the provided random number generator.
    Args:
        rng (random.Random): RNG instance.
    Returns:
        int: Die face (1-6).
    """
    return rng.randint(1, 6)


def roll_n(n: int, rng: random.Random) -> List[int]:
    """
    Roll n six-sided dice using the provided RNG.
    Args:
        n (int): Number of dice to roll.
        rng (random.Random): RNG instance.
    Returns:
        list[int]: List of die faces.
    """
    return [roll_die(rng) for _ in range(n)]


class DiceRoller:
    """
    Produces concealed hands from an injectable random source.
    Pass a seeded random.Random to make every roll reproducible.
    """
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def roll(self, n: int) -> List[int]:
        if n < 0:
            raise ValueError("cannot roll a negative number of dice")
        return roll_n(n, self.rng)
