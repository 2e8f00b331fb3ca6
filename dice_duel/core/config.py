"""
config.py
Defines the MatchConfig dataclass, which centralizes the rule options and match-level policies
for a human-vs-AI Liar's Dice match.
Related modules:
- engine.py: Uses MatchConfig to create and run a match.
- turns.py: Reads the starting-player and tie-break policies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .state import Player


class StartingPlayer(Enum):
    """
    Which side opens the bidding of a round.
        HUMAN: the human opens every round.
        AI: the AI opens every round.
        ALTERNATE: the human opens odd rounds, the AI opens even rounds.
    """
    HUMAN = "human"
    AI = "ai"
    ALTERNATE = "alternate"

    def opener(self, round_number: int) -> Player:
        if self is StartingPlayer.HUMAN:
            return Player.HUMAN
        if self is StartingPlayer.AI:
            return Player.AI
        return Player.HUMAN if round_number % 2 == 1 else Player.AI


class TieBreak(Enum):
    """
    Who takes the match when both sides have the same number of round wins after the last round.
        HUMAN: the human wins ties.
        AI: the AI wins ties.
        LAST_ROUND_WINNER: the winner of the final round takes the match.
    """
    HUMAN = "human"
    AI = "ai"
    LAST_ROUND_WINNER = "last_round_winner"


@dataclass(frozen=True)
class MatchConfig:
    """
    Rule options and policies for one match.
    Fields:
        dice_per_player (int): Dice rolled by each side at the start of every round.
        max_rounds (int): Number of rounds in the match.
        faces (tuple): Allowed die faces.
        starting_player (StartingPlayer): Opening-player policy.
        tie_break (TieBreak): Match winner policy when round wins are level.
        rng_seed (int|None): Seed for reproducible dice; None draws fresh entropy.
    """
    dice_per_player: int = 5
    max_rounds: int = 5
    faces: Tuple[int, ...] = (1, 2, 3, 4, 5, 6)
    starting_player: StartingPlayer = StartingPlayer.HUMAN
    tie_break: TieBreak = TieBreak.HUMAN
    rng_seed: Optional[int] = None

    def __post_init__(self):
        if self.dice_per_player < 1:
            raise ValueError("dice_per_player must be at least 1")
        if self.max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
        if tuple(self.faces) != (1, 2, 3, 4, 5, 6):
            raise ValueError("only six-sided dice with faces 1-6 are supported")

    @property
    def total_dice(self) -> int:
        """Dice in play across both hands."""
        return self.dice_per_player * 2
