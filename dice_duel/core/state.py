"""
state.py
Defines the match state dataclasses for Liar's Dice: Player, RoundResult, GamePhase, MatchState
and the immutable GameView snapshot handed to clients.
Related modules:
- engine.py: Owns and mutates the single MatchState of a match.
- turns.py: Moves GamePhase between its variants.
- persistence/serializer.py: Encodes GameView for the wire.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .actions import Action
from .bid import Bid


class Player(Enum):
    HUMAN = "Human"
    AI = "AI"

    @property
    def opponent(self) -> 'Player':
        return Player.AI if self is Player.HUMAN else Player.HUMAN


@dataclass(frozen=True)
class RoundResult:
    """
    Outcome of one resolved round, with both hands revealed.
    Fields:
        round (int): Round number the result belongs to.
        winner (Player): Side that won the challenge.
        loser (Player): Side that lost the challenge.
        human_dice (tuple): Human hand.
        ai_dice (tuple): AI hand.
        last_bid (Bid): The bid that was challenged.
        actual_count (int): Dice across both hands showing last_bid.face.
    """
    round: int
    winner: Player
    loser: Player
    human_dice: Tuple[int, ...]
    ai_dice: Tuple[int, ...]
    last_bid: Bid
    actual_count: int


class PhaseKind(Enum):
    PLAYER_TURN = "PlayerTurn"
    AI_TURN = "AITurn"
    ROUND_OVER = "RoundOver"
    GAME_OVER = "GameOver"


@dataclass(frozen=True)
class GamePhase:
    """
    Tagged union of the match phases. `kind` is the tag; `result` is set only for ROUND_OVER and
    `winner` only for GAME_OVER. Build values with the constructors below.
    """
    kind: PhaseKind
    result: Optional[RoundResult] = None
    winner: Optional[Player] = None

    @classmethod
    def player_turn(cls) -> 'GamePhase':
        return cls(PhaseKind.PLAYER_TURN)

    @classmethod
    def ai_turn(cls) -> 'GamePhase':
        return cls(PhaseKind.AI_TURN)

    @classmethod
    def round_over(cls, result: RoundResult) -> 'GamePhase':
        return cls(PhaseKind.ROUND_OVER, result=result)

    @classmethod
    def game_over(cls, winner: Player) -> 'GamePhase':
        return cls(PhaseKind.GAME_OVER, winner=winner)

    @classmethod
    def turn_of(cls, player: Player) -> 'GamePhase':
        return cls.player_turn() if player is Player.HUMAN else cls.ai_turn()

    @property
    def acting_player(self) -> Optional[Player]:
        """Side expected to act, or None outside the bidding phases."""
        if self.kind is PhaseKind.PLAYER_TURN:
            return Player.HUMAN
        if self.kind is PhaseKind.AI_TURN:
            return Player.AI
        return None


@dataclass(frozen=True)
class GameView:
    """
    Immutable snapshot returned by every command. Holds the human's own dice only; the AI hand is
    reported as a count and is revealed solely through a RoundResult.
    """
    phase: GamePhase
    human_dice: Tuple[int, ...]
    ai_dice_count: int
    human_dice_count: int
    bid_history: Tuple[Tuple[Player, Action], ...]
    current_bid: Optional[Bid]
    current_round: int
    max_rounds: int
    human_wins: int
    ai_wins: int
    last_round_result: Optional[RoundResult]


@dataclass
class MatchState:
    """
    The single mutable state of a match.
    Fields:
        human_dice (list[int]): Human hand (hidden from the AI).
        ai_dice (list[int]): AI hand (hidden from the human until reveal).
        human_dice_count (int): Dice the human rolls each round.
        ai_dice_count (int): Dice the AI rolls each round.
        phase (GamePhase): Current phase.
        bid_history (list): (Player, Action) pairs of the current round.
        current_bid (Bid|None): Highest bid of the current round.
        current_round (int): 1-based round number.
        max_rounds (int): Rounds in the match.
        human_wins (int): Rounds won by the human.
        ai_wins (int): Rounds won by the AI.
        last_round_result (RoundResult|None): Most recently resolved round.
        match_id (str|None): Identifier of the match, set by the controller.
    """
    human_dice_count: int
    ai_dice_count: int
    max_rounds: int
    human_dice: List[int] = field(default_factory=list)
    ai_dice: List[int] = field(default_factory=list)
    phase: GamePhase = field(default_factory=GamePhase.player_turn)
    bid_history: List[Tuple[Player, Action]] = field(default_factory=list)
    current_bid: Optional[Bid] = None
    current_round: int = 1
    human_wins: int = 0
    ai_wins: int = 0
    last_round_result: Optional[RoundResult] = None
    match_id: Optional[str] = None

    @property
    def total_dice(self) -> int:
        return self.human_dice_count + self.ai_dice_count

    def dice_of(self, player: Player) -> List[int]:
        return self.human_dice if player is Player.HUMAN else self.ai_dice

    def to_view(self) -> GameView:
        return GameView(
            phase=self.phase,
            human_dice=tuple(self.human_dice),
            ai_dice_count=self.ai_dice_count,
            human_dice_count=self.human_dice_count,
            bid_history=tuple(self.bid_history),
            current_bid=self.current_bid,
            current_round=self.current_round,
            max_rounds=self.max_rounds,
            human_wins=self.human_wins,
            ai_wins=self.ai_wins,
            last_round_result=self.last_round_result,
        )
