"""
turns.py
Implements the TurnStateMachine: whose turn it is and which phase the round is in.

    PlayerTurn --bid--> AITurn --bid--> PlayerTurn ...
    PlayerTurn/AITurn --challenge--> RoundOver
    RoundOver --advance--> <opener's turn>   (current_round < max_rounds)
    RoundOver --advance--> GameOver          (last round)

Every guard runs before any mutation, so a rejected command leaves the state untouched.
Related modules:
- engine.py: Drives the machine and performs the dice rolls and resolution between transitions.
- rules.py: Provides the bid legality predicate.
"""

from .actions import BidAction, ChallengeAction
from .bid import Bid
from .config import MatchConfig, TieBreak
from .errors import GameAlreadyOver, InvalidBid, NoActiveBid, NotYourTurn, RoundNotOver
from .rules import is_legal_bid
from .state import GamePhase, MatchState, PhaseKind, Player, RoundResult


class TurnStateMachine:
    def __init__(self, config: MatchConfig):
        self.config = config

    def check_turn(self, state: MatchState, player: Player) -> None:
        """
        Raises unless `player` may act now.
        Raises:
            GameAlreadyOver: If the match has ended.
            NotYourTurn: If the phase belongs to the other side or the round is over.
        """
        if state.phase.kind is PhaseKind.GAME_OVER:
            raise GameAlreadyOver("The match is over; start a new game")
        if state.phase.acting_player is not player:
            raise NotYourTurn(f"It is not {player.value}'s turn (phase {state.phase.kind.value})")

    def open_round(self, state: MatchState) -> Player:
        """
        Reset the bidding of the current round and hand the turn to the opener.
        Returns:
            Player: The side that opens the round.
        """
        opener = self.config.starting_player.opener(state.current_round)
        state.bid_history = []
        state.current_bid = None
        state.phase = GamePhase.turn_of(opener)
        return opener

    def place_bid(self, state: MatchState, player: Player, bid: Bid) -> None:
        self.check_turn(state, player)
        if not is_legal_bid(state.current_bid, bid, state.total_dice):
            if not bid.in_range(state.total_dice):
                raise InvalidBid(f"Bid {bid} is out of range: face must be 1-6 and count 1-{state.total_dice}")
            raise InvalidBid(f"Bid {bid} must raise the current bid {state.current_bid}")
        state.current_bid = bid
        state.bid_history.append((player, BidAction(bid)))
        state.phase = GamePhase.turn_of(player.opponent)

    def challenge(self, state: MatchState, player: Player) -> Player:
        """
        Record a challenge by `player`.
        Returns:
            Player: The bidder whose bid is contested.
        Raises:
            NoActiveBid: If no bid has been placed this round.
        """
        self.check_turn(state, player)
        if state.current_bid is None:
            raise NoActiveBid("There is no bid to challenge")
        state.bid_history.append((player, ChallengeAction()))
        return player.opponent

    def close_round(self, state: MatchState, result: RoundResult) -> None:
        """Score a resolved round and move to RoundOver."""
        if result.winner is Player.HUMAN:
            state.human_wins += 1
        else:
            state.ai_wins += 1
        state.last_round_result = result
        state.phase = GamePhase.round_over(result)

    def advance(self, state: MatchState) -> bool:
        """
        Leave RoundOver. Either ends the match or moves to the next round number; the caller rolls
        the new hands and calls open_round.
        Returns:
            bool: True if a new round follows, False if the match just ended.
        Raises:
            GameAlreadyOver: If the match has already ended.
            RoundNotOver: If the current round is still being bid.
        """
        kind = state.phase.kind
        if kind is PhaseKind.GAME_OVER:
            raise GameAlreadyOver("The match is over; start a new game")
        if kind is not PhaseKind.ROUND_OVER:
            raise RoundNotOver("The current round has not been resolved yet")
        if state.current_round >= state.max_rounds:
            state.phase = GamePhase.game_over(self.match_winner(state))
            return False
        state.current_round += 1
        return True

    def match_winner(self, state: MatchState) -> Player:
        if state.human_wins != state.ai_wins:
            return Player.HUMAN if state.human_wins > state.ai_wins else Player.AI
        tie_break = self.config.tie_break
        if tie_break is TieBreak.AI:
            return Player.AI
        if tie_break is TieBreak.LAST_ROUND_WINNER and state.last_round_result is not None:
            return state.last_round_result.winner
        return Player.HUMAN
