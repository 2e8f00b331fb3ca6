"""
engine.py
Implements the MatchController, which owns the state of one human-vs-AI match, exposes the command
surface and runs the computer opponent whenever it is its turn.
Related modules:
- config.py: MatchConfig configures the match.
- state.py: MatchState is the single mutable state; GameView is the snapshot returned by commands.
- turns.py: TurnStateMachine guards and performs phase transitions.
- rules.py: Round resolution.
- dice.py: DiceRoller rolls both hands every round.
- agents/probability_agent.py: Default AI policy.
"""

import datetime
import hashlib
import logging
import os
import random
import threading
from typing import Any, Dict, List, Optional

from .actions import Action, BidAction, ChallengeAction
from .bid import Bid, MIN_FACE
from .config import MatchConfig
from .dice import DiceRoller
from .errors import IllegalMoveError, InvalidBid
from .rules import resolve_round
from .state import GameView, MatchState, PhaseKind, Player
from .turns import TurnStateMachine
from ..agents.base import Agent
from ..agents.probability_agent import ProbabilityAgent
from ..persistence.events import GameEvent
from ..persistence.recorder import InMemoryRecorder
from ..persistence.serializer import bid_to_wire, round_result_to_wire

log = logging.getLogger(__name__)


class MatchController:
    """
    Session object for one match at a time. Every command takes the controller's lock for its whole
    mutate-then-snapshot sequence and returns an immutable GameView. Rejected commands raise an
    IllegalMoveError subclass and leave the match untouched.
    """
    def __init__(self, config: Optional[MatchConfig] = None, ai_agent: Optional[Agent] = None,
                 rng: Optional[random.Random] = None, recorder=None):
        """
        Create a controller with a freshly started match.
        Args:
            config (MatchConfig): Match configuration; defaults to MatchConfig().
            ai_agent (Agent): Policy for the AI seat; defaults to ProbabilityAgent().
            rng (random.Random): Random source for dice; defaults to one seeded from config.rng_seed.
            recorder: Event sink with a record(event) method; defaults to InMemoryRecorder().
        """
        self.config = config or MatchConfig()
        self.roller = DiceRoller(rng or random.Random(self.config.rng_seed))
        self.turns = TurnStateMachine(self.config)
        self.ai = ai_agent or ProbabilityAgent()
        self.recorder = recorder if recorder is not None else InMemoryRecorder()
        self._lock = threading.RLock()
        self._matches_started = 0
        self._pending_events: Optional[List[GameEvent]] = None
        self.state = self._new_match()

    @property
    def match_id(self) -> str:
        return self.state.match_id

    # --- command surface ---

    def start_game(self) -> GameView:
        """Discard the current match and start a fresh one."""
        with self._lock:
            self.state = self._new_match()
            return self.state.to_view()

    def player_bid(self, count: int, face: int) -> GameView:
        with self._lock:
            state = self.state
            if type(count) is not int or type(face) is not int:
                raise InvalidBid("Bid count and face must be integers")
            self._apply(state, Player.HUMAN, BidAction(Bid(count, face)))
            self._run_ai(state)
            return state.to_view()

    def player_challenge(self) -> GameView:
        with self._lock:
            state = self.state
            self._apply(state, Player.HUMAN, ChallengeAction())
            return state.to_view()

    def get_game_state(self) -> GameView:
        with self._lock:
            return self.state.to_view()

    def next_round(self) -> GameView:
        with self._lock:
            state = self.state
            if self.turns.advance(state):
                self._begin_round(state)
            else:
                winner = state.phase.winner
                log.info("Match %s over: %s wins %d-%d", self.match_id, winner.value, state.human_wins, state.ai_wins)
                self._emit(state, "MatchEnded", {
                    "winner": winner.value,
                    "human_wins": state.human_wins,
                    "ai_wins": state.ai_wins,
                })
            return state.to_view()

    def play(self, action: Action) -> GameView:
        """Apply an Action for the human seat through the matching command."""
        if isinstance(action, BidAction):
            return self.player_bid(action.bid.count, action.bid.face)
        if isinstance(action, ChallengeAction):
            return self.player_challenge()
        raise IllegalMoveError("Unknown action")

    def get_view(self, player: Player) -> Dict[str, Any]:
        """
        Player-specific view for agents: own dice, the opponent's dice count and the public bidding.
        """
        with self._lock:
            return self._view_for(self.state, player)

    # --- internals ---

    def _new_match(self) -> MatchState:
        """
        Build and open a new match without touching the current one. Events of the opening are held
        back and only reach the recorder once the new state is complete.
        """
        number = self._matches_started + 1
        timestamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
        raw_id = f"match_{timestamp}_{os.getpid()}_{id(self)}_{number}"
        state = MatchState(
            human_dice_count=self.config.dice_per_player,
            ai_dice_count=self.config.dice_per_player,
            max_rounds=self.config.max_rounds,
            match_id=hashlib.sha256(raw_id.encode()).hexdigest()[:16],
        )
        log.info("Starting match %s: %d rounds, %d dice in play", state.match_id, state.max_rounds, self.config.total_dice)
        self._pending_events = []
        try:
            self._emit(state, "MatchStarted", {"max_rounds": state.max_rounds, "dice_per_player": self.config.dice_per_player})
            self._begin_round(state)
            pending = self._pending_events
        finally:
            self._pending_events = None
        for event in pending:
            self.recorder.record(event)
        self._matches_started = number
        return state

    def _begin_round(self, state: MatchState) -> None:
        state.human_dice = self.roller.roll(state.human_dice_count)
        state.ai_dice = self.roller.roll(state.ai_dice_count)
        opener = self.turns.open_round(state)
        log.info("Round %d/%d started, %s opens", state.current_round, state.max_rounds, opener.value)
        self._emit(state, "RoundStarted", {"opener": opener.value})
        self._emit(state, "DiceRolled", {"human_dice": list(state.human_dice), "ai_dice": list(state.ai_dice)})
        self._run_ai(state)

    def _view_for(self, state: MatchState, player: Player) -> Dict[str, Any]:
        opponent = player.opponent
        return {
            "player": player,
            "my_dice": tuple(state.dice_of(player)),
            "opponent_dice_count": len(state.dice_of(opponent)),
            "total_dice": state.total_dice,
            "current_bid": state.current_bid,
            "bid_history": tuple(state.bid_history),
            "round": state.current_round,
        }

    def _apply(self, state: MatchState, player: Player, action: Action) -> None:
        if isinstance(action, BidAction):
            try:
                self.turns.place_bid(state, player, action.bid)
            except IllegalMoveError as e:
                log.debug("Rejected bid %s from %s: %s", action.bid, player.value, e)
                raise
            log.debug("%s bids %s", player.value, action.bid)
            self._emit(state, "BidPlaced", {"bid": bid_to_wire(action.bid)}, player)
        elif isinstance(action, ChallengeAction):
            try:
                bidder = self.turns.challenge(state, player)
            except IllegalMoveError as e:
                log.debug("Rejected challenge from %s: %s", player.value, e)
                raise
            self._emit(state, "ChallengeCalled", {"bid": bid_to_wire(state.current_bid)}, player)
            result = resolve_round(state.human_dice, state.ai_dice, state.current_bid,
                                   challenger=player, bidder=bidder, round_number=state.current_round)
            self.turns.close_round(state, result)
            log.info("Round %d: %s challenged %s, %d found, %s wins (score %d-%d)",
                     result.round, player.value, result.last_bid, result.actual_count,
                     result.winner.value, state.human_wins, state.ai_wins)
            self._emit(state, "RoundEnded", {
                "result": round_result_to_wire(result),
                "was_true": result.actual_count >= result.last_bid.count,
            })
        else:
            raise IllegalMoveError("Unknown action")

    def _run_ai(self, state: MatchState) -> None:
        """Let the AI act for as long as the phase is AITurn."""
        while state.phase.kind is PhaseKind.AI_TURN:
            try:
                action = self.ai.choose_action(self._view_for(state, Player.AI))
            except Exception:
                log.exception("AI agent %s failed to choose an action; falling back", type(self.ai).__name__)
                self._apply(state, Player.AI, self._fallback_action(state))
                continue
            try:
                self._apply(state, Player.AI, action)
            except IllegalMoveError as e:
                log.warning("AI agent %s made an illegal move (%s); falling back", type(self.ai).__name__, e)
                self._apply(state, Player.AI, self._fallback_action(state))

    @staticmethod
    def _fallback_action(state: MatchState) -> Action:
        # challenge the standing bid, or open at the floor
        return ChallengeAction() if state.current_bid is not None else BidAction(Bid(1, MIN_FACE))

    def _emit(self, state: MatchState, event_type: str, payload: Dict[str, Any], player: Optional[Player] = None):
        event = GameEvent(
            match_id=state.match_id,
            event_type=event_type,
            round=state.current_round,
            payload=payload,
            player=player.value if player is not None else None,
        )
        if self._pending_events is not None:
            self._pending_events.append(event)
        else:
            self.recorder.record(event)
