"""
serializer.py
Wire encoding of engine values as plain JSON-ready structures. Enums with payloads are externally
tagged: a variant without data is its name as a string, a variant with data is a one-key object.

    Action     "Challenge" | {"Bid": {"count": 3, "face": 4}}
    GamePhase  "PlayerTurn" | "AITurn" | {"RoundOver": {...}} | {"GameOver": {"winner": "Human"}}
"""

import json
from typing import Any, Dict, Optional

from ..core.actions import Action, BidAction, ChallengeAction
from ..core.bid import Bid
from ..core.state import GamePhase, GameView, PhaseKind, Player, RoundResult


def bid_to_wire(bid: Optional[Bid]):
    if bid is None:
        return None
    return {"count": bid.count, "face": bid.face}


def player_to_wire(player: Player) -> str:
    return player.value


def action_to_wire(action: Action):
    if isinstance(action, BidAction):
        return {"Bid": bid_to_wire(action.bid)}
    if isinstance(action, ChallengeAction):
        return "Challenge"
    raise TypeError(f"Cannot encode action {action!r}")


def round_result_to_wire(result: Optional[RoundResult]):
    if result is None:
        return None
    return {
        "round": result.round,
        "winner": player_to_wire(result.winner),
        "loser": player_to_wire(result.loser),
        "human_dice": list(result.human_dice),
        "ai_dice": list(result.ai_dice),
        "last_bid": bid_to_wire(result.last_bid),
        "actual_count": result.actual_count,
    }


def phase_to_wire(phase: GamePhase):
    if phase.kind is PhaseKind.ROUND_OVER:
        return {"RoundOver": round_result_to_wire(phase.result)}
    if phase.kind is PhaseKind.GAME_OVER:
        return {"GameOver": {"winner": player_to_wire(phase.winner)}}
    return phase.kind.value


def view_to_wire(view: GameView) -> Dict[str, Any]:
    """
    Encode a GameView with the field names existing clients expect.
    """
    return {
        "phase": phase_to_wire(view.phase),
        "human_dice": list(view.human_dice),
        "ai_dice_count": view.ai_dice_count,
        "human_dice_count": view.human_dice_count,
        "bid_history": [[player_to_wire(p), action_to_wire(a)] for p, a in view.bid_history],
        "current_bid": bid_to_wire(view.current_bid),
        "current_round": view.current_round,
        "max_rounds": view.max_rounds,
        "human_wins": view.human_wins,
        "ai_wins": view.ai_wins,
        "last_round_result": round_result_to_wire(view.last_round_result),
    }


def dumps(obj: Any) -> str:
    """
    Serialize a GameView, or any JSON-ready structure, to a JSON string.
    """
    if isinstance(obj, GameView):
        obj = view_to_wire(obj)
    return json.dumps(obj)


def loads(s: str):
    return json.loads(s)
