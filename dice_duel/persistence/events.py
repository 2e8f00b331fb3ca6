"""
events.py
Defines the GameEvent dataclass emitted by the match engine for every state change worth replaying:
MatchStarted, RoundStarted, DiceRolled, BidPlaced, ChallengeCalled, RoundEnded, MatchEnded.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GameEvent:
    """
    A single event in a match.
    Fields:
        match_id (str): Identifier of the match the event belongs to.
        event_type (str): Type of event (e.g. 'BidPlaced').
        round (int): Round number the event happened in.
        payload (dict): Event-specific data, already wire-encoded.
        player (str|None): 'Human' or 'AI' for actions, None for engine events.
    """
    match_id: str
    event_type: str
    round: int
    payload: Dict[str, Any] = field(default_factory=dict)
    player: Optional[str] = None
