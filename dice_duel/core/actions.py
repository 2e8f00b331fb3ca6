"""
actions.py
Defines the base Action type and the two moves a side can make on its turn: raise the bid or
challenge it.
Related modules:
- bid.py: Defines the Bid model used in BidAction.
- engine.py: Consumes Action objects to update match state.
"""

from dataclasses import dataclass
from .bid import Bid



class Action:
    """
    Base class for all game actions. Subclassed by BidAction and ChallengeAction.
    """
    pass



@dataclass(frozen=True)
class BidAction(Action):
    """
    A bid: the acting side claims there are at least 'count' dice showing 'face'.
    Args:
        bid (Bid): The bid being placed.
    """
    bid: Bid



@dataclass(frozen=True)
class ChallengeAction(Action):
    """
    Challenges the current bid. Ends the bidding and triggers reveal and resolution.
    """
    pass
