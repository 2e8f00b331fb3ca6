"""
rules.py
Rule helpers for Liar's Dice: counting matches, the bid legality predicate and challenge resolution.
Every face counts only toward itself; there are no wild ones.
Related modules:
- turns.py: Rejects human bids that fail is_legal_bid.
- agents/probability_agent.py: Generates AI raises with the same predicate.
- engine.py: Calls resolve_round when a bid is challenged.
"""

from typing import Iterable, Optional, Sequence

from .bid import Bid
from .state import Player, RoundResult


def count_matches(hands: Iterable[Sequence[int]], face: int) -> int:
    """
    Count the dice showing `face` across all given hands.
    Args:
        hands (iterable): Hands to inspect.
        face (int): Face value to count.
    Returns:
        int: Total count of matching dice.
    """
    return sum(1 for dice in hands for d in dice if d == face)


def is_legal_bid(current: Optional[Bid], proposed: Bid, total_dice: int) -> bool:
    """
    Bid legality shared by the human and the AI.
    Args:
        current (Bid|None): Bid on the table, or None at the start of a round.
        proposed (Bid): Bid being made.
        total_dice (int): Dice in play across both hands.
    Returns:
        bool: True if the proposed bid is in range and outranks the current one.
    """
    if not proposed.in_range(total_dice):
        return False
    return proposed.is_higher_than(current)


def resolve_round(human_dice: Sequence[int], ai_dice: Sequence[int], contested_bid: Bid,
                  challenger: Player, bidder: Player, round_number: int) -> RoundResult:
    """
    Reveal both hands and adjudicate a challenge. A bid that is met (actual count >= claimed
    count) wins for the bidder; otherwise the challenger wins.
    Args:
        human_dice (sequence): Human hand.
        ai_dice (sequence): AI hand.
        contested_bid (Bid): The bid being challenged.
        challenger (Player): Side that challenged.
        bidder (Player): Side that made the contested bid.
        round_number (int): Round being resolved.
    Returns:
        RoundResult: The adjudicated round.
    """
    if challenger is bidder:
        raise ValueError("a side cannot challenge its own bid")
    actual_count = count_matches((human_dice, ai_dice), contested_bid.face)
    if actual_count >= contested_bid.count:
        winner, loser = bidder, challenger
    else:
        winner, loser = challenger, bidder
    return RoundResult(
        round=round_number,
        winner=winner,
        loser=loser,
        human_dice=tuple(human_dice),
        ai_dice=tuple(ai_dice),
        last_bid=contested_bid,
        actual_count=actual_count,
    )
