"""
probability_agent.py
The computer opponent. Treats the unseen dice as independent fair rolls and reasons about bids
with the binomial tail: with `known` matching dice in its own hand and `n` unseen dice, a bid of
`count` is true with probability P(X >= count - known), X ~ Binomial(n, 1/6).
Decisions are deterministic; only the dice are random.
"""

from math import comb
from typing import List, Optional, Sequence, Tuple

from .base import Agent
from . import register_agent
from ..core.actions import BidAction, ChallengeAction
from ..core.bid import Bid, MAX_FACE, MIN_FACE
from ..core.rules import is_legal_bid

FACE_PROBABILITY = 1.0 / 6.0


def binomial_tail(n: int, k: int, p: float = FACE_PROBABILITY) -> float:
    """P(X >= k) for X ~ Binomial(n, p)."""
    if k <= 0:
        return 1.0
    if k > n:
        return 0.0
    return sum(comb(n, i) * p ** i * (1.0 - p) ** (n - i) for i in range(k, n + 1))


def truth_probability(bid: Bid, my_dice: Sequence[int], opponent_dice_count: int) -> float:
    """
    Probability that `bid` holds given the agent's own hand and the number of unseen dice.
    """
    known = sum(1 for d in my_dice if d == bid.face)
    return binomial_tail(opponent_dice_count, bid.count - known)


@register_agent("probability")
class ProbabilityAgent(Agent):
    """
    ProbabilityAgent:
    - With no bid on the table, opens with the face it holds most of, at the count it holds.
    - Challenges when the current bid is true with probability below challenge_threshold.
    - Otherwise scans every legal raise, keeps those at or above raise_threshold, and bids the one
      with the best probability plus held_face_bonus per matching die in hand.
    - Challenges when no raise qualifies.
    """
    def __init__(self, challenge_threshold=0.35, raise_threshold=0.45, held_face_bonus=0.1):
        """
        Args:
            challenge_threshold: Challenge below this truth probability (float 0-1).
            raise_threshold: Minimum truth probability of a raise (float 0-1).
            held_face_bonus: Score bonus per die in hand showing the raised face.
        """
        self.challenge_threshold = challenge_threshold
        self.raise_threshold = raise_threshold
        self.held_face_bonus = held_face_bonus

    def choose_action(self, view):
        my_dice = tuple(view["my_dice"])
        current = view.get("current_bid")
        opponent_dice = view["opponent_dice_count"]
        total_dice = view["total_dice"]

        if current is None:
            return BidAction(self.opening_bid(my_dice))

        if truth_probability(current, my_dice, opponent_dice) < self.challenge_threshold:
            return ChallengeAction()

        raise_bid = self.best_raise(my_dice, current, opponent_dice, total_dice)
        if raise_bid is None:
            return ChallengeAction()
        return BidAction(raise_bid)

    def opening_bid(self, my_dice: Sequence[int]) -> Bid:
        best_face, best_count = MIN_FACE, 0
        for face in range(MIN_FACE, MAX_FACE + 1):
            held = self.my_count_of_face(my_dice, face)
            if held > best_count:
                best_face, best_count = face, held
        # an empty hand still has to open with a legal bid
        return Bid(max(best_count, 1), best_face)

    def score_raises(self, my_dice: Sequence[int], current: Optional[Bid], opponent_dice: int,
                     total_dice: int) -> List[Tuple[Bid, float]]:
        """
        All legal raises over `current` that meet raise_threshold, with their scores, in
        face-then-count order.
        """
        scored = []
        for face in range(MIN_FACE, MAX_FACE + 1):
            held = self.my_count_of_face(my_dice, face)
            for count in range(1, total_dice + 1):
                candidate = Bid(count, face)
                if not is_legal_bid(current, candidate, total_dice):
                    continue
                p = truth_probability(candidate, my_dice, opponent_dice)
                if p >= self.raise_threshold:
                    scored.append((candidate, p + held * self.held_face_bonus))
        return scored

    def best_raise(self, my_dice, current, opponent_dice, total_dice) -> Optional[Bid]:
        best = None
        best_score = None
        for candidate, score in self.score_raises(my_dice, current, opponent_dice, total_dice):
            if best_score is None or score > best_score:
                best, best_score = candidate, score
        return best
