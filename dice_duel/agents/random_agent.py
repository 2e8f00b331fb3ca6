import random

from .base import Agent
from ..core.bid import Bid
from ..core.actions import BidAction, ChallengeAction
from . import register_agent


@register_agent("random")
class RandomAgent(Agent):
    """
    A baseline opponent used to exercise the engine and benchmark the probability agent.
    Opens with a small random bid, challenges impossible bids, challenges with a probability that
    grows as the round's bidding goes on, and otherwise raises the count modestly.
    """
    def __init__(self,
                 rng=None,
                 base_call_prob=0.10,
                 extra_per_turn=0.05,
                 max_call_prob=0.9,
                 raise_amount=1,
                 prob_keep_same_face=0.7):
        """
        Args:
            rng: Optional random number generator.
            base_call_prob: Initial probability to challenge (float 0-1).
            extra_per_turn: Probability increase per bid already in the history (float).
            max_call_prob: Maximum probability to challenge (float 0-1).
            raise_amount: How much to increase the count when raising (int >=1).
            prob_keep_same_face: Probability to keep the current face when raising (float 0-1).
        """
        self.rng = rng or random.Random()
        self.base_call_prob = base_call_prob
        self.extra_per_turn = extra_per_turn
        self.max_call_prob = max_call_prob
        self.raise_amount = raise_amount
        self.prob_keep_same_face = prob_keep_same_face

    def choose_action(self, view):
        my_dice = tuple(view["my_dice"])
        current = view.get("current_bid")
        total_dice = view["total_dice"]

        if current is None:
            return BidAction(Bid(self.rng.randint(1, max(1, total_dice // 3)), self.rng.randint(1, 6)))

        if self.bid_is_impossible(my_dice, current, view["opponent_dice_count"]):
            return ChallengeAction()

        turns = len(view.get("bid_history", ()))
        call_prob = min(self.max_call_prob, self.base_call_prob + turns * self.extra_per_turn)
        if current.count >= total_dice or self.rng.random() < call_prob:
            return ChallengeAction()

        count = min(current.count + self.raise_amount, total_dice)
        face = current.face if self.rng.random() < self.prob_keep_same_face else self.rng.randint(1, 6)
        return BidAction(Bid(count, face))


@register_agent("random_cautious")
class CautiousRandomAgent(RandomAgent):
    """A cautious agent: challenges less often and never changes face."""
    def __init__(self, rng=None):
        super().__init__(rng=rng, base_call_prob=0.05, extra_per_turn=0.02, max_call_prob=0.5, prob_keep_same_face=1.0)
