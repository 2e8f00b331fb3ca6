from abc import ABC, abstractmethod
from typing import Any, Dict


class Agent(ABC):
    """
    Abstract base class for all Liar's Dice agents.
    Agents must implement choose_action(view), which receives a player-specific view of the match
    (see MatchController.get_view) and returns an Action.
    """

    @abstractmethod
    def choose_action(self, view: Dict[str, Any]):
        """
        Given a player-specific view, return the next Action to take.
        Args:
            view (dict): Player view with keys 'my_dice', 'opponent_dice_count', 'total_dice',
                'current_bid' and 'bid_history'.
        Returns:
            Action: The action to take (BidAction or ChallengeAction).
        """
        raise NotImplementedError

    def my_count_of_face(self, my_dice, face: int) -> int:
        """
        Count how many dice of a given face the agent holds.
        Args:
            my_dice (iterable): The agent's private dice.
            face (int): The face value to count.
        Returns:
            int: Number of dice showing the given face.
        """
        return sum(1 for d in my_dice if d == face)

    def bid_is_impossible(self, my_dice, current_bid, opponent_dice_count: int) -> bool:
        """
        True if the bid cannot be met even when every unseen die shows its face.
        """
        if current_bid is None:
            return False
        return self.my_count_of_face(my_dice, current_bid.face) + opponent_dice_count < current_bid.count
