import random
import unittest
from dice_duel.agents.base import Agent
from dice_duel.core.actions import BidAction, ChallengeAction
from dice_duel.core.bid import Bid
from dice_duel.core.config import MatchConfig, StartingPlayer, TieBreak
from dice_duel.core.engine import MatchController
from dice_duel.core.errors import GameAlreadyOver, InvalidBid, NoActiveBid, NotYourTurn, RoundNotOver
from dice_duel.core.state import GamePhase, PhaseKind, Player


def force_hands(controller, human, ai):
    controller.state.human_dice = list(human)
    controller.state.ai_dice = list(ai)


def ai_wins_round(controller):
    # the AI holds no threes, so ten threes is certainly a bluff and gets challenged
    force_hands(controller, [1, 1, 1, 1, 1], [1, 2, 4, 5, 6])
    return controller.player_bid(10, 3)


def human_wins_round(controller):
    # five sixes in the human hand make six sixes true, yet the AI sees it as nearly impossible
    force_hands(controller, [6, 6, 6, 6, 6], [1, 2, 4, 5, 6])
    return controller.player_bid(6, 6)


class TestEngineFlow(unittest.TestCase):
    def setUp(self):
        self.controller = MatchController(MatchConfig(rng_seed=1))

    def test_start_game(self):
        view = self.controller.start_game()
        self.assertEqual(view.phase, GamePhase.player_turn())
        self.assertEqual(len(view.human_dice), 5)
        self.assertEqual(view.human_dice_count, 5)
        self.assertEqual(view.ai_dice_count, 5)
        self.assertEqual(view.current_round, 1)
        self.assertEqual(view.max_rounds, 5)
        self.assertEqual((view.human_wins, view.ai_wins), (0, 0))
        self.assertEqual(view.bid_history, ())
        self.assertIsNone(view.current_bid)
        self.assertIsNone(view.last_round_result)

    def test_view_hides_ai_dice(self):
        view = self.controller.get_game_state()
        self.assertFalse(hasattr(view, "ai_dice"))
        self.assertEqual(list(view.human_dice), self.controller.state.human_dice)

    def test_bid_then_ai_responds(self):
        view = self.controller.player_bid(3, 4)
        self.assertEqual(view.bid_history[0], (Player.HUMAN, BidAction(Bid(3, 4))))
        self.assertEqual(view.bid_history[1][0], Player.AI)
        ai_action = view.bid_history[1][1]
        if isinstance(ai_action, BidAction):
            self.assertEqual(view.phase, GamePhase.player_turn())
            self.assertEqual(view.current_bid, ai_action.bid)
            self.assertTrue(ai_action.bid.is_higher_than(Bid(3, 4)))
        else:
            self.assertIsInstance(ai_action, ChallengeAction)
            self.assertEqual(view.phase.kind, PhaseKind.ROUND_OVER)
            result = view.phase.result
            self.assertEqual(result.round, 1)
            self.assertEqual(result.last_bid, Bid(3, 4))
            self.assertEqual(result.actual_count, list(result.human_dice + result.ai_dice).count(4))

    def test_ai_challenges_impossible_bid(self):
        view = ai_wins_round(self.controller)
        self.assertEqual(view.bid_history[-1], (Player.AI, ChallengeAction()))
        self.assertEqual(view.phase.kind, PhaseKind.ROUND_OVER)
        result = view.phase.result
        self.assertEqual(result.actual_count, 0)
        self.assertEqual(result.winner, Player.AI)
        self.assertEqual(result.loser, Player.HUMAN)
        self.assertEqual(result.ai_dice, (1, 2, 4, 5, 6))
        self.assertEqual(view.last_round_result, result)
        self.assertEqual((view.human_wins, view.ai_wins), (0, 1))

    def test_human_challenge_resolves_round(self):
        force_hands(self.controller, [1, 1, 1, 1, 1], [2, 2, 2, 5, 6])
        view = self.controller.player_bid(1, 1)
        # the AI raises on the face it holds most of
        self.assertEqual(view.current_bid, Bid(1, 2))
        view = self.controller.player_challenge()
        self.assertEqual(view.bid_history[-1], (Player.HUMAN, ChallengeAction()))
        result = view.last_round_result
        self.assertEqual(result.actual_count, 3)
        self.assertEqual(result.winner, Player.AI)
        self.assertEqual(view.ai_wins, 1)

    def test_invalid_bids_leave_state_unchanged(self):
        before = self.controller.get_game_state()
        for count, face in ((2, 7), (2, 0), (0, 3), (11, 2)):
            with self.assertRaises(InvalidBid):
                self.controller.player_bid(count, face)
        with self.assertRaises(InvalidBid):
            self.controller.player_bid("3", 4)
        self.assertEqual(self.controller.get_game_state(), before)

    def test_lower_bid_is_rejected(self):
        force_hands(self.controller, [1, 1, 1, 1, 1], [2, 2, 2, 5, 6])
        before = self.controller.player_bid(1, 1)
        with self.assertRaises(InvalidBid):
            self.controller.player_bid(1, 1)
        self.assertEqual(self.controller.get_game_state(), before)

    def test_challenge_without_bid(self):
        before = self.controller.get_game_state()
        with self.assertRaises(NoActiveBid):
            self.controller.player_challenge()
        self.assertEqual(self.controller.get_game_state(), before)

    def test_next_round_rejected_mid_round(self):
        before = self.controller.get_game_state()
        with self.assertRaises(RoundNotOver):
            self.controller.next_round()
        self.assertEqual(self.controller.get_game_state(), before)

    def test_turn_commands_rejected_after_round_over(self):
        ai_wins_round(self.controller)
        with self.assertRaises(NotYourTurn):
            self.controller.player_bid(5, 5)
        with self.assertRaises(NotYourTurn):
            self.controller.player_challenge()

    def test_next_round_rerolls_and_resets(self):
        ai_wins_round(self.controller)
        view = self.controller.next_round()
        self.assertEqual(view.current_round, 2)
        self.assertEqual(view.phase, GamePhase.player_turn())
        self.assertEqual(view.bid_history, ())
        self.assertIsNone(view.current_bid)
        self.assertEqual(len(self.controller.state.human_dice), 5)
        self.assertEqual(len(self.controller.state.ai_dice), 5)
        self.assertEqual(view.ai_wins, 1)
        self.assertEqual(view.last_round_result.round, 1)

    def test_full_match_ends_in_game_over(self):
        for round_number in range(1, 6):
            view = ai_wins_round(self.controller)
            self.assertEqual(view.current_round, round_number)
            self.assertEqual(view.phase.kind, PhaseKind.ROUND_OVER)
            self.assertEqual(len(view.human_dice), 5)
            view = self.controller.next_round()
        self.assertEqual(view.phase, GamePhase.game_over(Player.AI))
        self.assertEqual(view.current_round, 5)
        self.assertEqual((view.human_wins, view.ai_wins), (0, 5))
        for command in (lambda: self.controller.player_bid(1, 1),
                        self.controller.player_challenge,
                        self.controller.next_round):
            with self.assertRaises(GameAlreadyOver):
                command()
        self.assertEqual(self.controller.get_game_state(), view)

    def test_start_game_resets_match(self):
        human_wins_round(self.controller)
        self.controller.next_round()
        self.controller.player_bid(1, 1)
        view = self.controller.start_game()
        self.assertEqual(view.current_round, 1)
        self.assertEqual((view.human_wins, view.ai_wins), (0, 0))
        self.assertEqual(view.bid_history, ())
        self.assertIsNone(view.last_round_result)
        self.assertEqual(view.phase, GamePhase.player_turn())


class TestMatchPolicies(unittest.TestCase):
    def play_tied_match(self, tie_break):
        controller = MatchController(MatchConfig(max_rounds=2, tie_break=tie_break, rng_seed=5))
        human_wins_round(controller)
        controller.next_round()
        ai_wins_round(controller)
        return controller.next_round()

    def test_tie_break_is_configurable(self):
        self.assertEqual(self.play_tied_match(TieBreak.HUMAN).phase, GamePhase.game_over(Player.HUMAN))
        self.assertEqual(self.play_tied_match(TieBreak.AI).phase, GamePhase.game_over(Player.AI))
        self.assertEqual(self.play_tied_match(TieBreak.LAST_ROUND_WINNER).phase, GamePhase.game_over(Player.AI))

    def test_ai_opens_when_configured(self):
        controller = MatchController(MatchConfig(starting_player=StartingPlayer.AI, rng_seed=3))
        view = controller.get_game_state()
        self.assertEqual(view.phase, GamePhase.player_turn())
        self.assertEqual(len(view.bid_history), 1)
        player, action = view.bid_history[0]
        self.assertEqual(player, Player.AI)
        self.assertIsInstance(action, BidAction)
        self.assertEqual(view.current_bid, action.bid)

    def test_alternating_opener(self):
        controller = MatchController(MatchConfig(starting_player=StartingPlayer.ALTERNATE, rng_seed=3))
        self.assertEqual(controller.get_game_state().bid_history, ())
        ai_wins_round(controller)
        view = controller.next_round()
        self.assertEqual(view.bid_history[0][0], Player.AI)
        self.assertEqual(view.phase, GamePhase.player_turn())

    def test_seeded_matches_roll_the_same_dice(self):
        a = MatchController(MatchConfig(rng_seed=11))
        b = MatchController(MatchConfig(rng_seed=11))
        self.assertEqual(a.state.human_dice, b.state.human_dice)
        self.assertEqual(a.state.ai_dice, b.state.ai_dice)


class OverbiddingAgent(Agent):
    def choose_action(self, view):
        return BidAction(Bid(99, 1))


class CrashingAgent(Agent):
    def choose_action(self, view):
        raise RuntimeError("policy crashed")


class TestIllegalAIAgent(unittest.TestCase):
    def test_illegal_ai_move_falls_back_to_challenge(self):
        controller = MatchController(MatchConfig(rng_seed=2), ai_agent=OverbiddingAgent())
        view = controller.player_bid(2, 3)
        self.assertEqual(view.bid_history[-1], (Player.AI, ChallengeAction()))
        self.assertEqual(view.phase.kind, PhaseKind.ROUND_OVER)

    def test_crashing_ai_agent_falls_back_to_challenge(self):
        controller = MatchController(MatchConfig(rng_seed=2), ai_agent=CrashingAgent())
        with self.assertLogs("dice_duel.core.engine", level="ERROR"):
            view = controller.player_bid(2, 3)
        self.assertEqual(view.bid_history, ((Player.HUMAN, BidAction(Bid(2, 3))), (Player.AI, ChallengeAction())))
        self.assertEqual(view.phase.kind, PhaseKind.ROUND_OVER)
        self.assertEqual(controller.next_round().phase.kind, PhaseKind.PLAYER_TURN)

    def test_crashing_ai_agent_opens_at_the_floor(self):
        cfg = MatchConfig(rng_seed=2, starting_player=StartingPlayer.AI)
        with self.assertLogs("dice_duel.core.engine", level="ERROR"):
            controller = MatchController(cfg, ai_agent=CrashingAgent())
        view = controller.get_game_state()
        self.assertEqual(view.bid_history, ((Player.AI, BidAction(Bid(1, 1))),))
        self.assertEqual(view.phase.kind, PhaseKind.PLAYER_TURN)


class FailingRandom(random.Random):
    fail = False

    def randint(self, a, b):
        if self.fail:
            raise RuntimeError("dice source unavailable")
        return super().randint(a, b)


class TestStartGameAtomicity(unittest.TestCase):
    def test_failed_start_keeps_current_match(self):
        rng = FailingRandom(5)
        controller = MatchController(MatchConfig(), rng=rng)
        controller.player_bid(1, 2)
        before_state = controller.state
        before_id = controller.match_id
        before_events = len(controller.recorder.events())

        rng.fail = True
        with self.assertRaises(RuntimeError):
            controller.start_game()

        self.assertIs(controller.state, before_state)
        self.assertEqual(controller.match_id, before_id)
        self.assertEqual(len(controller.recorder.events()), before_events)
        self.assertEqual(len(controller.recorder.events("MatchStarted")), 1)

        rng.fail = False
        view = controller.start_game()
        self.assertNotEqual(controller.match_id, before_id)
        self.assertEqual(view.bid_history, ())


if __name__ == '__main__':
    unittest.main()
