import argparse
import logging
import sys
from typing import Optional

from dice_duel.core.config import MatchConfig, StartingPlayer, TieBreak
from dice_duel.core.engine import MatchController
from dice_duel.core.errors import IllegalMoveError
from dice_duel.core.actions import Action, BidAction, ChallengeAction
from dice_duel.core.bid import Bid
from dice_duel.core.state import GameView, PhaseKind, Player
from dice_duel.agents.base import Agent
from dice_duel.agents import AGENT_MAP
from dice_duel import commands


def choose_agent(name: str) -> Agent:
    """
    Return an Agent instance by name.
    Raises:
        ValueError: If the agent name is unknown.
    """
    name = name.lower()
    if name in AGENT_MAP:
        return AGENT_MAP[name]()
    raise ValueError(f"Unknown agent: {name}")


def describe_action(player: Player, action: Action) -> str:
    who = "You" if player is Player.HUMAN else "AI"
    if isinstance(action, BidAction):
        return f"{who} bid {action.bid.count} x face {action.bid.face}"
    return f"{who} called a challenge"


def print_state(view: GameView):
    """
    Print the public state and the human's dice.
    """
    print(f"\n=== ROUND {view.current_round}/{view.max_rounds} ===   score  you {view.human_wins} : {view.ai_wins} AI")
    print(f"Your dice: {tuple(view.human_dice)}   (AI holds {view.ai_dice_count} dice)")
    for player, action in view.bid_history:
        print(f"  - {describe_action(player, action)}")
    if view.current_bid is None:
        print("No bids yet.")
    else:
        print(f"Current bid: {view.current_bid.count} x face {view.current_bid.face}")


def print_result(view: GameView):
    result = view.last_round_result
    print("\n--- ROUND OVER ---")
    print(f"Contested bid: {result.last_bid.count} x face {result.last_bid.face}, actual count {result.actual_count}")
    print(f"Your dice: {list(result.human_dice)}")
    print(f"AI dice:   {list(result.ai_dice)}")
    print("You win the round!" if result.winner is Player.HUMAN else "The AI wins the round.")


def prompt_action(view: GameView) -> Optional[Action]:
    """
    Prompt the human player for an action (Bid or Challenge).
    Returns:
        Action or None: The chosen action, or None if input is invalid.
    """
    print("\nChoose action:")
    print("  1) Bid")
    print("  2) Challenge")
    choice = input("Enter choice (1-2): ").strip()
    if choice == "2":
        return ChallengeAction()
    if choice != "1":
        print("Choice not recognized.")
        return None
    try:
        count = int(input("Enter count (int): ").strip())
        face = int(input("Enter face (1-6): ").strip())
    except ValueError:
        print("Please enter whole numbers.")
        return None
    return BidAction(Bid(count, face))


def play_match(controller: MatchController):
    """
    Play one full match against the controller's AI in the terminal.
    """
    view = controller.start_game()
    while view.phase.kind is not PhaseKind.GAME_OVER:
        if view.phase.kind is PhaseKind.ROUND_OVER:
            print_result(view)
            input("\nPress Enter for the next round...")
            view = controller.next_round()
            continue
        print_state(view)
        action = None
        while action is None:
            action = prompt_action(view)
        try:
            view = controller.play(action)
        except IllegalMoveError as e:
            print(f"Illegal move: {e}")
    winner = view.phase.winner
    print(f"\n=== MATCH OVER: you {view.human_wins} : {view.ai_wins} AI ===")
    print("You win the match!" if winner is Player.HUMAN else "The AI wins the match.")


def main():
    parser = argparse.ArgumentParser(description="Play Liar's Dice against the computer")
    parser.add_argument("--agent", default="probability", help=f"AI agent, one of {sorted(AGENT_MAP)}")
    parser.add_argument("--rounds", type=int, default=5, help="Rounds per match")
    parser.add_argument("--opener", choices=[s.value for s in StartingPlayer], default=StartingPlayer.HUMAN.value)
    parser.add_argument("--tie-break", choices=[t.value for t in TieBreak], default=TieBreak.HUMAN.value)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible dice")
    parser.add_argument("--verbose", action="store_true", help="Show engine logging")
    parser.add_argument("--serve", action="store_true",
                        help="Read JSON command requests from stdin and answer on stdout instead of prompting")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    cfg = MatchConfig(max_rounds=args.rounds,
                      starting_player=StartingPlayer(args.opener),
                      tie_break=TieBreak(args.tie_break),
                      rng_seed=args.seed)
    controller = MatchController(cfg, ai_agent=choose_agent(args.agent))
    if args.serve:
        commands.serve(controller, sys.stdin, sys.stdout)
        return
    print("Welcome to Liar's Dice (CLI)")
    print(f"{cfg.max_rounds} rounds, {cfg.total_dice} dice in play.")
    while True:
        try:
            play_match(controller)
        except KeyboardInterrupt:
            print("\nExiting.")
            break
        if input("\nPlay again? [y/N]: ").strip().lower() != "y":
            print("Goodbye")
            break


if __name__ == "__main__":
    main()
