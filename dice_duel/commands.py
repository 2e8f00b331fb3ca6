"""
commands.py
Wire-level command handlers for rendering clients. Each handler takes the session (a
MatchController) explicitly and returns the wire-encoded GameView; dispatch() wraps them into
a uniform response envelope, and serve() speaks it as JSON lines over a pair of streams:

    {"ok": true, "view": {...}}
    {"ok": false, "error": {"kind": "InvalidBid", "message": "..."}}
"""

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, TextIO

from .core.engine import MatchController
from .core.errors import IllegalMoveError
from .persistence.serializer import dumps, loads, view_to_wire

log = logging.getLogger(__name__)


def start_game(session: MatchController) -> Dict[str, Any]:
    return view_to_wire(session.start_game())


def player_bid(session: MatchController, count: int, face: int) -> Dict[str, Any]:
    return view_to_wire(session.player_bid(count, face))


def player_challenge(session: MatchController) -> Dict[str, Any]:
    return view_to_wire(session.player_challenge())


def get_game_state(session: MatchController) -> Dict[str, Any]:
    return view_to_wire(session.get_game_state())


def next_round(session: MatchController) -> Dict[str, Any]:
    return view_to_wire(session.next_round())


COMMANDS: Dict[str, Callable[..., Dict[str, Any]]] = {
    "start_game": start_game,
    "player_bid": player_bid,
    "player_challenge": player_challenge,
    "get_game_state": get_game_state,
    "next_round": next_round,
}

COMMAND_ARGS = {
    "player_bid": ("count", "face"),
}


def _error(kind: str, message: str) -> Dict[str, Any]:
    return {"ok": False, "error": {"kind": kind, "message": message}}


def dispatch(session: MatchController, name: str, args: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Run command `name` with keyword arguments `args` against `session`.
    Rejections are reported in the envelope; unexpected exceptions propagate.
    """
    handler = COMMANDS.get(name)
    if handler is None:
        return _error("UnknownCommand", f"Unknown command: {name}")
    args = dict(args or {})
    expected = COMMAND_ARGS.get(name, ())
    if set(args) != set(expected):
        return _error("BadArguments", f"{name} expects arguments {list(expected)}, got {sorted(args)}")
    try:
        view = handler(session, **args)
    except IllegalMoveError as e:
        log.debug("Command %s rejected: %s", name, e)
        return _error(type(e).__name__, str(e))
    return {"ok": True, "view": view}


def serve(session: MatchController, lines: Iterable[str], out: TextIO) -> None:
    """
    Answer one JSON request per input line with one JSON response line.
    A request looks like {"command": "player_bid", "args": {"count": 3, "face": 4}}; "args" may be
    omitted. Blank lines are skipped.
    """
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            request = loads(line)
        except ValueError as e:
            response = _error("BadRequest", f"Malformed JSON: {e}")
        else:
            if not isinstance(request, dict) or not isinstance(request.get("command"), str) \
                    or not isinstance(request.get("args", {}), dict):
                response = _error("BadRequest", "Expected an object with a 'command' string and optional 'args' object")
            else:
                response = dispatch(session, request["command"], request.get("args"))
        out.write(dumps(response) + "\n")
        out.flush()
