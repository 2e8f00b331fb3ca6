"""
errors.py
Rejections raised by the match engine. All of them are recoverable: the match state is left
unchanged and the caller may retry with a corrected command.
"""


class IllegalMoveError(Exception):
    """
    Raised when a command is not allowed in the current match state.
    """
    pass


class InvalidBid(IllegalMoveError):
    """The bid is out of range or does not outrank the current bid."""


class NoActiveBid(IllegalMoveError):
    """A challenge was issued before any bid was placed this round."""


class NotYourTurn(IllegalMoveError):
    """The phase does not allow the acting side to move."""


class RoundNotOver(IllegalMoveError):
    """The next round was requested while the current round is still being bid."""


class GameAlreadyOver(IllegalMoveError):
    """A turn command arrived after the match ended."""
