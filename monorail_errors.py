"""
Monorail - Error Types

All game errors derive from ValueError, so callers that only care about
"that move was not accepted" can keep catching ValueError.

IllegalMoveError, NoHistoryError and NoMovesError are user-level
conditions: the consultant reports them and asks again.
InconsistentStateError means the engine broke one of its own invariants.
"""


class MonorailError(ValueError):
    """Base class for every Monorail game error."""


class IllegalMoveError(MonorailError):
    """A move was applied that is not in the current legal-move list."""


class NoHistoryError(MonorailError):
    """Undo was requested on a state with no moves played."""


class NoMovesError(MonorailError):
    """A search query was made on a finished game."""


class InconsistentStateError(MonorailError):
    """The board reached a position that cannot occur in a real game."""
