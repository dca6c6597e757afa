"""
Monorail - Game State

One GameState is the live game: it is changed in place by play() and
restored by undo(). Each play() pushes a restore record holding only what
the move touched, so the search can walk the tree without copying boards.
"""

from collections import namedtuple

from monorail_errors import IllegalMoveError, InconsistentStateError, NoHistoryError
from monorail_rules import DEFAULT_RULES, Piece, legal_moves


# Everything needed to take back one move
RestoreRecord = namedtuple(
    "RestoreRecord",
    ["move", "cells", "prior_pieces", "prior_arrangements", "prior_player"],
)

PRELAID = "Track"


class GameState:
    """
    Represents a Monorail position and how it was reached.

    Attributes:
    - board[row][col] = None or the Piece covering that cell
    - occupied: bitmask of covered cells (bit order = rules.cells)
    - arrangements: frozenset of corner layouts still possible
    - active_player: player to move
    - history: restore records, most recent last
    """

    def __init__(self, rules=None):
        self.rules = rules if rules is not None else DEFAULT_RULES
        self.board = [[None] * self.rules.cols for _ in range(self.rules.rows)]
        self.occupied = 0
        self.arrangements = frozenset(self.rules.arrangement_names)
        self.active_player = self.rules.starting_player
        self.history = []

        for cell in self.rules.initial_track:
            self._set(cell, Piece(PRELAID, cell, None))

    @classmethod
    def from_layout(cls, rules, occupied, arrangements=None, active_player=None):
        """
        Build a position directly from the set of laid cells.

        Laid cells carry prelaid track, and the history starts empty.
        """
        state = cls(rules)
        state.board = [[None] * rules.cols for _ in range(rules.rows)]
        state.occupied = 0
        for cell in occupied:
            if not rules.in_bounds(cell):
                raise ValueError(f"Cell {cell} is off the board")
            state._set(cell, Piece(PRELAID, cell, None))
        if arrangements is not None:
            unknown = set(arrangements) - set(rules.arrangement_names)
            if unknown:
                raise ValueError(f"Unknown corner layouts: {sorted(unknown)}")
            if not arrangements:
                raise InconsistentStateError("At least one corner layout must remain possible")
            state.arrangements = frozenset(arrangements)
        if active_player is not None:
            if active_player not in rules.players:
                raise ValueError(f"Unknown player {active_player}")
            state.active_player = active_player
        return state

    def copy(self):
        """Create an independent copy, history included."""
        new_state = GameState.__new__(GameState)
        new_state.rules = self.rules
        new_state.board = [row[:] for row in self.board]
        new_state.occupied = self.occupied
        new_state.arrangements = self.arrangements
        new_state.active_player = self.active_player
        new_state.history = self.history.copy()
        return new_state

    @property
    def turn_number(self):
        return len(self.history)

    def piece_at(self, cell):
        return self.board[cell[0]][cell[1]]

    def _set(self, cell, piece):
        self.board[cell[0]][cell[1]] = piece
        bit = self.rules.cell_bits[cell]
        if piece is None:
            self.occupied &= ~bit
        else:
            self.occupied |= bit

    def legal_moves(self):
        return legal_moves(self)

    def play(self, move, validate=True):
        """
        Lay the piece described by move and pass the turn.

        With validate=False the move is trusted to come from legal_moves()
        on this very state; the search uses that to skip re-generation.
        """
        rules = self.rules
        if validate:
            if not rules.in_bounds(move.cell):
                raise IllegalMoveError(f"{move} is off the board")
            if self.piece_at(move.cell) is not None:
                raise IllegalMoveError(f"{move}: cell {move.cell} is already occupied")
            if move not in legal_moves(self):
                raise IllegalMoveError(f"{move} by {move.player} is not a legal move")

        cells = rules.covered_cells(move.cell, move.variant)
        if cells is None:
            raise InconsistentStateError(f"{move} runs off the board")
        narrowed = rules.consistent_arrangements(cells, self.arrangements)
        if not narrowed:
            raise InconsistentStateError(
                f"{move} fits none of the corner layouts {sorted(self.arrangements)}"
            )

        record = RestoreRecord(
            move=move,
            cells=tuple(cells),
            prior_pieces=tuple(self.piece_at(cell) for cell in cells),
            prior_arrangements=self.arrangements,
            prior_player=self.active_player,
        )
        piece = Piece(move.variant, move.cell, move.player)
        for cell in cells:
            self._set(cell, piece)
        self.arrangements = narrowed
        self.active_player = rules.opponent(self.active_player)
        self.history.append(record)
        return self

    def undo(self):
        """Take back the most recent move and return it."""
        if not self.history:
            raise NoHistoryError("No moves to undo")
        record = self.history.pop()
        for cell, prior in zip(record.cells, record.prior_pieces):
            self._set(cell, prior)
        self.arrangements = record.prior_arrangements
        self.active_player = record.prior_player
        return record.move

    def moves_played(self):
        return [record.move for record in self.history]

    def empty_cells(self):
        return [cell for cell in self.rules.cells if self.piece_at(cell) is None]

    def to_tuple(self):
        """Canonical key: laid cells, possible layouts and player to move."""
        return (self.occupied, self.arrangements, self.active_player)

    def __hash__(self):
        return hash(self.to_tuple())

    def __eq__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            self.rules.signature() == other.rules.signature()
            and self.board == other.board
            and self.arrangements == other.arrangements
            and self.active_player == other.active_player
            and self.history == other.history
        )

    def __str__(self):
        """Pretty print the game state."""
        lines = []
        lines.append(f"Current player: {self.active_player}")
        header = "     " + "".join(f"{col:^4}" for col in range(self.rules.cols))
        lines.append(header)
        for r in range(self.rules.rows):
            row_str = f"  {r}: "
            for c in range(self.rules.cols):
                piece = self.board[r][c]
                if piece is not None:
                    mark = "#" if piece.player is None else piece.player[0]
                elif not self.rules.usable((r, c), self.arrangements):
                    mark = " "
                else:
                    mark = "."
                row_str += f"[{mark}] "
            lines.append(row_str)
        lines.append(f"  Corner layouts: {', '.join(sorted(self.arrangements))}")
        return "\n".join(lines)


# =============================================================================
# Functional interface
# =============================================================================

def new_game(rules=None):
    return GameState(rules)


def apply(state, move):
    """Apply a legal move to state in place and return it."""
    return state.play(move)


def undo(state):
    return state.undo()


def active_player(state):
    return state.active_player


def turn_number(state):
    return state.turn_number
