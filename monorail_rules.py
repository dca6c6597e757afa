"""
Monorail - Board Rules, Move Generation and Game End

Scenario: the JunSeok vs YeonSeung game, analysed from the position after
the first move.

Board structure:
- 4 rows x 5 columns, cells addressed as (row, col)
- Five cells of track are already laid (INITIAL_TRACK)
- The lower-left corner can be laid out in three ways (LEFT, MIDDLE, RIGHT);
  under each layout two of its cells do not exist

Move rules:
1. A piece is anchored on an empty cell next to (orthogonally) laid track
2. Every cell the piece covers must be on the board, empty and still
   possible under some remaining corner layout
3. Laying a piece keeps only the corner layouts that contain all of its
   cells; a piece that fits no remaining layout cannot be laid

Game end:
- The player to move with no legal move has lost: the opponent laid the
  last piece of track and closed the monorail.

All of the above lives in a RuleTable, so a smaller board (or different
pieces, layouts or stalemate rule) can be swapped in without touching the
enumeration order.
"""

from collections import namedtuple


# =============================================================================
# Scenario Definition
# =============================================================================

NUM_ROWS = 4
NUM_COLS = 5

PLAYERS = ["YEONSEUNG", "JUNSEOK"]
STARTING_PLAYER = "YEONSEUNG"

# Cells already laid when the analysed position starts
INITIAL_TRACK = [(0, 1), (0, 2), (0, 3), (1, 3), (2, 3)]

# Piece catalog in display order: name -> cells covered besides the anchor
PIECE_CATALOG = [
    ("Single", []),
    ("OneUp", [(-1, 0)]),
    ("OneDown", [(1, 0)]),
    ("OneLeft", [(0, -1)]),
    ("OneRight", [(0, 1)]),
    ("TwoUp", [(-1, 0), (-2, 0)]),
    ("TwoDown", [(1, 0), (2, 0)]),
    ("TwoLeft", [(0, -1), (0, -2)]),
    ("TwoRight", [(0, 1), (0, 2)]),
    ("UpAndDown", [(-1, 0), (1, 0)]),
    ("LeftAndRight", [(0, -1), (0, 1)]),
]

# Corner layouts: name -> cells missing from the board under that layout
ARRANGEMENT_GAPS = [
    ("LEFT", [(2, 1), (1, 1)]),
    ("MIDDLE", [(3, 0), (1, 1)]),
    ("RIGHT", [(3, 0), (2, 0)]),
]

NEIGHBOR_OFFSETS = [(-1, 0), (1, 0), (0, -1), (0, 1)]

# Stalemate policies
PREVIOUS_PLAYER_WINS = "previous_player_wins"
DRAW = "DRAW"


# =============================================================================
# Value Types
# =============================================================================

class Move(namedtuple("Move", ["cell", "variant", "player"])):
    """A piece variant anchored on a cell by a player."""

    __slots__ = ()

    def __str__(self):
        return f"{self.variant}({self.cell[0]},{self.cell[1]})"


# player is None for the track laid before the analysed position
Piece = namedtuple("Piece", ["variant", "anchor", "player"])


# =============================================================================
# Rule Table
# =============================================================================

class RuleTable:
    """
    Data describing one Monorail scenario.

    Args:
        rows, cols: Board size
        catalog: [(variant, [(drow, dcol), ...]), ...] in enumeration order
        arrangement_gaps: [(layout, [cell, ...]), ...] cells missing per layout
        initial_track: Cells laid before the first analysed move
        players: The two players, in turn order
        starting_player: Player to move in the initial position
        stalemate: PREVIOUS_PLAYER_WINS or DRAW, the result when the player
            to move has no legal move
    """

    def __init__(self, rows, cols, catalog, arrangement_gaps, initial_track,
                 players, starting_player, stalemate=PREVIOUS_PLAYER_WINS):
        if len(players) != 2:
            raise ValueError("Monorail is a two-player game")
        if starting_player not in players:
            raise ValueError(f"Unknown starting player {starting_player}")
        if stalemate not in (PREVIOUS_PLAYER_WINS, DRAW):
            raise ValueError(f"Unknown stalemate rule {stalemate}")

        self.rows = rows
        self.cols = cols
        self.catalog = [(name, tuple(offsets)) for name, offsets in catalog]
        self.offsets = dict(self.catalog)
        self.arrangement_names = [name for name, _ in arrangement_gaps]
        self.gaps = {name: frozenset(cells) for name, cells in arrangement_gaps}
        self.initial_track = list(initial_track)
        self.players = list(players)
        self.starting_player = starting_player
        self.stalemate = stalemate

        self.cells = [(r, c) for r in range(rows) for c in range(cols)]
        self.cell_bits = {cell: 1 << i for i, cell in enumerate(self.cells)}

    def in_bounds(self, cell):
        return 0 <= cell[0] < self.rows and 0 <= cell[1] < self.cols

    def covered_cells(self, anchor, variant):
        """Cells covered by variant anchored at anchor (anchor first), or None if off the board."""
        cells = [anchor]
        for dr, dc in self.offsets[variant]:
            cell = (anchor[0] + dr, anchor[1] + dc)
            if not self.in_bounds(cell):
                return None
            cells.append(cell)
        return cells

    def neighbors(self, cell):
        for dr, dc in NEIGHBOR_OFFSETS:
            other = (cell[0] + dr, cell[1] + dc)
            if self.in_bounds(other):
                yield other

    def usable(self, cell, arrangements):
        """Can cell exist under at least one of the remaining layouts?"""
        return any(cell not in self.gaps[name] for name in arrangements)

    def consistent_arrangements(self, cells, arrangements):
        """The remaining layouts under which every one of cells exists."""
        return frozenset(
            name for name in arrangements
            if not any(cell in self.gaps[name] for cell in cells)
        )

    def opponent(self, player):
        return self.players[1] if player == self.players[0] else self.players[0]

    def signature(self):
        """Hashable summary of every rule; equal signatures mean equal games."""
        return (
            self.rows,
            self.cols,
            tuple(self.catalog),
            tuple((name, tuple(sorted(self.gaps[name]))) for name in self.arrangement_names),
            tuple(self.initial_track),
            tuple(self.players),
            self.starting_player,
            self.stalemate,
        )


DEFAULT_RULES = RuleTable(
    rows=NUM_ROWS,
    cols=NUM_COLS,
    catalog=PIECE_CATALOG,
    arrangement_gaps=ARRANGEMENT_GAPS,
    initial_track=INITIAL_TRACK,
    players=PLAYERS,
    starting_player=STARTING_PLAYER,
)


# =============================================================================
# Move Generation
# =============================================================================

def frontier(state):
    """Empty, usable cells with laid track next to them, in row-major order."""
    rules = state.rules
    board = state.board
    cells = []
    for cell in rules.cells:
        if board[cell[0]][cell[1]] is not None:
            continue
        if not rules.usable(cell, state.arrangements):
            continue
        if any(board[r][c] is not None for r, c in rules.neighbors(cell)):
            cells.append(cell)
    return cells


def legal_moves(state):
    """
    Return every legal move for the player to move.

    Order: anchor cell in row-major order, then piece catalog order. The
    consultant numbers moves by this order, so it must stay stable.
    """
    rules = state.rules
    board = state.board
    arrangements = state.arrangements
    player = state.active_player

    moves = []
    for anchor in frontier(state):
        for variant, _ in rules.catalog:
            cells = rules.covered_cells(anchor, variant)
            if cells is None:
                continue
            blocked = False
            for r, c in cells[1:]:
                if board[r][c] is not None or not rules.usable((r, c), arrangements):
                    blocked = True
                    break
            if blocked:
                continue
            # Cells may each fit some layout and still fit no layout together
            if not rules.consistent_arrangements(cells, arrangements):
                continue
            moves.append(Move(anchor, variant, player))
    return moves


# =============================================================================
# Game End
# =============================================================================

def stalemate_winner(state):
    """Result when the player to move is stuck: the other player, or DRAW."""
    if state.rules.stalemate == DRAW:
        return DRAW
    return state.rules.opponent(state.active_player)


def terminal(state):
    """Return None while the game goes on, else the winning player or DRAW."""
    if legal_moves(state):
        return None
    return stalemate_winner(state)
