"""
Monorail - Optimal Play Search

Exhaustive minimax over the Monorail game tree. Every move lays at least
one cell, so the tree is finite and its depth is bounded by the number of
empty cells. Positions reached by different move orders share one entry in
the transposition table, keyed by GameState.to_tuple().

Outcomes are scored from the point of view of the player to move:
    WIN = 1, DRAW = 0, LOSS = -1
"""

from collections import OrderedDict

from monorail_errors import NoMovesError
from monorail_rules import DRAW as DRAW_RESULT
from monorail_rules import legal_moves, stalemate_winner


WIN = 1
DRAW = 0
LOSS = -1

OUTCOME_NAMES = {WIN: "WIN", DRAW: "DRAW", LOSS: "LOSS"}


def outcome_name(outcome):
    return OUTCOME_NAMES[outcome]


def winner_for(outcome, mover, rules):
    """Turn an outcome scored for mover into the winning player (or DRAW)."""
    if outcome == WIN:
        return mover
    if outcome == LOSS:
        return rules.opponent(mover)
    return DRAW_RESULT


# =============================================================================
# Transposition Table
# =============================================================================

class TranspositionTable:
    """Canonical position -> (best move, outcome), optionally LRU-bounded."""

    def __init__(self, max_entries=None):
        """
        Args:
            max_entries: Entries kept before the least recently used one is
                evicted; None keeps everything
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._table = OrderedDict()
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key):
        if key in self._table:
            if self.max_entries is not None:
                self._table.move_to_end(key)
            self.hits += 1
            return self._table[key]
        self.misses += 1
        return None

    def put(self, key, value):
        if key in self._table:
            self._table.move_to_end(key)
        elif self.max_entries is not None and len(self._table) >= self.max_entries:
            self._table.popitem(last=False)
            self.evictions += 1
        self._table[key] = value

    def __contains__(self, key):
        return key in self._table

    def __len__(self):
        return len(self._table)

    def clear(self):
        """Clear all entries and reset stats."""
        self._table.clear()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def stats(self):
        total_lookups = self.hits + self.misses
        return {
            "entries": len(self._table),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hits / total_lookups if total_lookups > 0 else 0.0,
        }


# =============================================================================
# Solver
# =============================================================================

class MonorailSolver:
    """
    Minimax solver with a transposition table that outlives single queries.

    The table is only valid for one rule table; it is dropped automatically
    when a state with a different rule signature is queried. Queries walk the
    tree with play()/undo() on the caller's state and leave it exactly as
    they found it. One query at a time per solver.
    """

    def __init__(self, max_entries=None, verbose=False, progress_every=100000):
        self.cache = TranspositionTable(max_entries)
        self.verbose = verbose
        self.progress_every = progress_every
        self.stats = {}
        self._rules_signature = None
        self.reset_stats()

    def reset_stats(self):
        self.stats = {
            "nodes_explored": 0,
            "cache_hits": 0,
            "terminal_nodes": 0,
            "max_depth_seen": 0,
        }

    def clear(self):
        self.cache.clear()
        self.reset_stats()

    def _bind_rules(self, rules):
        signature = rules.signature()
        if signature != self._rules_signature:
            if self._rules_signature is not None and self.verbose:
                print("  Rules changed - discarding cached positions")
            self.clear()
            self._rules_signature = signature

    def _stuck_outcome(self, state):
        """Outcome for the player to move when they have no legal move."""
        self.stats["terminal_nodes"] += 1
        winner = stalemate_winner(state)
        if winner == DRAW_RESULT:
            return DRAW
        return WIN if winner == state.active_player else LOSS

    def _search(self, state, moves, depth):
        """
        Minimax from the player to move. moves must be legal_moves(state).
        Returns: (best_move, outcome)
        """
        key = state.to_tuple()
        cached = self.cache.get(key)
        if cached is not None:
            self.stats["cache_hits"] += 1
            return cached

        self.stats["nodes_explored"] += 1
        self.stats["max_depth_seen"] = max(self.stats["max_depth_seen"], depth)
        if self.verbose and self.stats["nodes_explored"] % self.progress_every == 0:
            print(f"  Explored {self.stats['nodes_explored']:,} nodes "
                  f"(cache size: {len(self.cache):,})...")

        best_move = None
        best_outcome = None
        for move in moves:
            state.play(move, validate=False)
            try:
                replies = legal_moves(state)
                if replies:
                    _, reply_outcome = self._search(state, replies, depth + 1)
                    outcome = -reply_outcome
                else:
                    outcome = -self._stuck_outcome(state)
            finally:
                state.undo()

            # Strictly better only: ties keep the earliest move
            if best_outcome is None or outcome > best_outcome:
                best_move = move
                best_outcome = outcome
                if outcome == WIN:
                    break

        result = (best_move, best_outcome)
        self.cache.put(key, result)
        return result

    def best_move(self, state):
        """
        Find the best move for the player to move.

        Returns:
            (move, outcome) with outcome scored for state.active_player

        Raises:
            NoMovesError: the game is already over
        """
        self._bind_rules(state.rules)
        moves = legal_moves(state)
        if not moves:
            raise NoMovesError(f"Game is over; {state.active_player} has no moves")
        return self._search(state, moves, 0)

    def analyze_all(self, state):
        """
        Best opponent reply to every legal move.

        Returns:
            dict in legal-move order: move -> (reply or None, outcome), where
            outcome is scored for the player making move and reply is None
            when move ends the game

        Raises:
            NoMovesError: the game is already over
        """
        self._bind_rules(state.rules)
        moves = legal_moves(state)
        if not moves:
            raise NoMovesError(f"Game is over; {state.active_player} has no moves")

        results = {}
        for move in moves:
            state.play(move, validate=False)
            try:
                replies = legal_moves(state)
                if replies:
                    reply, reply_outcome = self._search(state, replies, 1)
                    results[move] = (reply, -reply_outcome)
                else:
                    results[move] = (None, -self._stuck_outcome(state))
            finally:
                state.undo()
        return results

    def principal_line(self, state, max_moves=None):
        """
        Follow optimal play for both sides from state.

        Returns:
            [(move, outcome for that move's player), ...] until the game ends
            or max_moves is reached; state itself is not modified
        """
        line = []
        played = 0
        try:
            while max_moves is None or len(line) < max_moves:
                moves = legal_moves(state)
                if not moves:
                    break
                self._bind_rules(state.rules)
                move, outcome = self._search(state, moves, 0)
                line.append((move, outcome))
                state.play(move, validate=False)
                played += 1
        finally:
            for _ in range(played):
                state.undo()
        return line


# =============================================================================
# Module-level queries
# =============================================================================

_default_solver = None


def get_solver():
    """The shared solver behind best_move() and analyze_all()."""
    global _default_solver
    if _default_solver is None:
        _default_solver = MonorailSolver()
    return _default_solver


def best_move(state):
    return get_solver().best_move(state)


def analyze_all(state):
    return get_solver().analyze_all(state)
