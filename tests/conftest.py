"""
Shared pytest fixtures for the Monorail tests.

Search tests mostly use late positions of the real scenario or small
single-row rule tables whose results can be worked out by hand; the
starting position itself is solved once per module in test_solver.
"""

import pytest

from monorail_rules import DEFAULT_RULES, PREVIOUS_PLAYER_WINS, RuleTable
from monorail_state import GameState


# Turn 4 of the recorded game: rows 0-2 laid except the two cells missing
# under the LEFT corner layout, plus (3,2); only LEFT remains possible.
TURN_FOUR_TRACK = [
    (0, 0), (0, 1), (0, 2), (0, 3), (0, 4),
    (1, 0), (1, 2), (1, 3), (1, 4),
    (2, 0), (2, 2), (2, 3), (2, 4),
    (3, 2),
]

LINE_CATALOG = [
    ("Single", []),
    ("OneLeft", [(0, -1)]),
    ("OneRight", [(0, 1)]),
]


def make_line_rules(empty_cells, catalog=None, stalemate=PREVIOUS_PLAYER_WINS):
    """One row: a laid cell at (0, 0) followed by empty_cells free cells."""
    return RuleTable(
        rows=1,
        cols=empty_cells + 1,
        catalog=catalog if catalog is not None else LINE_CATALOG,
        arrangement_gaps=[("ANY", [])],
        initial_track=[(0, 0)],
        players=["FIRST", "SECOND"],
        starting_player="FIRST",
        stalemate=stalemate,
    )


def make_turn_four_state():
    return GameState.from_layout(
        DEFAULT_RULES, TURN_FOUR_TRACK, arrangements={"LEFT"}, active_player="YEONSEUNG"
    )


@pytest.fixture
def start_state():
    """The analysed starting position of the real scenario."""
    return GameState(DEFAULT_RULES)


@pytest.fixture
def turn_four_state():
    return make_turn_four_state()


@pytest.fixture
def line_rules():
    return make_line_rules
