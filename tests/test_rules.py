"""Tests for the rule table, move generation and game end."""

import pytest

from monorail_rules import (
    DEFAULT_RULES, DRAW, Move, RuleTable, frontier, legal_moves, terminal,
)
from monorail_state import GameState


def names(moves):
    return [str(move) for move in moves]


class TestRuleTable:
    """Tests for the scenario data helpers."""

    def test_covered_cells_anchor_first(self):
        assert DEFAULT_RULES.covered_cells((1, 2), "UpAndDown") == [(1, 2), (0, 2), (2, 2)]

    def test_covered_cells_off_board(self):
        assert DEFAULT_RULES.covered_cells((3, 0), "OneDown") is None
        assert DEFAULT_RULES.covered_cells((0, 4), "TwoRight") is None

    def test_usable_cells(self):
        everything = {"LEFT", "MIDDLE", "RIGHT"}
        assert DEFAULT_RULES.usable((1, 1), everything)
        assert not DEFAULT_RULES.usable((1, 1), {"LEFT", "MIDDLE"})
        assert not DEFAULT_RULES.usable((3, 0), {"MIDDLE", "RIGHT"})
        assert DEFAULT_RULES.usable((0, 0), {"RIGHT"})

    def test_consistent_arrangements(self):
        everything = frozenset({"LEFT", "MIDDLE", "RIGHT"})
        assert DEFAULT_RULES.consistent_arrangements([(1, 1)], everything) == {"RIGHT"}
        assert DEFAULT_RULES.consistent_arrangements([(1, 0), (2, 0)], everything) == {"LEFT", "MIDDLE"}
        assert DEFAULT_RULES.consistent_arrangements([(2, 0), (2, 1)], {"LEFT", "RIGHT"}) == frozenset()

    def test_opponent(self):
        assert DEFAULT_RULES.opponent("YEONSEUNG") == "JUNSEOK"
        assert DEFAULT_RULES.opponent("JUNSEOK") == "YEONSEUNG"

    def test_signature_tracks_rule_changes(self, line_rules):
        assert line_rules(3).signature() == line_rules(3).signature()
        assert line_rules(3).signature() != line_rules(4).signature()
        assert line_rules(3).signature() != line_rules(3, stalemate=DRAW).signature()

    def test_rejects_bad_tables(self):
        with pytest.raises(ValueError):
            RuleTable(1, 2, [("Single", [])], [("ANY", [])], [(0, 0)], ["A", "B", "C"], "A")
        with pytest.raises(ValueError):
            RuleTable(1, 2, [("Single", [])], [("ANY", [])], [(0, 0)], ["A", "B"], "Z")
        with pytest.raises(ValueError):
            RuleTable(1, 2, [("Single", [])], [("ANY", [])], [(0, 0)], ["A", "B"], "A", stalemate="coin")


class TestMoveGeneration:
    """Tests for legal_moves() and its ordering."""

    def test_turn_four_listing(self, turn_four_state):
        assert names(legal_moves(turn_four_state)) == [
            "Single(3,0)", "OneRight(3,0)",
            "Single(3,1)", "OneLeft(3,1)",
            "Single(3,3)", "OneRight(3,3)",
            "Single(3,4)", "OneLeft(3,4)",
        ]

    def test_turn_four_moves_belong_to_player_to_move(self, turn_four_state):
        assert {move.player for move in legal_moves(turn_four_state)} == {"YEONSEUNG"}

    def test_starting_frontier(self, start_state):
        assert frontier(start_state) == [
            (0, 0), (0, 4), (1, 1), (1, 2), (1, 4), (2, 2), (2, 4), (3, 3),
        ]

    def test_starting_position_has_corner_moves(self, start_state):
        moves = legal_moves(start_state)
        assert Move((1, 1), "Single", "YEONSEUNG") in moves
        assert Move((0, 0), "TwoDown", "YEONSEUNG") in moves
        assert Move((0, 0), "OneRight", "YEONSEUNG") not in moves

    def test_order_is_row_major_then_catalog(self, start_state):
        catalog_index = {name: i for i, (name, _) in enumerate(DEFAULT_RULES.catalog)}
        keys = [(move.cell, catalog_index[move.variant]) for move in legal_moves(start_state)]
        assert keys == sorted(keys)

    def test_order_is_reproducible(self, start_state):
        assert legal_moves(start_state) == legal_moves(GameState(DEFAULT_RULES))

    def test_missing_corner_cells_are_not_playable(self):
        state = GameState.from_layout(DEFAULT_RULES, [(0, 1), (1, 0)], arrangements={"LEFT", "MIDDLE"})
        cells = {move.cell for move in legal_moves(state)}
        assert (1, 1) not in cells

    def test_move_fitting_no_layout_is_excluded(self):
        # (2,0) exists only under LEFT and (2,1) only under RIGHT
        state = GameState.from_layout(DEFAULT_RULES, [(1, 0)], arrangements={"LEFT", "RIGHT"})
        moves = legal_moves(state)
        assert Move((2, 0), "Single", "YEONSEUNG") in moves
        assert Move((2, 0), "OneRight", "YEONSEUNG") not in moves

    def test_extension_into_missing_cell_is_excluded(self, turn_four_state):
        assert Move((3, 1), "OneUp", "YEONSEUNG") not in legal_moves(turn_four_state)


class TestTerminal:
    """Tests for the end-of-game evaluator."""

    def test_game_in_progress(self, start_state, turn_four_state):
        assert terminal(start_state) is None
        assert terminal(turn_four_state) is None

    def test_stuck_player_loses(self):
        laid = [cell for cell in DEFAULT_RULES.cells if cell not in [(1, 1), (2, 1)]]
        state = GameState.from_layout(DEFAULT_RULES, laid, arrangements={"LEFT"}, active_player="JUNSEOK")
        assert legal_moves(state) == []
        assert terminal(state) == "YEONSEUNG"

    def test_stalemate_draw_rule(self, line_rules):
        rules = line_rules(1, stalemate=DRAW)
        state = GameState(rules)
        state.play(Move((0, 1), "Single", "FIRST"))
        assert terminal(state) == DRAW

    def test_terminal_has_no_side_effects(self, turn_four_state):
        before = turn_four_state.copy()
        terminal(turn_four_state)
        assert turn_four_state == before
