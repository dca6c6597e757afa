"""Tests for the web view's board rendering."""

from monorail_rules import Move
from monorail_web import PLAYER_COLORS, PRELAID_COLOR, generate_board_svg


class TestBoardSvg:

    def test_one_square_per_cell(self, start_state):
        svg = generate_board_svg(start_state)
        assert svg.startswith("<svg")
        assert svg.endswith("</svg>")
        # background plus 20 cells
        assert svg.count("<rect") == 1 + 20

    def test_track_colors(self, start_state):
        start_state.play(Move((3, 3), "Single", "YEONSEUNG"))
        svg = generate_board_svg(start_state)
        assert svg.count(PRELAID_COLOR) == 5
        assert svg.count(PLAYER_COLORS["YEONSEUNG"]) == 1

    def test_highlight_marks_covered_cells(self, start_state):
        svg = generate_board_svg(start_state, highlight=Move((0, 0), "TwoDown", "YEONSEUNG"))
        assert svg.count("<circle") == 3
