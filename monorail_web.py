"""
Monorail Game Consultant - Streamlit Web Interface

A visual interface for stepping through the JunSeok vs YeonSeung game with
optimal-play analysis.

Usage:
    streamlit run monorail_web.py
"""

import streamlit as st

from monorail_errors import MonorailError
from monorail_rules import DEFAULT_RULES, DRAW, legal_moves, terminal
from monorail_solver import MonorailSolver, outcome_name, winner_for
from monorail_state import GameState


PLAYER_COLORS = {"YEONSEUNG": "#2980b9", "JUNSEOK": "#c0392b"}
PRELAID_COLOR = "#555555"


# =============================================================================
# SVG Board Rendering
# =============================================================================

def generate_board_svg(state, highlight=None):
    """Generate SVG representation of the Monorail board."""
    rules = state.rules
    cell_size = 80
    margin = 30
    width = rules.cols * cell_size + 2 * margin
    height = rules.rows * cell_size + 2 * margin

    highlighted = set()
    if highlight is not None:
        highlighted = set(rules.covered_cells(highlight.cell, highlight.variant) or [])

    svg_parts = [
        f'<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">',
        f'<rect width="{width}" height="{height}" fill="#f5f5dc"/>',
    ]

    for r, c in rules.cells:
        x = margin + c * cell_size
        y = margin + r * cell_size
        piece = state.piece_at((r, c))

        if piece is not None:
            fill = PRELAID_COLOR if piece.player is None else PLAYER_COLORS.get(piece.player, "#888")
        elif not rules.usable((r, c), state.arrangements):
            fill = "#d0c8b0"
        elif (r, c) in highlighted:
            fill = "#fffacd"
        else:
            fill = "#ffffff"

        svg_parts.append(f'<rect x="{x + 2}" y="{y + 2}" width="{cell_size - 4}" height="{cell_size - 4}" '
                         f'fill="{fill}" stroke="#8b7355" stroke-width="2" rx="5"/>')
        if (r, c) in highlighted and piece is None:
            svg_parts.append(f'<circle cx="{x + cell_size // 2}" cy="{y + cell_size // 2}" r="8" fill="#e6b800"/>')

    for c in range(rules.cols):
        x = margin + c * cell_size + cell_size // 2
        svg_parts.append(f'<text x="{x}" y="20" font-family="Arial" font-size="14" fill="#333" text-anchor="middle">{c}</text>')
    for r in range(rules.rows):
        y = margin + r * cell_size + cell_size // 2 + 5
        svg_parts.append(f'<text x="12" y="{y}" font-family="Arial" font-size="14" fill="#333">{r}</text>')

    svg_parts.append('</svg>')
    return '\n'.join(svg_parts)


# =============================================================================
# Streamlit App
# =============================================================================

def init_session_state():
    """Initialize session state variables."""
    if 'game_state' not in st.session_state:
        st.session_state.game_state = GameState(DEFAULT_RULES)
    if 'solver' not in st.session_state:
        st.session_state.solver = MonorailSolver()
    if 'analysis_results' not in st.session_state:
        st.session_state.analysis_results = None


def reset_game():
    """Reset the game to the starting position; the solver cache is kept."""
    st.session_state.game_state = GameState(DEFAULT_RULES)
    st.session_state.analysis_results = None


def undo_move():
    try:
        st.session_state.game_state.undo()
    except MonorailError as e:
        st.error(str(e))
    st.session_state.analysis_results = None


def make_move(move):
    try:
        st.session_state.game_state.play(move)
        st.session_state.analysis_results = None
        return True
    except MonorailError as e:
        st.error(f"Invalid move: {e}")
        return False


def main():
    st.set_page_config(
        page_title="Monorail Consultant",
        page_icon="🚝",
        layout="wide"
    )

    init_session_state()
    state = st.session_state.game_state
    solver = st.session_state.solver
    winner = terminal(state)

    st.title("🚝 Monorail Consultant")
    st.markdown("*Optimal-play analysis of the JunSeok vs YeonSeung game*")

    with st.sidebar:
        st.header("Game Controls")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("🔄 Restart", use_container_width=True):
                reset_game()
                st.rerun()
        with col2:
            if st.button("↩️ Undo", use_container_width=True, disabled=state.turn_number == 0):
                undo_move()
                st.rerun()

        st.divider()
        st.header("Game Info")
        st.markdown(f"**Turn:** {state.turn_number + 1}")
        st.markdown(f"**Corner layouts:** {', '.join(sorted(state.arrangements))}")
        if winner is None:
            st.info(f"{state.active_player}'s turn")
        elif winner == DRAW:
            st.success("Draw")
        else:
            st.success(f"🏆 {winner} WINS!")

        st.divider()
        st.header("Search Cache")
        st.caption(f"Positions cached: {len(solver.cache):,}")
        st.caption(f"Nodes explored: {solver.stats['nodes_explored']:,}")

    col_board, col_controls = st.columns([2, 1])

    moves = legal_moves(state)
    selected = None

    with col_controls:
        if winner is not None:
            st.subheader("🏁 Game Over")
        else:
            st.subheader(f"Make a Move ({state.active_player})")
            labels = [f"{i}. {move}" for i, move in enumerate(moves)]
            choice = st.selectbox("Move", options=list(range(len(moves))),
                                  format_func=lambda i: labels[i])
            selected = moves[choice]

            col_best, col_play = st.columns(2)
            with col_best:
                if st.button("🔍 Best Move", use_container_width=True):
                    with st.spinner("Solving..."):
                        move, outcome = solver.best_move(state)
                    verdict = winner_for(outcome, state.active_player, state.rules)
                    st.success(f"Best: **{move}** ({outcome_name(outcome)})")
                    st.caption("Draw" if verdict == DRAW else f"{verdict} wins with perfect play")
            with col_play:
                if st.button("✅ Play Move", use_container_width=True, type="primary"):
                    if make_move(selected):
                        st.rerun()

            st.divider()
            if st.button("📊 Analyze All Moves", use_container_width=True):
                with st.spinner("Analyzing..."):
                    st.session_state.analysis_results = solver.analyze_all(state)

            if st.session_state.analysis_results:
                st.subheader("Replies")
                for move, (reply, outcome) in st.session_state.analysis_results.items():
                    reply_str = "game over" if reply is None else f"reply {reply}"
                    line = f"**{move}** → {reply_str}, {outcome_name(outcome)}"
                    if outcome > 0:
                        st.success(line)
                    elif outcome < 0:
                        st.error(line)
                    else:
                        st.warning(line)

    with col_board:
        st.subheader("Board")
        st.markdown(generate_board_svg(state, highlight=selected), unsafe_allow_html=True)

        if state.history:
            with st.expander("Move History", expanded=False):
                for i, move in enumerate(state.moves_played()):
                    st.markdown(f"{i + 1}. {move.player}: {move}")

    st.divider()
    st.caption("Monorail Consultant | exhaustive minimax with a transposition table")


if __name__ == "__main__":
    main()
