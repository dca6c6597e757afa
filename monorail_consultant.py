"""
Monorail Game Consultant - Interactive Move Advisor

Plays through the JunSeok vs YeonSeung game from the position after the
first move. Moves are chosen by their number in the move list; at any point
the consultant can show the optimal move or the best reply to every move.

Usage:
    python monorail_consultant.py            # Interactive mode
    python monorail_consultant.py -l         # List legal moves and exit
    python monorail_consultant.py -b         # Best move from the start
    python monorail_consultant.py -a         # Best reply to every first move
"""

import argparse

from monorail_errors import MonorailError
from monorail_rules import DEFAULT_RULES, DRAW, legal_moves, terminal
from monorail_solver import MonorailSolver, outcome_name, winner_for
from monorail_state import GameState


# =============================================================================
# Display Functions
# =============================================================================

def print_board(state):
    """Print the current game state."""
    print("\n" + "=" * 50)
    print(f"Turn {state.turn_number + 1}")
    print("=" * 50)
    print(state)


def format_move_list(moves):
    """Numbered move list: index, piece variant, target cell."""
    return [f"{i} {move.variant} ({move.cell[0]}, {move.cell[1]})" for i, move in enumerate(moves)]


def print_valid_moves(state):
    """Print all legal moves for the player to move."""
    moves = legal_moves(state)
    if not moves:
        print("No valid moves available!")
        return
    print(f"\nValid moves for {state.active_player}:")
    for line in format_move_list(moves):
        print(f"  {line}")


def describe(outcome, mover, rules):
    winner = winner_for(outcome, mover, rules)
    if winner == DRAW:
        return "DRAW with perfect play"
    return f"{winner} wins with perfect play"


def print_best_move(solver, state):
    """Print the optimal move for the player to move."""
    move, outcome = solver.best_move(state)
    mover = state.active_player
    print("\n" + "-" * 50)
    print(f"Best move for {mover}: {move}  [{outcome_name(outcome)}]")
    print(f"  {describe(outcome, mover, state.rules)}")
    print(f"  Nodes explored: {solver.stats['nodes_explored']:,}, "
          f"cache hits: {solver.stats['cache_hits']:,}")


def print_all_responses(solver, state):
    """Print the best reply to every legal move."""
    mover = state.active_player
    opponent = state.rules.opponent(mover)
    results = solver.analyze_all(state)
    print("\n" + "-" * 50)
    print(f"Replies to every move by {mover}")
    print("-" * 50)
    for i, (move, (reply, outcome)) in enumerate(results.items()):
        if reply is None:
            print(f"  {i}. If {mover} does {move}: game over, {outcome_name(outcome)} for {mover}")
        else:
            print(f"  {i}. If {mover} does {move}: {opponent} does {reply}, "
                  f"{outcome_name(outcome)} for {mover}")


def print_principal_line(solver, state, max_moves=20):
    """Show the game continuing with optimal play from both sides."""
    line = solver.principal_line(state, max_moves=max_moves + 1)
    if not line:
        print("Game is over.")
        return
    player = state.active_player
    turn = state.turn_number + 1
    for move, outcome in line[:max_moves]:
        print(f"    {turn}. {player}: {move}  [{outcome_name(outcome)}]")
        player = state.rules.opponent(player)
        turn += 1
    if len(line) > max_moves:
        print("  (line truncated)")


def print_help():
    """Print help information."""
    print("""
Commands:
  <number>        - Play the move with that number
  best, b         - Show the optimal move for the player to move
  analyze, a      - Show the best reply to every legal move
  line            - Show the rest of the game with optimal play
  undo, u         - Undo last move
  board           - Show current board
  moves           - Show legal moves
  help            - Show this help
  quit            - Exit the consultant
""")


# =============================================================================
# Command Handling
# =============================================================================

def handle_command(command, state, solver):
    """
    Run one interactive command against state.

    Returns:
        False when the consultant should stop, True otherwise
    """
    if command in ("quit", "exit", "q"):
        print("Goodbye!")
        return False

    try:
        if command == "help":
            print_help()
        elif command == "board":
            print_board(state)
        elif command == "moves":
            print_valid_moves(state)
        elif command in ("best", "b"):
            print_best_move(solver, state)
        elif command in ("analyze", "a"):
            print_all_responses(solver, state)
        elif command == "line":
            print_principal_line(solver, state)
        elif command in ("undo", "u"):
            move = state.undo()
            print(f"Undid {move}.")
        else:
            try:
                index = int(command)
            except ValueError:
                print("Unknown command. Type 'help' for available commands.")
                return True
            moves = legal_moves(state)
            if not 0 <= index < len(moves):
                print("Move not found.")
                return True
            state.play(moves[index])
            print(f"{moves[index].player} played {moves[index]}")
    except MonorailError as e:
        print(f"Error: {e}")
    return True


def run_interactive(state, solver):
    """Main interactive loop."""
    print("\nType 'help' for commands, 'quit' to exit")
    while True:
        winner = terminal(state)
        if winner is not None:
            print_board(state)
            if winner == DRAW:
                print("\n*** GAME OVER - DRAW ***")
            else:
                print(f"\nNo moves left, *** {winner} WINS! ***")
            return winner

        print_board(state)
        print_valid_moves(state)
        prompt = f"\nIt's {state.active_player}'s turn. What move? > "
        try:
            user_input = input(prompt).strip().lower()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            return None

        if not user_input:
            continue
        if not handle_command(user_input, state, solver):
            return None


# =============================================================================
# Main
# =============================================================================

def positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {text}")
    return value


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Monorail Game Consultant - Optimal Play Advisor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python monorail_consultant.py           # Interactive mode
  python monorail_consultant.py -l        # List legal moves
  python monorail_consultant.py -b -a     # Best move, then every reply
        """
    )
    parser.add_argument(
        "-l", "--legal-moves",
        action="store_true",
        help="List the legal moves in the starting position"
    )
    parser.add_argument(
        "-b", "--best",
        action="store_true",
        help="Show the optimal move in the starting position"
    )
    parser.add_argument(
        "-a", "--analyze",
        action="store_true",
        help="Show the best reply to every move in the starting position"
    )
    parser.add_argument(
        "--max-entries",
        type=positive_int,
        default=None,
        help="Bound the search cache to N positions (default: unbounded)"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Reduce output verbosity"
    )

    args = parser.parse_args(argv)

    state = GameState(DEFAULT_RULES)
    solver = MonorailSolver(max_entries=args.max_entries, verbose=not args.quiet)

    if not args.quiet:
        print("=" * 60)
        print("MONORAIL GAME CONSULTANT")
        print("=" * 60)

    if args.legal_moves:
        print_valid_moves(state)
    if args.best:
        print_best_move(solver, state)
    if args.analyze:
        print_all_responses(solver, state)

    if not (args.legal_moves or args.best or args.analyze):
        run_interactive(state, solver)


if __name__ == "__main__":
    main()
