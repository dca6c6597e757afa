"""
Verify whether a recorded Monorail loss was avoidable.

A game record is the list of move numbers as shown by the consultant
(index into the legal-move list at each turn). For every turn we compare
the move actually played with the best move available:

1. Replay the record from the analysed starting position
2. Before each move, solve the position: what was the mover's best result?
3. Score the move that was played: what result did it leave the mover?
4. A turn where the mover could force a win but played a move that does not
   keep the win is a blunder - the loss (or draw) was avoidable there

The final board is also replayed on the Petri net model as a cross-check.

Usage:
    python verify_history.py 3 0 12 5 ...
"""

import argparse

from monorail_cpn import audit_state
from monorail_errors import IllegalMoveError
from monorail_rules import DEFAULT_RULES, legal_moves, terminal
from monorail_solver import WIN, MonorailSolver, outcome_name
from monorail_state import GameState


def audit_game(move_indices, rules=None, solver=None, verbose=True):
    """
    Replay a recorded game and score every move.

    Returns:
        (turns, winner, mismatches) where turns is a list of dicts with keys
        turn, player, played, played_outcome, best_move, best_outcome and
        blunder; winner is the result of the final position (None if the
        record stops before the end); mismatches comes from the Petri net
        cross-check
    """
    rules = rules if rules is not None else DEFAULT_RULES
    solver = solver if solver is not None else MonorailSolver()
    state = GameState(rules)
    turns = []

    for index in move_indices:
        moves = legal_moves(state)
        if not moves:
            raise IllegalMoveError(f"Turn {state.turn_number + 1}: game already over")
        if not 0 <= index < len(moves):
            raise IllegalMoveError(
                f"Turn {state.turn_number + 1}: move {index} not found ({len(moves)} moves)"
            )

        played = moves[index]
        best, best_outcome = solver.best_move(state)
        _, played_outcome = solver.analyze_all(state)[played]

        entry = {
            "turn": state.turn_number + 1,
            "player": state.active_player,
            "played": played,
            "played_outcome": played_outcome,
            "best_move": best,
            "best_outcome": best_outcome,
            "blunder": best_outcome == WIN and played_outcome < WIN,
        }
        turns.append(entry)

        if verbose:
            marker = "!!" if entry["blunder"] else "  "
            print(f"{marker} {entry['turn']:2d}. {entry['player']}: {played} "
                  f"[{outcome_name(played_outcome)}]  best: {best} [{outcome_name(best_outcome)}]")

        state.play(played)

    return turns, terminal(state), audit_state(state)


def print_summary(turns, winner, mismatches):
    print("\n" + "=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Turns replayed: {len(turns)}")
    if winner is not None:
        print(f"Result: {winner}")

    blunders = [t for t in turns if t["blunder"]]
    if blunders:
        for t in blunders:
            print(f"\n*** Turn {t['turn']}: {t['player']} played {t['played']} "
                  f"but {t['best_move']} forced a win ***")
        print("\nThe loss was avoidable.")
    else:
        print("\nNo forced win was thrown away.")

    if mismatches:
        print("\nWARNING: board and Petri net disagree on:")
        for cell, board_owner, net_owner in mismatches:
            print(f"  {cell}: board={board_owner} net={net_owner}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Check a recorded Monorail game for avoidable losses"
    )
    parser.add_argument(
        "moves",
        type=int,
        nargs="+",
        help="Move numbers played, as listed by the consultant"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only print the summary"
    )
    args = parser.parse_args(argv)

    print("=" * 70)
    print("VERIFYING RECORDED MONORAIL GAME")
    print("=" * 70)

    turns, winner, mismatches = audit_game(args.moves, verbose=not args.quiet)
    print_summary(turns, winner, mismatches)


if __name__ == "__main__":
    main()
