"""
Monorail - Colored Petri Net Model

Model structure:
- 2 hand places (YeonSeung_Hand, JunSeok_Hand) - each holds one token per
  board cell, coloured with the owning player
- 1 place per board cell (Cell_0_0 .. Cell_3_4) - holds the token of whoever
  laid track there (PRELAID for the track laid before the analysed position)
- 1 transition per (player, cell): <Player>_lays_<r>_<c>, moving a token x
  from the player's hand to the cell

Laying a piece fires one transition per covered cell. Turn order, adjacency
and the corner layouts stay in the game logic (monorail_rules); the net is a
second, independent record of which cells hold track, used to audit a game
history.
"""

from cpnpy.cpn.cpn_imp import (
    CPN, Place, Transition, Arc, Marking, EvaluationContext,
    EnumeratedColorSet
)

from monorail_errors import InconsistentStateError
from monorail_rules import DEFAULT_RULES


PRELAID_TOKEN = "PRELAID"


def place_prefix(player):
    """YEONSEUNG -> YeonSeung style names used for places and transitions."""
    return {"YEONSEUNG": "YeonSeung", "JUNSEOK": "JunSeok"}.get(player, player.capitalize())


def cell_place_name(cell):
    return f"Cell_{cell[0]}_{cell[1]}"


def hand_place_name(player):
    return f"{place_prefix(player)}_Hand"


def transition_name(player, cell):
    return f"{place_prefix(player)}_lays_{cell[0]}_{cell[1]}"


# =============================================================================
# CPN Model Builder
# =============================================================================

def build_monorail_cpn(rules=None):
    """
    Build the Colored Petri Net for a rule table.

    Returns:
        (cpn, places, transitions) with places/transitions keyed by name
    """
    rules = rules if rules is not None else DEFAULT_RULES
    colorset = EnumeratedColorSet("Owner", list(rules.players) + [PRELAID_TOKEN])

    cpn = CPN()
    places = {}
    transitions = {}

    for player in rules.players:
        name = hand_place_name(player)
        places[name] = Place(name, colorset)
        cpn.add_place(places[name])

    for cell in rules.cells:
        name = cell_place_name(cell)
        places[name] = Place(name, colorset)
        cpn.add_place(places[name])

    for player in rules.players:
        hand = places[hand_place_name(player)]
        for cell in rules.cells:
            trans_name = transition_name(player, cell)
            transition = Transition(trans_name, variables=["x"])
            transitions[trans_name] = transition
            cpn.add_transition(transition)

            # Input arc: take token x from the player's hand
            cpn.add_arc(Arc(hand, transition, "x"))
            # Output arc: put token x on the cell
            cpn.add_arc(Arc(transition, places[cell_place_name(cell)], "x"))

    return cpn, places, transitions


def create_initial_marking(rules=None):
    """Hands full, prelaid track on its cells, every other cell empty."""
    rules = rules if rules is not None else DEFAULT_RULES
    marking = Marking()

    for player in rules.players:
        marking.set_tokens(hand_place_name(player), [player] * len(rules.cells))

    prelaid = set(rules.initial_track)
    for cell in rules.cells:
        marking.set_tokens(cell_place_name(cell), [PRELAID_TOKEN] if cell in prelaid else [])

    return marking


# =============================================================================
# Firing and Reading
# =============================================================================

def cell_tokens(marking, cell):
    return [t.value for t in marking.get_multiset(cell_place_name(cell)).tokens]


def fire_move(cpn, marking, context, move, rules=None):
    """Fire one transition per cell covered by move."""
    rules = rules if rules is not None else DEFAULT_RULES
    cells = rules.covered_cells(move.cell, move.variant)
    if cells is None:
        raise InconsistentStateError(f"{move} runs off the board")

    for cell in cells:
        transition = cpn.get_transition_by_name(transition_name(move.player, cell))
        bindings = cpn._find_all_bindings(transition, marking, context)
        if not bindings:
            raise InconsistentStateError(
                f"{move}: transition {transition_name(move.player, cell)} is not enabled"
            )
        cpn.fire_transition(transition, marking, context, bindings[0])


def replay_moves(moves, rules=None):
    """
    Replay a move sequence on a fresh net.

    Returns:
        (cpn, marking) after every move has fired
    """
    rules = rules if rules is not None else DEFAULT_RULES
    cpn, _, _ = build_monorail_cpn(rules)
    marking = create_initial_marking(rules)
    context = EvaluationContext()
    for move in moves:
        fire_move(cpn, marking, context, move, rules)
    return cpn, marking


def occupancy_from_marking(marking, rules=None):
    """Map of laid cells -> owner token according to the net."""
    rules = rules if rules is not None else DEFAULT_RULES
    laid = {}
    for cell in rules.cells:
        tokens = cell_tokens(marking, cell)
        if len(tokens) > 1:
            raise InconsistentStateError(f"Cell {cell} holds track twice: {tokens}")
        if tokens:
            laid[cell] = tokens[0]
    return laid


def audit_state(state):
    """
    Replay the state's history on the net and compare with its board.

    Only meaningful for states built by GameState(rules) and play(), whose
    starting track is rules.initial_track.

    Returns:
        List of (cell, board owner, net owner) where the two records differ
    """
    rules = state.rules
    _, marking = replay_moves(state.moves_played(), rules)
    net = occupancy_from_marking(marking, rules)

    mismatches = []
    for cell in rules.cells:
        piece = state.piece_at(cell)
        board_owner = None
        if piece is not None:
            board_owner = PRELAID_TOKEN if piece.player is None else piece.player
        net_owner = net.get(cell)
        if board_owner != net_owner:
            mismatches.append((cell, board_owner, net_owner))
    return mismatches


def print_cpn_info(rules=None):
    """Print the size of the net for a rule table."""
    rules = rules if rules is not None else DEFAULT_RULES
    cpn, places, transitions = build_monorail_cpn(rules)
    print("MONORAIL CPN MODEL")
    print("=" * 40)
    print(f"  Places: {len(places)} ({len(rules.players)} hands + {len(rules.cells)} cells)")
    print(f"  Transitions: {len(transitions)}")
    print(f"  Arcs: {len(cpn.arcs)}")
    print(f"  Prelaid cells: {', '.join(str(c) for c in rules.initial_track)}")
