from collections import deque

from finlang.automaton import FiniteAutomaton
from finlang.logging_config import get_logger
from finlang.symbols import State, Symbol, join_states

logger = get_logger(__name__)


def _register(names: dict[frozenset[State], State], subset: frozenset[State]) -> None:
    # members holding braces or commas can make two subsets join to one name
    name = join_states(subset)
    taken = set(names.values())
    while name in taken:
        name += "'"
    names[subset] = name


def convert_to_dfa(automaton: FiniteAutomaton) -> FiniteAutomaton:
    """
    Build a DFA recognizing the same language by subset construction.

    Only subsets reachable from the start state become states. An empty
    destination subset is never registered, so the result may be partial.
    Deterministic input is returned as an equal copy with its own state names.
    """
    if automaton.is_deterministic():
        logger.debug("Automaton is already deterministic, nothing to convert")
        return FiniteAutomaton(
            states=automaton.states,
            alphabet=automaton.alphabet,
            transitions=automaton.transitions,
            start_state=automaton.start_state,
            final_states=automaton.final_states,
        )

    alphabet = sorted(automaton.alphabet)
    start_set = frozenset({automaton.start_state})

    names: dict[frozenset[State], State] = {}
    _register(names, start_set)
    queue: deque[frozenset[State]] = deque([start_set])
    final_states: set[State] = set()
    transitions: dict[State, dict[Symbol, State]] = {}

    while queue:
        current_set = queue.popleft()
        current_state = names[current_set]
        if not current_set.isdisjoint(automaton.final_states):
            final_states.add(current_state)

        for symbol in alphabet:
            next_set = frozenset(
                target
                for state in current_set
                for target in automaton.transitions_from(state, symbol)
            )
            if not next_set:
                continue
            if next_set not in names:
                _register(names, next_set)
                queue.append(next_set)
            transitions.setdefault(current_state, {})[symbol] = names[next_set]

    logger.debug(
        "Subset construction: %d NFA states -> %d DFA states",
        len(automaton.states),
        len(names),
    )
    return FiniteAutomaton(
        states=set(names.values()),
        alphabet=automaton.alphabet,
        transitions=transitions,
        start_state=names[start_set],
        final_states=final_states,
    )
