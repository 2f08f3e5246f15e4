from finlang.automaton import FiniteAutomaton
from finlang.exceptions import UnsupportedGrammarShape
from finlang.grammar import Body, Grammar
from finlang.logging_config import get_logger
from finlang.symbols import State, Symbol, canonical_order, fresh_nonterminals

logger = get_logger(__name__)

FINAL_STATE = "F"


def automaton_to_grammar(automaton: FiniteAutomaton) -> Grammar:
    """
    Build the right-linear grammar of an automaton.

    Each state becomes a non-terminal. A transition p --a--> q yields
    ``N(p) -> a N(q)`` and, when q is final, also ``N(p) -> a``.
    """
    ordered_states = [automaton.start_state] + [
        state
        for state in canonical_order(automaton.states)
        if state != automaton.start_state
    ]
    names = fresh_nonterminals(reserved=automaton.alphabet)
    state_to_nonterminal: dict[State, Symbol] = {
        state: next(names) for state in ordered_states
    }
    for state, nonterminal in state_to_nonterminal.items():
        logger.debug("%s -> %s", state, nonterminal)

    productions: dict[Symbol, list[Body]] = {}
    for state, symbol, target in automaton.edges():
        bodies = productions.setdefault(state_to_nonterminal[state], [])
        bodies.append((symbol, state_to_nonterminal[target]))
        if target in automaton.final_states:
            bodies.append((symbol,))

    return Grammar(
        nonterminals=set(state_to_nonterminal.values()),
        terminals=automaton.alphabet,
        productions=productions,
        start_symbol=state_to_nonterminal[automaton.start_state],
    )


def grammar_to_automaton(grammar: Grammar) -> FiniteAutomaton:
    """
    Build an NFA from a right-linear grammar.

    Every non-terminal becomes a state and one extra accepting state is added.
    Raises UnsupportedGrammarShape for epsilon bodies and for any production
    other than ``A -> a B`` or ``A -> a``.
    """
    final_state = FINAL_STATE
    while final_state in grammar.nonterminals:
        final_state += "'"

    transitions: dict[State, dict[Symbol, set[State]]] = {}
    for head, body in grammar.iter_productions():
        if len(head) != 1:
            raise UnsupportedGrammarShape(
                "production head must be a single non-terminal", head, body
            )
        if not body:
            raise UnsupportedGrammarShape(
                "epsilon production has no transition", head, body
            )
        if not grammar.is_terminal(body[0]):
            raise UnsupportedGrammarShape(
                "production body must start with a terminal", head, body
            )

        if len(body) == 1:
            target = final_state
        elif len(body) == 2 and grammar.is_nonterminal(body[1]):
            target = body[1]
        else:
            raise UnsupportedGrammarShape(
                "production is not right-linear", head, body
            )
        transitions.setdefault(head[0], {}).setdefault(body[0], set()).add(target)

    return FiniteAutomaton(
        states=grammar.nonterminals | {final_state},
        alphabet=grammar.terminals,
        transitions=transitions,
        start_state=grammar.start_symbol,
        final_states={final_state},
    )
