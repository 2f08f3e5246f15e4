from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping

import networkx as nx
from pyformlang.finite_automaton import (
    Epsilon,
    FiniteAutomaton as PyformlangFA,
    NondeterministicFiniteAutomaton,
    State as FAState,
    Symbol as FASymbol,
)

from finlang.config import DotConfig
from finlang.exceptions import StructuralViolation
from finlang.logging_config import get_logger
from finlang.symbols import State, Symbol, canonical_order, enumerate_words, split_word

if TYPE_CHECKING:
    from finlang.grammar import Grammar

logger = get_logger(__name__)

TransitionTable = Mapping[State, Mapping[Symbol, Iterable[State] | State]]

START_NODE = "__start__"


def _freeze_transitions(
    transitions: TransitionTable,
) -> Mapping[State, Mapping[Symbol, frozenset[State]]]:
    frozen: dict[State, Mapping[Symbol, frozenset[State]]] = {}
    for state, by_symbol in transitions.items():
        row: dict[Symbol, frozenset[State]] = {}
        for symbol, targets in by_symbol.items():
            if isinstance(targets, str):
                targets = (targets,)
            targets = frozenset(targets)
            if targets:
                row[symbol] = targets
        if row:
            frozen[state] = MappingProxyType(row)
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class FiniteAutomaton:
    states: frozenset[State]
    alphabet: frozenset[Symbol]
    transitions: Mapping[State, Mapping[Symbol, frozenset[State]]]
    start_state: State
    final_states: frozenset[State]

    def __post_init__(self) -> None:
        object.__setattr__(self, "states", frozenset(self.states))
        object.__setattr__(self, "alphabet", frozenset(self.alphabet))
        object.__setattr__(self, "final_states", frozenset(self.final_states))
        object.__setattr__(self, "transitions", _freeze_transitions(self.transitions))

        if self.start_state not in self.states:
            raise StructuralViolation(
                f"start state {self.start_state!r} is not one of the states"
            )
        if unknown := self.final_states - self.states:
            raise StructuralViolation(
                f"final states {canonical_order(unknown)} are not among the states"
            )
        for state, by_symbol in self.transitions.items():
            if state not in self.states:
                raise StructuralViolation(
                    f"transition leaves unknown state {state!r}"
                )
            for symbol, targets in by_symbol.items():
                if symbol not in self.alphabet:
                    raise StructuralViolation(
                        f"transition from {state!r} uses unknown symbol {symbol!r}"
                    )
                if unknown := targets - self.states:
                    raise StructuralViolation(
                        f"transition {state!r} --{symbol}--> "
                        f"{canonical_order(unknown)} reaches unknown states"
                    )

    def __hash__(self) -> int:
        return hash(
            (
                self.states,
                self.alphabet,
                frozenset(self.edges()),
                self.start_state,
                self.final_states,
            )
        )

    def transitions_from(self, state: State, symbol: Symbol) -> frozenset[State]:
        return self.transitions.get(state, {}).get(symbol, frozenset())

    def edges(self) -> Iterator[tuple[State, Symbol, State]]:
        for state in canonical_order(self.transitions):
            by_symbol = self.transitions[state]
            for symbol in sorted(by_symbol):
                for target in canonical_order(by_symbol[symbol]):
                    yield state, symbol, target

    def is_deterministic(self) -> bool:
        return all(
            len(targets) == 1
            for by_symbol in self.transitions.values()
            for targets in by_symbol.values()
        )

    def accepts(self, word: str | Iterable[Symbol]) -> bool:
        current_states: set[State] = {self.start_state}

        for symbol in split_word(word):
            current_states = {
                target
                for state in current_states
                for target in self.transitions_from(state, symbol)
            }
            if not current_states:
                return False

        return not current_states.isdisjoint(self.final_states)

    def accepted_words(self, max_length: int) -> set[tuple[Symbol, ...]]:
        return {
            word
            for word in enumerate_words(self.alphabet, max_length)
            if self.accepts(word)
        }

    def to_dfa(self) -> "FiniteAutomaton":
        from finlang.subset_construction import convert_to_dfa

        return convert_to_dfa(self)

    def to_grammar(self) -> "Grammar":
        from finlang.grammar_bridge import automaton_to_grammar

        return automaton_to_grammar(self)

    def to_networkx(self, config: DotConfig | None = None) -> nx.MultiDiGraph:
        config = config or DotConfig()
        graph = nx.MultiDiGraph(name=config.graph_name)
        graph.graph["graph"] = {"rankdir": config.rankdir}
        graph.graph["node"] = {"shape": "circle"}

        for state in canonical_order(self.states):
            if state in self.final_states:
                graph.add_node(state, shape="doublecircle")
            else:
                graph.add_node(state)

        start_node = START_NODE
        while start_node in self.states:
            start_node = f"_{start_node}_"
        graph.add_node(start_node, shape="point")
        graph.add_edge(start_node, self.start_state)

        for state, symbol, target in self.edges():
            graph.add_edge(state, target, label=symbol)
        return graph

    def to_dot(self, config: DotConfig | None = None) -> str:
        pdg = nx.drawing.nx_pydot.to_pydot(self.to_networkx(config))
        return pdg.to_string()

    def save_as_dot(self, path: Path, config: DotConfig | None = None):
        pdg = nx.drawing.nx_pydot.to_pydot(self.to_networkx(config))
        pdg.write_raw(path)
        logger.debug("Saved automaton as %s", path)

    def describe(self) -> str:
        lines = [
            "States: " + " ".join(canonical_order(self.states)),
            "Alphabet: " + " ".join(sorted(self.alphabet)),
            f"Start State: {self.start_state}",
            "Final States: " + " ".join(canonical_order(self.final_states)),
            "Transitions:",
        ]
        lines.extend(
            f"  {state} --({symbol})--> {target}"
            for state, symbol, target in self.edges()
        )
        return "\n".join(lines)

    def to_pyformlang(self) -> NondeterministicFiniteAutomaton:
        nfa = NondeterministicFiniteAutomaton()
        nfa.add_start_state(FAState(self.start_state))
        for state in self.final_states:
            nfa.add_final_state(FAState(state))
        for state, symbol, target in self.edges():
            nfa.add_transition(FAState(state), FASymbol(symbol), FAState(target))
        return nfa

    @classmethod
    def from_pyformlang(cls, automaton: PyformlangFA) -> "FiniteAutomaton":
        if len(automaton.start_states) != 1:
            raise StructuralViolation(
                f"expected exactly one start state, got {len(automaton.start_states)}"
            )
        (start_state,) = automaton.start_states

        transitions: dict[State, dict[Symbol, set[State]]] = {}
        graph = automaton.to_networkx()
        for u, v, label in graph.edges(data="label"):
            if label is None:
                continue
            if label == Epsilon().value:
                raise StructuralViolation(
                    f"epsilon transition {u!r} -> {v!r} cannot be represented"
                )
            transitions.setdefault(str(u), {}).setdefault(str(label), set()).add(
                str(v)
            )

        return cls(
            states={str(state.value) for state in automaton.states},
            alphabet={str(symbol.value) for symbol in automaton.symbols},
            transitions=transitions,
            start_state=str(start_state.value),
            final_states={str(state.value) for state in automaton.final_states},
        )
