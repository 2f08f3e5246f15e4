import pydot
import pytest
from pyformlang.finite_automaton import EpsilonNFA, Epsilon
from pyformlang.regular_expression import Regex

from finlang.automaton import FiniteAutomaton
from finlang.config import DotConfig
from finlang.exceptions import StructuralViolation


def test_variant_is_not_deterministic(nfa):
    assert not nfa.is_deterministic()


def test_variant_membership(nfa):
    assert nfa.accepts("ab")
    assert nfa.accepts("abbb")
    assert nfa.accepts("baab")
    assert not nfa.accepts("a")
    assert not nfa.accepts("")
    assert not nfa.accepts("aba")


def test_empty_word_accepted_when_start_is_final():
    automaton = FiniteAutomaton(
        states={"q0"},
        alphabet={"a"},
        transitions={"q0": {"a": {"q0"}}},
        start_state="q0",
        final_states={"q0"},
    )
    assert automaton.accepts("")
    assert automaton.accepts("aaa")


def test_missing_transition_rejects():
    automaton = FiniteAutomaton(
        states={"q0", "q1"},
        alphabet={"a", "b"},
        transitions={"q0": {"a": "q1"}},
        start_state="q0",
        final_states={"q1"},
    )
    assert automaton.is_deterministic()
    assert automaton.accepts("a")
    assert not automaton.accepts("b")
    assert not automaton.accepts("ab")


def test_unknown_symbol_in_word_rejects(nfa):
    assert not nfa.accepts("abc")


def test_multi_character_symbols():
    automaton = FiniteAutomaton(
        states={"even", "odd"},
        alphabet={"tick", "tock"},
        transitions={
            "even": {"tick": {"odd"}, "tock": {"even"}},
            "odd": {"tick": {"even"}, "tock": {"odd"}},
        },
        start_state="even",
        final_states={"odd"},
    )
    assert automaton.accepts(["tick"])
    assert automaton.accepts(["tock", "tick", "tock"])
    assert not automaton.accepts(["tick", "tick"])


def test_empty_destination_sets_are_dropped():
    automaton = FiniteAutomaton(
        states={"q0"},
        alphabet={"a"},
        transitions={"q0": {"a": set()}},
        start_state="q0",
        final_states=set(),
    )
    assert dict(automaton.transitions) == {}
    assert automaton.transitions_from("q0", "a") == frozenset()


def test_transitions_are_read_only(nfa):
    with pytest.raises(TypeError):
        nfa.transitions["q0"] = {}
    with pytest.raises(AttributeError):
        nfa.start_state = "q1"


def test_equal_automata_hash_alike(nfa):
    same = FiniteAutomaton(
        states=nfa.states,
        alphabet=nfa.alphabet,
        transitions={
            state: {symbol: set(targets) for symbol, targets in row.items()}
            for state, row in nfa.transitions.items()
        },
        start_state=nfa.start_state,
        final_states=nfa.final_states,
    )

    assert same == nfa
    assert hash(same) == hash(nfa)
    assert len({nfa, same, nfa.to_dfa()}) == 2


def test_unknown_target_state():
    with pytest.raises(StructuralViolation):
        FiniteAutomaton(
            states={"q0"},
            alphabet={"a"},
            transitions={"q0": {"a": {"q1"}}},
            start_state="q0",
            final_states=set(),
        )


def test_unknown_source_state():
    with pytest.raises(StructuralViolation):
        FiniteAutomaton(
            states={"q0"},
            alphabet={"a"},
            transitions={"q9": {"a": {"q0"}}},
            start_state="q0",
            final_states=set(),
        )


def test_unknown_symbol_in_transition():
    with pytest.raises(StructuralViolation):
        FiniteAutomaton(
            states={"q0"},
            alphabet={"a"},
            transitions={"q0": {"b": {"q0"}}},
            start_state="q0",
            final_states=set(),
        )


def test_unknown_start_and_final_states():
    with pytest.raises(StructuralViolation):
        FiniteAutomaton(
            states={"q0"},
            alphabet={"a"},
            transitions={},
            start_state="q1",
            final_states=set(),
        )
    with pytest.raises(ValueError):
        FiniteAutomaton(
            states={"q0"},
            alphabet={"a"},
            transitions={},
            start_state="q0",
            final_states={"q1"},
        )


def test_edges_are_sorted(nfa):
    expected = [
        ("q0", "a", "q0"),
        ("q0", "a", "q1"),
        ("q0", "b", "q0"),
        ("q1", "a", "q0"),
        ("q1", "b", "q2"),
        ("q2", "b", "q2"),
    ]
    assert list(nfa.edges()) == expected


def test_accepted_words(ending_with_ab):
    expected = {("a", "b"), ("a", "a", "b"), ("b", "a", "b")}
    assert ending_with_ab.accepted_words(3) == expected


def test_dot_export(nfa):
    dot = nfa.to_dot()
    assert dot == nfa.to_dot()
    assert "doublecircle" in dot
    assert "rankdir" in dot

    (graph,) = pydot.graph_from_dot_data(dot)
    assert len(graph.get_edges()) == len(list(nfa.edges())) + 1


def test_dot_config(nfa):
    dot = nfa.to_dot(DotConfig(graph_name="NDFA", rankdir="TB"))
    assert "NDFA" in dot
    assert "TB" in dot


def test_networkx_graph(nfa):
    graph = nfa.to_networkx()
    assert graph.nodes["q2"]["shape"] == "doublecircle"
    assert "shape" not in graph.nodes["q0"]
    labels = sorted(label for _, _, label in graph.edges(data="label") if label)
    assert labels == ["a", "a", "a", "b", "b", "b"]


def test_start_node_does_not_clash_with_states():
    automaton = FiniteAutomaton(
        states={"__start__"},
        alphabet={"a"},
        transitions={},
        start_state="__start__",
        final_states=set(),
    )
    graph = automaton.to_networkx()
    assert graph.number_of_nodes() == 2
    assert graph.has_edge("___start___", "__start__")


def test_save_as_dot(nfa, tmp_path):
    path = tmp_path / "ndfa.dot"
    nfa.save_as_dot(path)
    assert path.read_text() == nfa.to_dot()


def test_describe(nfa):
    description = nfa.describe()
    assert "Start State: q0" in description
    assert "Final States: q2" in description
    assert "  q1 --(b)--> q2" in description


def test_pyformlang_round_trip(nfa):
    restored = FiniteAutomaton.from_pyformlang(nfa.to_pyformlang())
    assert restored.states == nfa.states
    assert restored.alphabet == nfa.alphabet
    assert restored.start_state == nfa.start_state
    assert restored.final_states == nfa.final_states
    assert list(restored.edges()) == list(nfa.edges())


def test_pyformlang_membership_agrees(nfa):
    reference = nfa.to_pyformlang()
    for word in ["", "a", "ab", "abb", "aba", "bab", "aabb"]:
        assert reference.accepts(list(word)) == nfa.accepts(word)


def test_from_pyformlang_regex():
    dfa = Regex("a b*").to_epsilon_nfa().to_deterministic().minimize()
    automaton = FiniteAutomaton.from_pyformlang(dfa)
    assert automaton.is_deterministic()
    assert automaton.accepts("a")
    assert automaton.accepts("abbb")
    assert not automaton.accepts("")
    assert not automaton.accepts("ba")


def test_from_pyformlang_rejects_epsilon():
    enfa = EpsilonNFA()
    enfa.add_start_state(0)
    enfa.add_final_state(1)
    enfa.add_transition(0, Epsilon(), 1)
    with pytest.raises(StructuralViolation):
        FiniteAutomaton.from_pyformlang(enfa)


def test_from_pyformlang_rejects_several_start_states():
    enfa = EpsilonNFA()
    enfa.add_start_state(0)
    enfa.add_start_state(1)
    enfa.add_transition(0, "a", 1)
    with pytest.raises(StructuralViolation):
        FiniteAutomaton.from_pyformlang(enfa)
