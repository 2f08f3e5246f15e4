import pytest

from finlang.automaton import FiniteAutomaton
from finlang.demo import variant_nfa
from finlang.generation import make_rng


@pytest.fixture
def nfa() -> FiniteAutomaton:
    return variant_nfa()


@pytest.fixture
def ending_with_ab() -> FiniteAutomaton:
    return FiniteAutomaton(
        states={"s0", "s1", "s2"},
        alphabet={"a", "b"},
        transitions={
            "s0": {"a": {"s0", "s1"}, "b": {"s0"}},
            "s1": {"b": {"s2"}},
        },
        start_state="s0",
        final_states={"s2"},
    )


@pytest.fixture
def rng():
    return make_rng(12345)
