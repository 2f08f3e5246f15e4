from itertools import count, product
from string import ascii_uppercase
from typing import Iterable, Iterator

State = str
Symbol = str

EPSILON = "ε"


def canonical_order(states: Iterable[State]) -> list[State]:
    return sorted(states, key=str)


def join_states(states: Iterable[State]) -> State:
    return "{" + ",".join(canonical_order(states)) + "}"


def split_word(word: str | Iterable[Symbol]) -> tuple[Symbol, ...]:
    # a plain string is read one character per symbol
    return tuple(word)


def fresh_nonterminals(reserved: Iterable[Symbol] = ()) -> Iterator[Symbol]:
    reserved = set(reserved)
    letters = ["S"] + [letter for letter in ascii_uppercase if letter != "S"]
    for suffix in count():
        for letter in letters:
            name = letter if suffix == 0 else f"{letter}{suffix}"
            if name not in reserved:
                yield name


def enumerate_words(
    alphabet: Iterable[Symbol], max_length: int
) -> Iterator[tuple[Symbol, ...]]:
    letters = sorted(alphabet)
    for length in range(max_length + 1):
        yield from product(letters, repeat=length)
