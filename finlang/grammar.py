from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping

from pyformlang.cfg import CFG, Production, Terminal, Variable

from finlang.exceptions import StructuralViolation, UnsupportedGrammarShape
from finlang.symbols import EPSILON, Symbol

if TYPE_CHECKING:
    from finlang.automaton import FiniteAutomaton

Head = tuple[Symbol, ...]
Body = tuple[Symbol, ...]
ProductionTable = Mapping[str | Head, Iterable[str | Body]]


class GrammarType(IntEnum):
    UNRESTRICTED = 0
    CONTEXT_SENSITIVE = 1
    CONTEXT_FREE = 2
    REGULAR = 3

    def describe(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    GrammarType.UNRESTRICTED: "Type 0: Unrestricted Grammar",
    GrammarType.CONTEXT_SENSITIVE: "Type 1: Context-Sensitive Grammar",
    GrammarType.CONTEXT_FREE: "Type 2: Context-Free Grammar",
    GrammarType.REGULAR: "Type 3: Regular Grammar",
}


def _split(symbols: str | Iterable[Symbol]) -> tuple[Symbol, ...]:
    if isinstance(symbols, str):
        return tuple(symbols.split())
    return tuple(symbols)


def _freeze_productions(
    productions: ProductionTable,
) -> Mapping[Head, tuple[Body, ...]]:
    frozen: dict[Head, list[Body]] = {}
    for head, bodies in productions.items():
        frozen.setdefault(_split(head), []).extend(_split(body) for body in bodies)
    return MappingProxyType({head: tuple(bodies) for head, bodies in frozen.items()})


@dataclass(frozen=True)
class Grammar:
    nonterminals: frozenset[Symbol]
    terminals: frozenset[Symbol]
    productions: Mapping[Head, tuple[Body, ...]]
    start_symbol: Symbol

    def __post_init__(self) -> None:
        object.__setattr__(self, "nonterminals", frozenset(self.nonterminals))
        object.__setattr__(self, "terminals", frozenset(self.terminals))
        object.__setattr__(self, "productions", _freeze_productions(self.productions))

        if self.start_symbol not in self.nonterminals:
            raise StructuralViolation(
                f"start symbol {self.start_symbol!r} is not a non-terminal"
            )
        if shared := self.nonterminals & self.terminals:
            raise StructuralViolation(
                f"symbols {sorted(shared)} are both terminal and non-terminal"
            )

        symbols = self.nonterminals | self.terminals
        for head, body in self.iter_productions():
            if not any(symbol in self.nonterminals for symbol in head):
                raise StructuralViolation(
                    f"production head {head!r} contains no non-terminal"
                )
            if unknown := (set(head) | set(body)) - symbols:
                raise StructuralViolation(
                    f"production {head!r} -> {body!r} uses undeclared "
                    f"symbols {sorted(unknown)}"
                )

    def __hash__(self) -> int:
        return hash(
            (
                self.nonterminals,
                self.terminals,
                frozenset(self.productions.items()),
                self.start_symbol,
            )
        )

    def is_terminal(self, symbol: Symbol) -> bool:
        return symbol in self.terminals

    def is_nonterminal(self, symbol: Symbol) -> bool:
        return symbol in self.nonterminals

    def bodies(self, head: Symbol | Head) -> tuple[Body, ...]:
        if isinstance(head, str):
            head = (head,)
        return self.productions.get(head, ())

    def iter_productions(self) -> Iterator[tuple[Head, Body]]:
        for head, bodies in self.productions.items():
            for body in bodies:
                yield head, body

    def classify(self) -> GrammarType:
        return classify_grammar(self)

    def to_automaton(self) -> "FiniteAutomaton":
        from finlang.grammar_bridge import grammar_to_automaton

        return grammar_to_automaton(self)

    def to_cfg(self) -> CFG:
        productions = set()
        for head, body in self.iter_productions():
            if len(head) != 1:
                raise UnsupportedGrammarShape(
                    "context-free grammars need single-symbol heads", head, body
                )
            productions.add(
                Production(
                    Variable(head[0]),
                    [
                        Variable(symbol)
                        if self.is_nonterminal(symbol)
                        else Terminal(symbol)
                        for symbol in body
                    ],
                )
            )
        return CFG(
            variables={Variable(symbol) for symbol in self.nonterminals},
            terminals={Terminal(symbol) for symbol in self.terminals},
            start_symbol=Variable(self.start_symbol),
            productions=productions,
        )

    def describe(self) -> str:
        lines = []
        for head, bodies in self.productions.items():
            alternatives = " | ".join(" ".join(body) or EPSILON for body in bodies)
            lines.append(f"{' '.join(head)} -> {alternatives}")
        return "\n".join(lines)


def classify_grammar(grammar: Grammar) -> GrammarType:
    """
    Place the grammar in the Chomsky hierarchy by the shape of its productions.

    The check is structural: a grammar is reported regular when every body has
    at most two symbols, the second of them a non-terminal, whatever its heads
    look like. Epsilon bodies are ignored by every criterion.
    """
    is_regular = True
    is_context_free = True
    is_context_sensitive = True

    for head, body in grammar.iter_productions():
        if not body:
            continue

        if len(body) > 2 or (len(body) == 2 and not grammar.is_nonterminal(body[1])):
            is_regular = False

        if len(head) != 1 or not grammar.is_nonterminal(head[0]):
            is_context_free = False

        if len(head) > len(body):
            is_context_sensitive = False

    if is_regular:
        return GrammarType.REGULAR
    if is_context_free:
        return GrammarType.CONTEXT_FREE
    if is_context_sensitive:
        return GrammarType.CONTEXT_SENSITIVE
    return GrammarType.UNRESTRICTED
