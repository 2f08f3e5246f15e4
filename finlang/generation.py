import numpy as np

from finlang.config import GenerationConfig
from finlang.exceptions import GenerationError, UnsupportedGrammarShape
from finlang.grammar import Body, Grammar
from finlang.logging_config import get_logger
from finlang.symbols import Symbol

logger = get_logger(__name__)


def make_rng(seed: int | None = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def derivation_heights(grammar: Grammar) -> dict[Symbol, int]:
    """
    Height of the shortest derivation tree of every productive non-terminal.

    Non-terminals that cannot derive a terminal string are absent.
    """
    heights: dict[Symbol, int] = {}

    changed = True
    while changed:
        changed = False
        for head, body in grammar.iter_productions():
            if len(head) != 1:
                raise UnsupportedGrammarShape(
                    "string generation needs single-symbol heads", head, body
                )
            height = _body_height(grammar, heights, body)
            if height is not None and height < heights.get(head[0], height + 1):
                heights[head[0]] = height
                changed = True

    return heights


def _body_height(
    grammar: Grammar, heights: dict[Symbol, int], body: Body
) -> int | None:
    children = []
    for symbol in body:
        if grammar.is_nonterminal(symbol):
            if symbol not in heights:
                return None
            children.append(heights[symbol])
    return 1 + max(children, default=0)


def derive(
    grammar: Grammar,
    rng: np.random.Generator,
    config: GenerationConfig | None = None,
) -> tuple[Symbol, ...]:
    """
    One random leftmost derivation from the start symbol.

    After ``config.max_depth`` expansions only productions of minimal height
    are chosen, which bounds the derivation.
    """
    config = config or GenerationConfig()
    heights = derivation_heights(grammar)
    if grammar.start_symbol not in heights:
        raise GenerationError(
            f"start symbol {grammar.start_symbol!r} derives no terminal string"
        )

    word: list[Symbol] = []
    stack: list[Symbol] = [grammar.start_symbol]
    expansions = 0

    while stack:
        symbol = stack.pop()
        if grammar.is_terminal(symbol):
            word.append(symbol)
            continue

        candidates = [
            (body, height)
            for body in grammar.bodies(symbol)
            if (height := _body_height(grammar, heights, body)) is not None
        ]
        if expansions >= config.max_depth:
            lowest = min(height for _, height in candidates)
            candidates = [
                (body, height) for body, height in candidates if height == lowest
            ]

        body, _ = candidates[rng.integers(len(candidates))]
        expansions += 1
        stack.extend(reversed(body))

    return tuple(word)


def generate_strings(
    grammar: Grammar,
    count: int | None = None,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
    config: GenerationConfig | None = None,
) -> list[str]:
    config = config or GenerationConfig()
    count = config.count if count is None else count
    rng = rng if rng is not None else make_rng(seed)

    generated = []
    for _ in range(count):
        word = "".join(derive(grammar, rng, config))
        logger.debug("Generated %r", word)
        generated.append(word)
    return generated
