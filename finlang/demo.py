import argparse
from pathlib import Path

from finlang.automaton import FiniteAutomaton
from finlang.config import GenerationConfig
from finlang.generation import generate_strings, make_rng
from finlang.grammar import Grammar
from finlang.logging_config import get_logger, setup_logging
from finlang.subset_construction import convert_to_dfa

logger = get_logger(__name__)


def variant_nfa() -> FiniteAutomaton:
    return FiniteAutomaton(
        states={"q0", "q1", "q2"},
        alphabet={"a", "b"},
        transitions={
            "q0": {"a": {"q0", "q1"}, "b": {"q0"}},
            "q1": {"a": {"q0"}, "b": {"q2"}},
            "q2": {"b": {"q2"}},
        },
        start_state="q0",
        final_states={"q2"},
    )


def variant_grammar() -> Grammar:
    return Grammar(
        nonterminals={"S", "B", "C"},
        terminals={"a", "b", "c"},
        productions={
            "S": ["a B"],
            "B": ["a C", "b B"],
            "C": ["b B", "c", "a S"],
        },
        start_symbol="S",
    )


def run_pipeline(
    automaton: FiniteAutomaton,
    seed: int | None = None,
    config: GenerationConfig | None = None,
    output_dir: Path | None = None,
) -> list[tuple[str, bool]]:
    config = config or GenerationConfig()
    rng = make_rng(seed)

    deterministic = automaton.is_deterministic()
    logger.info(
        "The automaton is %s",
        "deterministic" if deterministic else "non-deterministic",
    )
    dfa = convert_to_dfa(automaton)
    logger.info("DFA representation:\n%s", dfa.describe())

    grammar = automaton.to_grammar()
    logger.info("Grammar:\n%s", grammar.describe())
    logger.info("Grammar classification: %s", grammar.classify().describe())

    verdicts = []
    for word in generate_strings(grammar, rng=rng, config=config):
        accepted = dfa.accepts(word)
        verdicts.append((word, accepted))
        logger.info("%s -> %s", word, "Valid" if accepted else "Invalid")

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        dfa.save_as_dot(output_dir / "dfa.dot")
        automaton.save_as_dot(output_dir / "nfa.dot")
        logger.info("Graphs saved to %s", output_dir)

    return verdicts


def check_grammar(
    grammar: Grammar,
    seed: int | None = None,
    config: GenerationConfig | None = None,
) -> list[tuple[str, bool]]:
    config = config or GenerationConfig()
    automaton = grammar.to_automaton()

    verdicts = []
    for word in generate_strings(grammar, seed=seed, config=config):
        accepted = automaton.accepts(word)
        verdicts.append((word, accepted))
        logger.info("String '%s' is %s", word, "VALID" if accepted else "INVALID")
    return verdicts


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run the finite automaton and grammar pipeline on the lab variant"
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--count", type=int, default=None)
    parser.add_argument("--output-dir", type=Path, default=None)
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level)
    config = GenerationConfig.from_env()
    if args.count is not None:
        config = GenerationConfig(count=args.count, max_depth=config.max_depth)

    verdicts = run_pipeline(variant_nfa(), args.seed, config, args.output_dir)
    verdicts += check_grammar(variant_grammar(), args.seed, config)
    return 0 if all(accepted for _, accepted in verdicts) else 1


if __name__ == "__main__":
    raise SystemExit(main())
