import os
from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationConfig:
    count: int = 5
    max_depth: int = 25

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("count must not be negative")
        if self.max_depth < 0:
            raise ValueError("max_depth must not be negative")

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        return cls(
            count=int(os.getenv("FINLANG_GENERATION_COUNT", cls.count)),
            max_depth=int(os.getenv("FINLANG_MAX_DEPTH", cls.max_depth)),
        )


@dataclass(frozen=True)
class DotConfig:
    graph_name: str = "FA"
    rankdir: str = "LR"
