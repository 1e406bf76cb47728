from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

import pandas as pd


class ErrorLevel(Enum):
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"


@dataclass(frozen=True)
class LintProblem:
    file: str
    level: ErrorLevel
    message: str


class LintProblemSet:
    """Collects problems per file, in the order they are reported."""

    def __init__(self) -> None:
        self.problems: dict[str, list[LintProblem]] = {}

    def add_problem(self, file: str, level: ErrorLevel, message: str) -> None:
        self.problems.setdefault(file, []).append(LintProblem(file, level, message))

    def problem_size(self) -> int:
        return sum(len(items) for items in self.problems.values())

    def has_error(self) -> bool:
        return any(problem.level is ErrorLevel.ERROR for problem in self)

    def __iter__(self) -> Iterator[LintProblem]:
        for items in self.problems.values():
            yield from items

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {"file": problem.file, "level": problem.level.value, "message": problem.message}
            for problem in self
        ]
        return pd.DataFrame(rows, columns=["file", "level", "message"])
