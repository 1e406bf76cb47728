from __future__ import annotations

from typing import Iterable, Mapping

from rdq.checks.datatype import (
    TYPE_GUESS_THRESHOLD,
    ElementaryType,
    TypeProfile,
    guess_type,
    is_compatible,
    profile_predicates,
    types_from_profiles,
)
from rdq.checks.outliers import (
    MAX_CLUSTERS,
    OUTLIER_SENSITIVITY,
    OutlierOracle,
    clustering_outlier_test,
    compute_outlier_table,
)
from rdq.problems import ErrorLevel, LintProblemSet
from rdq.triples import Triple


def check_triples(
    problems: LintProblemSet,
    file: str,
    triples: Iterable[Triple],
    predicate_types: Mapping[str, ElementaryType],
    *,
    oracle: OutlierOracle = clustering_outlier_test,
    sensitivity: float = OUTLIER_SENSITIVITY,
    max_clusters: int = MAX_CLUSTERS,
) -> None:
    triples = list(triples)
    ng_values = compute_outlier_table(
        predicate_types, triples, oracle, sensitivity=sensitivity, max_clusters=max_clusters
    )

    for triple in triples:
        if not triple.is_literal:
            continue
        value = triple.object

        expected = predicate_types.get(triple.predicate)
        if expected is not None:
            actual = guess_type(value)
            if not is_compatible(actual, expected):
                problems.add_problem(
                    file,
                    ErrorLevel.INFO,
                    f"DataType unmatched: expected {expected.value}, but {actual.value} (Triple: {triple})",
                )

        outliers = ng_values.get(triple.predicate)
        if not outliers:
            continue
        try:
            number = float(value)
        except ValueError:
            continue
        if any(number == outlier for outlier in outliers):
            problems.add_problem(
                file,
                ErrorLevel.INFO,
                f"Outlier:{number!r} (Triple: {triple})",
            )


class DataTypeValidator:
    """Profiles the whole dataset once, then checks one file at a time."""

    def __init__(
        self,
        threshold: float = TYPE_GUESS_THRESHOLD,
        oracle: OutlierOracle = clustering_outlier_test,
        sensitivity: float = OUTLIER_SENSITIVITY,
        max_clusters: int = MAX_CLUSTERS,
    ) -> None:
        self.threshold = threshold
        self.oracle = oracle
        self.sensitivity = sensitivity
        self.max_clusters = max_clusters
        self.profiles: dict[str, TypeProfile] = {}
        self.predicate_types: Mapping[str, ElementaryType] | None = None

    def prepare(self, file_triples: Mapping[str, Iterable[Triple]]) -> None:
        all_triples = (triple for triples in file_triples.values() for triple in triples)
        self.profiles = profile_predicates(all_triples)
        self.predicate_types = types_from_profiles(self.profiles, self.threshold)

    def validate(self, problems: LintProblemSet, file: str, triples: Iterable[Triple]) -> None:
        if self.predicate_types is None:
            raise RuntimeError("prepare() must be called before validate()")
        check_triples(
            problems,
            file,
            triples,
            self.predicate_types,
            oracle=self.oracle,
            sensitivity=self.sensitivity,
            max_clusters=self.max_clusters,
        )
