from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from rdq.triples import Triple


TYPE_GUESS_THRESHOLD = 0.95


class ElementaryType(Enum):
    NATURAL = "NATURAL"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    STRING = "STRING"

    def __str__(self) -> str:
        return self.value


# Narrowest first; each type accepts every value of the types ranked below it.
_RANK = {
    ElementaryType.NATURAL: 0,
    ElementaryType.INTEGER: 1,
    ElementaryType.FLOAT: 2,
    ElementaryType.STRING: 3,
}

_NATURAL_REGEX = re.compile(r"[0-9]+")
_INTEGER_REGEX = re.compile(r"[+-]?[0-9]+")
_FLOAT_REGEX = re.compile(r"[+-]?[0-9]+(?:\.[0-9]+)?")


def rank(data_type: ElementaryType) -> int:
    return _RANK[data_type]


def guess_type(value: str) -> ElementaryType:
    if _NATURAL_REGEX.fullmatch(value):
        return ElementaryType.NATURAL
    if _INTEGER_REGEX.fullmatch(value):
        return ElementaryType.INTEGER
    if _FLOAT_REGEX.fullmatch(value):
        return ElementaryType.FLOAT
    return ElementaryType.STRING


def is_compatible(actual: ElementaryType, declared: ElementaryType) -> bool:
    return rank(actual) <= rank(declared)


@dataclass
class TypeProfile:
    """Cumulative counts of guessed types for one predicate.

    ``integer_count`` includes naturals, ``float_count`` includes integers and
    ``string_count`` is the total number of literal values.
    """

    natural_count: int = 0
    integer_count: int = 0
    float_count: int = 0
    string_count: int = 0

    @property
    def total(self) -> int:
        return self.string_count

    def add(self, data_type: ElementaryType) -> None:
        self.string_count += 1
        if data_type is ElementaryType.STRING:
            return
        self.float_count += 1
        if data_type is ElementaryType.FLOAT:
            return
        self.integer_count += 1
        if data_type is ElementaryType.INTEGER:
            return
        self.natural_count += 1

    def count_for(self, data_type: ElementaryType) -> int:
        """Number of values compatible with ``data_type``."""
        return {
            ElementaryType.NATURAL: self.natural_count,
            ElementaryType.INTEGER: self.integer_count,
            ElementaryType.FLOAT: self.float_count,
            ElementaryType.STRING: self.string_count,
        }[data_type]

    def inferred_type(self, threshold: float = TYPE_GUESS_THRESHOLD) -> ElementaryType:
        for data_type in (ElementaryType.NATURAL, ElementaryType.INTEGER, ElementaryType.FLOAT):
            if self.count_for(data_type) / self.total >= threshold:
                return data_type
        return ElementaryType.STRING


def profile_predicates(triples: Iterable[Triple]) -> dict[str, TypeProfile]:
    profiles: dict[str, TypeProfile] = {}
    for triple in triples:
        if not triple.is_literal:
            continue
        profile = profiles.setdefault(triple.predicate, TypeProfile())
        profile.add(guess_type(triple.object))
    return profiles


def infer_predicate_types(
    file_triples: Mapping[str, Iterable[Triple]],
    threshold: float = TYPE_GUESS_THRESHOLD,
) -> Mapping[str, ElementaryType]:
    all_triples = (triple for triples in file_triples.values() for triple in triples)
    profiles = profile_predicates(all_triples)
    return types_from_profiles(profiles, threshold)


def types_from_profiles(
    profiles: Mapping[str, TypeProfile],
    threshold: float = TYPE_GUESS_THRESHOLD,
) -> Mapping[str, ElementaryType]:
    inferred = {
        predicate: profile.inferred_type(threshold)
        for predicate, profile in profiles.items()
        if profile.total
    }
    return MappingProxyType(inferred)
