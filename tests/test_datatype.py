import itertools
import random

import pytest

from rdq.checks.datatype import (
    ElementaryType,
    TypeProfile,
    guess_type,
    infer_predicate_types,
    is_compatible,
    profile_predicates,
    rank,
)
from rdq.triples import Triple


EX = "http://example.org/"


def _literals(predicate, values):
    return [Triple(f"{EX}s{i}", predicate, value) for i, value in enumerate(values)]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0", ElementaryType.NATURAL),
        ("007", ElementaryType.NATURAL),
        ("+5", ElementaryType.INTEGER),
        ("-5", ElementaryType.INTEGER),
        ("3.14", ElementaryType.FLOAT),
        ("-5.5", ElementaryType.FLOAT),
        ("5.", ElementaryType.STRING),
        (".5", ElementaryType.STRING),
        ("1e3", ElementaryType.STRING),
        ("", ElementaryType.STRING),
        (" 5", ElementaryType.STRING),
        ("5\n", ElementaryType.STRING),
        ("٥", ElementaryType.STRING),
        ("hello", ElementaryType.STRING),
    ],
)
def test_guess_type(value, expected):
    assert guess_type(value) is expected


def test_is_compatible_follows_rank():
    for actual, declared in itertools.product(ElementaryType, repeat=2):
        assert is_compatible(actual, declared) == (rank(actual) <= rank(declared))
    assert is_compatible(ElementaryType.FLOAT, ElementaryType.STRING)
    assert not is_compatible(ElementaryType.INTEGER, ElementaryType.NATURAL)
    assert [rank(t) for t in (
        ElementaryType.NATURAL,
        ElementaryType.INTEGER,
        ElementaryType.FLOAT,
        ElementaryType.STRING,
    )] == [0, 1, 2, 3]


def test_profile_counts_are_cumulative():
    profile = TypeProfile()
    for value in ["1", "-1", "1.5", "x", "2"]:
        profile.add(guess_type(value))
    assert profile.natural_count == 2
    assert profile.integer_count == 3
    assert profile.float_count == 4
    assert profile.string_count == profile.total == 5


def test_threshold_boundary_natural():
    values = ["1"] * 95 + ["abc"] * 5
    types = infer_predicate_types({"a.nt": _literals(f"{EX}p", values)})
    assert types[f"{EX}p"] is ElementaryType.NATURAL


def test_threshold_below_boundary_falls_through():
    values = ["1"] * 94 + ["-1"] + ["abc"] * 5
    types = infer_predicate_types({"a.nt": _literals(f"{EX}p", values)})
    assert types[f"{EX}p"] is ElementaryType.INTEGER

    values = ["1"] * 94 + ["abc"] * 6
    types = infer_predicate_types({"a.nt": _literals(f"{EX}p", values)})
    assert types[f"{EX}p"] is ElementaryType.STRING


def test_mostly_numbers_with_text_is_string():
    types = infer_predicate_types({"a.nt": _literals(f"{EX}note", ["5", "6", "hello", "7", "8"])})
    assert types[f"{EX}note"] is ElementaryType.STRING


def test_profile_spans_all_files():
    file_triples = {
        "a.nt": _literals(f"{EX}age", ["10", "20", "30"]),
        "b.nt": _literals(f"{EX}age", ["31", "29", "1000"]),
    }
    types = infer_predicate_types(file_triples)
    assert dict(types) == {f"{EX}age": ElementaryType.NATURAL}


def test_non_literal_only_predicate_is_absent():
    triples = [
        Triple(f"{EX}s1", f"{EX}knows", f"{EX}s2", is_literal=False),
        Triple(f"{EX}s1", f"{EX}age", "42"),
    ]
    profiles = profile_predicates(triples)
    assert set(profiles) == {f"{EX}age"}
    types = infer_predicate_types({"a.nt": triples})
    assert f"{EX}knows" not in types


def test_inference_independent_of_order():
    values = ["1"] * 40 + ["-2", "3.5", "x"] + ["7"] * 10
    triples = _literals(f"{EX}p", values)
    expected = dict(infer_predicate_types({"a.nt": triples}))
    shuffled = list(triples)
    random.Random(7).shuffle(shuffled)
    assert dict(infer_predicate_types({"a.nt": shuffled})) == expected


def test_predicate_types_are_read_only():
    types = infer_predicate_types({"a.nt": _literals(f"{EX}p", ["1"])})
    with pytest.raises(TypeError):
        types[f"{EX}p"] = ElementaryType.STRING
