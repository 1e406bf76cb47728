import logging
from pathlib import Path

import pytest

from rdq.config import ConfigError, Settings, load_config
from rdq.io import read_triple_table, read_triples
from rdq.triples import Triple, TripleParseError, parse_ntriples


LOGGER = logging.getLogger("rdq.tests")


def test_parse_ntriples_terms():
    lines = [
        "# comment",
        "",
        '<http://ex.org/a> <http://ex.org/age> "42" .',
        '<http://ex.org/a> <http://ex.org/name> "Ann \\"A\\" \\u00e9"@en-GB .',
        '_:b0 <http://ex.org/w> "1.5"^^<http://www.w3.org/2001/XMLSchema#decimal> . # trailing',
        "<http://ex.org/a> <http://ex.org/knows> _:b0 .",
        "<http://ex.org/a> <http://ex.org/seeAlso> <http://ex.org/b> .",
    ]
    triples = parse_ntriples(lines, "t.nt")
    assert len(triples) == 5
    assert triples[0] == Triple("http://ex.org/a", "http://ex.org/age", "42")
    assert triples[1].object == 'Ann "A" é'
    assert triples[1].language == "en-GB"
    assert triples[2].subject == "_:b0"
    assert triples[2].datatype == "http://www.w3.org/2001/XMLSchema#decimal"
    assert not triples[3].is_literal and triples[3].object == "_:b0"
    assert not triples[4].is_literal
    assert str(triples[0]) == 'http://ex.org/a - http://ex.org/age - "42"'


def test_parse_ntriples_reports_line():
    with pytest.raises(TripleParseError, match="bad.nt:2"):
        parse_ntriples(['<http://ex.org/a> <http://ex.org/p> "1" .', "not a triple"], "bad.nt")
    with pytest.raises(TripleParseError, match="bad.nt:1"):
        parse_ntriples(['<http://ex.org/a> <http://ex.org/p> "\\q" .'], "bad.nt")


def test_read_triple_table(tmp_path: Path):
    path = tmp_path / "t.csv"
    path.write_text(
        "subject,predicate,object,is_literal\n"
        "s,p,007,true\n"
        "s,q,o,false\n"
        "s,r,,\n",
        encoding="utf-8",
    )
    triples = read_triple_table(path)
    assert [t.object for t in triples] == ["007", "o", ""]
    assert [t.is_literal for t in triples] == [True, False, True]


def test_read_triple_table_missing_columns(tmp_path: Path):
    path = tmp_path / "t.csv"
    path.write_text("subject,object\ns,o\n", encoding="utf-8")
    with pytest.raises(TripleParseError, match="predicate"):
        read_triple_table(path)


def test_read_triples_directory(tmp_path: Path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "a.nt").write_text('<http://ex.org/a> <http://ex.org/p> "1" .\n', encoding="utf-8")
    (tmp_path / "sub" / "b.tsv").write_text("subject\tpredicate\tobject\ns\tp\t2\n", encoding="utf-8")
    (tmp_path / "ignored.txt").write_text("nothing", encoding="utf-8")

    file_triples = read_triples(tmp_path, LOGGER)
    assert list(file_triples) == ["a.nt", "sub/b.tsv"]
    assert file_triples["sub/b.tsv"][0].object == "2"


def test_read_triples_missing(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_triples(tmp_path / "missing.nt", LOGGER)


def test_load_config(tmp_path: Path):
    path = tmp_path / "rdq.yml"
    path.write_text("datatype:\n  threshold: 0.9\noutliers:\n  enabled: false\n", encoding="utf-8")
    settings = load_config(path)
    assert settings == Settings(threshold=0.9, outliers_enabled=False)

    path.write_text("", encoding="utf-8")
    assert load_config(path) == Settings()


def test_load_config_rejects_non_utf8(tmp_path: Path):
    path = tmp_path / "rdq.yml"
    path.write_bytes(b"datatype:\n  threshold: 0.9 # \xff\xfe\n")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize(
    "content",
    [
        "- a\n- b\n",
        "datatype: 3\n",
        "datatype:\n  threshold: 1.5\n",
        "outliers:\n  sensitivity: -1\n",
        "outliers:\n  max_clusters: 0\n",
        "outliers:\n  sensitivity: high\n",
        'outliers:\n  enabled: "false"\n',
        "datatype: [unclosed\n",
    ],
)
def test_load_config_errors(tmp_path: Path, content):
    path = tmp_path / "rdq.yml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)
