from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from rdq.triples import Triple, TripleParseError, parse_ntriples


TRIPLE_SUFFIXES = (".nt", ".csv", ".tsv")

_TRUE_STRINGS = {"true", "yes", "1"}
_FALSE_STRINGS = {"false", "no", "0"}
_TABLE_COLUMNS = ("subject", "predicate", "object")


@dataclass(frozen=True)
class PlotPaths:
    inferred_types: Path
    problems_by_file: Path


def ensure_output_dirs(out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    plots_dir = out_dir / "plots"
    plots_dir.mkdir(parents=True, exist_ok=True)
    return plots_dir


def _parse_literal_flag(value: str, path: Path) -> bool:
    lower = value.strip().lower()
    if lower == "" or lower in _TRUE_STRINGS:
        return True
    if lower in _FALSE_STRINGS:
        return False
    raise TripleParseError(f"{path}: invalid is_literal value: {value!r}")


def read_triple_table(path: Path, delimiter: str = ",", encoding: str = "utf-8") -> list[Triple]:
    df = pd.read_csv(path, delimiter=delimiter, encoding=encoding, dtype=str, keep_default_na=False)
    missing = [col for col in _TABLE_COLUMNS if col not in df.columns]
    if missing:
        raise TripleParseError(f"{path}: missing columns: {', '.join(missing)}")
    flags = df["is_literal"] if "is_literal" in df.columns else pd.Series([""] * len(df), index=df.index)
    return [
        Triple(subject=s, predicate=p, object=o, is_literal=_parse_literal_flag(flag, path))
        for s, p, o, flag in zip(df["subject"], df["predicate"], df["object"], flags)
    ]


def _read_file(path: Path, delimiter: str, encoding: str) -> list[Triple]:
    suffix = path.suffix.lower()
    if suffix == ".nt":
        with path.open("r", encoding=encoding) as handle:
            return parse_ntriples(handle, str(path))
    if suffix == ".tsv":
        return read_triple_table(path, "\t", encoding)
    return read_triple_table(path, delimiter, encoding)


def read_triples(
    input_path: Path,
    logger: logging.Logger,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> dict[str, list[Triple]]:
    if not input_path.exists():
        logger.error("Input not found: %s", input_path)
        raise FileNotFoundError(input_path)

    if input_path.is_dir():
        files = sorted(
            path
            for path in input_path.rglob("*")
            if path.is_file() and path.suffix.lower() in TRIPLE_SUFFIXES
        )
        base = input_path
    else:
        files = [input_path]
        base = input_path.parent

    file_triples: dict[str, list[Triple]] = {}
    for path in files:
        logger.info("Reading triples: %s", path)
        try:
            triples = _read_file(path, delimiter, encoding)
        except TripleParseError as exc:
            logger.error("Failed to parse triples: %s", exc)
            raise
        file_triples[path.relative_to(base).as_posix()] = triples
        logger.debug("%s: %s triples", path, len(triples))
    return file_triples


def write_summary_csv(summary: pd.DataFrame, out_dir: Path) -> Path:
    path = out_dir / "summary.csv"
    summary.to_csv(path, index=False)
    return path


def write_problems_csv(problems: pd.DataFrame, out_dir: Path) -> Path:
    path = out_dir / "problems.csv"
    problems.to_csv(path, index=False)
    return path


def _placeholder(plt: Any, path: Path, text: str) -> None:
    plt.figure(figsize=(6, 3))
    plt.text(0.5, 0.5, text, ha="center", va="center")
    plt.axis("off")
    plt.tight_layout()
    plt.savefig(path)
    plt.close()


def generate_plots(results: dict[str, Any], out_dir: Path, logger: logging.Logger) -> PlotPaths:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    plots_dir = ensure_output_dirs(out_dir)

    summary: pd.DataFrame = results["summary"]
    types_path = plots_dir / "inferred_types.png"
    if summary.empty:
        _placeholder(plt, types_path, "No literal predicates")
    else:
        plt.figure(figsize=(8, 4))
        summary["inferred_type"].value_counts().plot(kind="bar")
        plt.title("Predicates by inferred type")
        plt.ylabel("Predicates")
        plt.tight_layout()
        plt.savefig(types_path)
        plt.close()

    problems: pd.DataFrame = results["problems"]
    problems_path = plots_dir / "problems_by_file.png"
    if problems.empty:
        _placeholder(plt, problems_path, "No problems")
    else:
        plt.figure(figsize=(10, 5))
        problems["file"].value_counts().plot(kind="bar")
        plt.title("Problems by file")
        plt.ylabel("Count")
        plt.tight_layout()
        plt.savefig(problems_path)
        plt.close()

    logger.info("Plots generated under %s", plots_dir)
    return PlotPaths(inferred_types=types_path, problems_by_file=problems_path)
