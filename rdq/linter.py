from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import pandas as pd

from rdq.checks import DataTypeValidator, clustering_outlier_test
from rdq.checks.outliers import OutlierOracle, no_outliers
from rdq.config import Settings
from rdq.problems import LintProblemSet
from rdq.triples import Triple


SUMMARY_COLUMNS = [
	"predicate",
	"inferred_type",
	"literal_count",
	"natural_count",
	"integer_count",
	"float_count",
	"mismatch_count",
]


def run_lint(
	file_triples: Mapping[str, list[Triple]],
	*,
	settings: Settings,
	logger: logging.Logger,
	oracle: OutlierOracle = clustering_outlier_test,
	config_path: Path | None = None,
) -> dict[str, Any]:
	triple_count = sum(len(triples) for triples in file_triples.values())
	logger.info("Linting %s triples from %s files", triple_count, len(file_triples))

	validator = DataTypeValidator(
		threshold=settings.threshold,
		oracle=oracle if settings.outliers_enabled else no_outliers,
		sensitivity=settings.sensitivity,
		max_clusters=settings.max_clusters,
	)
	validator.prepare(file_triples)
	predicate_types = validator.predicate_types
	logger.info("Inferred data types for %s predicates", len(predicate_types))

	problem_set = LintProblemSet()
	for file in sorted(file_triples):
		before = problem_set.problem_size()
		validator.validate(problem_set, file, file_triples[file])
		logger.debug("%s: %s problems", file, problem_set.problem_size() - before)

	summary_rows: list[dict[str, Any]] = []
	for predicate in sorted(validator.profiles):
		profile = validator.profiles[predicate]
		inferred = predicate_types[predicate]
		summary_rows.append(
			{
				"predicate": predicate,
				"inferred_type": inferred.value,
				"literal_count": profile.total,
				"natural_count": profile.natural_count,
				"integer_count": profile.integer_count,
				"float_count": profile.float_count,
				"mismatch_count": profile.total - profile.count_for(inferred),
			}
		)

	summary_df = pd.DataFrame(summary_rows, columns=SUMMARY_COLUMNS)
	problems_df = problem_set.to_frame()

	metadata = {
		"file_count": len(file_triples),
		"triple_count": triple_count,
		"literal_count": int(summary_df["literal_count"].sum()) if not summary_df.empty else 0,
		"predicate_count": len(predicate_types),
		"problem_count": problem_set.problem_size(),
		"generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
		"config_path": str(config_path) if config_path else None,
	}
	logger.info("Found %s problems", metadata["problem_count"])

	return {
		"summary": summary_df,
		"problems": problems_df,
		"problem_set": problem_set,
		"predicate_types": predicate_types,
		"metadata": metadata,
	}


def build_report_context(results: dict[str, Any], plot_paths: list[str]) -> dict[str, Any]:
	problems_by_file: dict[str, list[dict[str, Any]]] = {}
	for problem in results["problem_set"]:
		problems_by_file.setdefault(problem.file, []).append(
			{"level": problem.level.value, "message": problem.message}
		)

	return {
		"metadata": results["metadata"],
		"predicates": results["summary"].to_dict(orient="records"),
		"problems_by_file": problems_by_file,
		"plots": plot_paths,
	}
