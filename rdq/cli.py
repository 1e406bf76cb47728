from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rdq import __version__
from rdq.config import ConfigError, Settings, load_config
from rdq.io import generate_plots, read_triples, write_problems_csv, write_summary_csv
from rdq.linter import build_report_context, run_lint
from rdq.reporting import render_html_report
from rdq.triples import TripleParseError


def _configure_logging(verbose: bool) -> logging.Logger:
	logger = logging.getLogger("rdq")
	logger.setLevel(logging.DEBUG if verbose else logging.INFO)
	handler = logging.StreamHandler()
	handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
	logger.handlers = [handler]
	return logger


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="rdq", description="RDF literal data quality linter")
	parser.add_argument("--version", action="version", version=__version__)
	sub = parser.add_subparsers(dest="command", required=True)

	lint = sub.add_parser("lint", help="Infer predicate data types and report deviating literals")
	lint.add_argument("--input", required=True, help="Triple file or directory (.nt, .csv, .tsv)")
	lint.add_argument("--out", required=True, help="Output directory")
	lint.add_argument("--config", help="Path to rdq.yml")
	lint.add_argument(
		"--format",
		default="html,csv",
		help="Output formats: html,csv",
	)
	lint.add_argument("--delimiter", default=",", help="CSV delimiter for triple tables")
	lint.add_argument("--encoding", default="utf-8", help="Input encoding")
	lint.add_argument("--verbose", action="store_true", help="Verbose logging")
	return parser


def run_cli(argv: list[str] | None = None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)

	logger = _configure_logging(args.verbose)
	input_path = Path(args.input)
	out_dir = Path(args.out)

	settings = Settings()
	config_path = None
	if args.config:
		config_path = Path(args.config)
		try:
			settings = load_config(config_path)
		except (FileNotFoundError, ConfigError) as exc:
			logger.error("Config error: %s", exc)
			return 2

	try:
		file_triples = read_triples(input_path, logger, args.delimiter, args.encoding)
	except (FileNotFoundError, TripleParseError):
		return 2
	except Exception as exc:
		logger.error("Failed to read input: %s", exc)
		return 2

	formats = {fmt.strip().lower() for fmt in args.format.split(",") if fmt.strip()}

	results = run_lint(
		file_triples,
		settings=settings,
		logger=logger,
		config_path=config_path,
	)

	out_dir.mkdir(parents=True, exist_ok=True)
	if "csv" in formats:
		write_summary_csv(results["summary"], out_dir)
		write_problems_csv(results["problems"], out_dir)

	if "html" in formats:
		plots = generate_plots(results, out_dir, logger)
		plot_paths = [
			str(Path("plots") / plots.inferred_types.name),
			str(Path("plots") / plots.problems_by_file.name),
		]
		context = build_report_context(results, plot_paths)
		render_html_report(out_dir / "report.html", context=context)

	return 0


def main() -> None:
	raise SystemExit(run_cli())
