from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


def local_name(iri: str) -> str:
    """Last segment of an IRI, after its final ``#`` or ``/``."""
    stripped = iri.rstrip("/#")
    cut = max(stripped.rfind("#"), stripped.rfind("/"))
    return stripped[cut + 1:] or iri


def _environment() -> Environment:
    template_dir = Path(__file__).parent / "templates"
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    env.filters["local_name"] = local_name
    return env


def render_html_report(
    output_path: Path,
    *,
    context: dict[str, Any],
) -> None:
    template = _environment().get_template("report.html.j2")
    predicates = sorted(
        context.get("predicates", []),
        key=lambda row: (-row.get("mismatch_count", 0), row.get("predicate", "")),
    )
    output_path.write_text(
        template.render(**{**context, "predicates": predicates}),
        encoding="utf-8",
    )
