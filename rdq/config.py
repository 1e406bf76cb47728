from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from rdq.checks.datatype import TYPE_GUESS_THRESHOLD
from rdq.checks.outliers import MAX_CLUSTERS, OUTLIER_SENSITIVITY


@dataclass(frozen=True)
class Settings:
    threshold: float = TYPE_GUESS_THRESHOLD
    outliers_enabled: bool = True
    sensitivity: float = OUTLIER_SENSITIVITY
    max_clusters: int = MAX_CLUSTERS


class ConfigError(ValueError):
    pass


def _section(payload: dict[str, Any], name: str) -> dict[str, Any]:
    section = payload.get(name, {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a mapping")
    return section


def _number(section: dict[str, Any], key: str, default: float, label: str) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{label} must be a number")
    return float(value)


def load_config(path: Path) -> Settings:
    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigError(f"Invalid file encoding (expected UTF-8): {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("Config file must be a mapping at root")

    datatype = _section(payload, "datatype")
    threshold = _number(datatype, "threshold", TYPE_GUESS_THRESHOLD, "datatype.threshold")
    if not 0.0 < threshold <= 1.0:
        raise ConfigError("datatype.threshold must be in (0, 1]")

    outliers = _section(payload, "outliers")
    sensitivity = _number(outliers, "sensitivity", OUTLIER_SENSITIVITY, "outliers.sensitivity")
    if sensitivity <= 0:
        raise ConfigError("outliers.sensitivity must be positive")
    max_clusters = outliers.get("max_clusters", MAX_CLUSTERS)
    if isinstance(max_clusters, bool) or not isinstance(max_clusters, int) or max_clusters < 1:
        raise ConfigError("outliers.max_clusters must be a positive integer")
    enabled = outliers.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigError("outliers.enabled must be true or false")

    return Settings(
        threshold=threshold,
        outliers_enabled=enabled,
        sensitivity=sensitivity,
        max_clusters=max_clusters,
    )
