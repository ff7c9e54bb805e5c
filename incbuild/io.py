from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .constants import CONFIG_KEYS


@dataclass(frozen=True)
class BuildConfig:
    """Settings read from an `incbuild.yaml` file. Unset values are None."""

    in_dir: Optional[Path] = None
    out_dir: Optional[Path] = None
    strict: bool = False
    graph: Optional[Path] = None
    ignore: frozenset[str] = field(default_factory=frozenset)
    escalate: frozenset[str] = field(default_factory=frozenset)


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    raw = read_text(path)

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML {path}: {e}") from e

    # An empty file is an empty config.
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    return data


def _opt_path(data: dict[str, Any], key: str, base: Path, src: Path) -> Optional[Path]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{src}: `{key}` must be a non-empty string")
    p = Path(value)
    # Relative paths in a config file are relative to that file.
    return p if p.is_absolute() else base / p


def _code_set(data: dict[str, Any], key: str, src: Path) -> frozenset[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"{src}: `{key}` must be a list of issue codes")
    return frozenset(value)


def load_config(path: Path) -> BuildConfig:
    """Load and check a YAML build config."""
    if not path.exists():
        raise FileNotFoundError(str(path))

    data = _load_yaml_mapping(path)

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ValueError(
            f"{path}: unknown config key(s) {', '.join(unknown)} "
            f"(expected: {', '.join(CONFIG_KEYS)})"
        )

    strict = data.get("strict", False)
    if not isinstance(strict, bool):
        raise TypeError(f"{path}: `strict` must be true or false")

    base = path.parent
    return BuildConfig(
        in_dir=_opt_path(data, "in", base, path),
        out_dir=_opt_path(data, "out", base, path),
        strict=strict,
        graph=_opt_path(data, "graph", base, path),
        ignore=_code_set(data, "ignore", path),
        escalate=_code_set(data, "escalate", path),
    )
