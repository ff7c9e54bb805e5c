from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .constants import CONFIG_FILENAME_DEFAULT, OUT_DIRNAME_DEFAULT
from .builder import build
from .io import BuildConfig, load_config
from .toposort import BuildError
from .validate import ValidateConfig


def normalize_dir_arg(value: str) -> Path:
    """Strip a leading `./` and trailing `/` from a directory argument."""
    s = value.strip()
    if s.startswith("./"):
        s = s[2:]
    if len(s) > 1:
        s = s.rstrip("/") or "/"
    return Path(s or ".")


def default_out_dir(in_dir: Path) -> Path:
    """Sibling `build` directory of the input root."""
    # Resolved so that `.` still yields its parent, not itself.
    return in_dir.resolve().parent / OUT_DIRNAME_DEFAULT


def _load_cli_config(config_arg: Optional[str]) -> BuildConfig:
    if config_arg:
        return load_config(Path(config_arg))
    default = Path(CONFIG_FILENAME_DEFAULT)
    if default.is_file():
        return load_config(default)
    return BuildConfig()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="incbuild",
        description=(
            "Expand custom markup elements into the documents they name and "
            "write the result to a mirrored output tree."
        ),
    )
    parser.add_argument(
        "--in",
        dest="in_dir",
        type=str,
        default=None,
        help="Input directory (required unless set as `in:` in the config file)",
    )
    parser.add_argument(
        "--out",
        dest="out_dir",
        type=str,
        default=None,
        help=f"Output directory (default: a `{OUT_DIRNAME_DEFAULT}` sibling of the input dir)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"YAML config file (default: ./{CONFIG_FILENAME_DEFAULT} if present)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=(
            "Fail the build on validation warnings (duplicate tags, dangling "
            "references, self-inclusion)."
        ),
    )
    parser.add_argument(
        "--graph",
        type=str,
        default=None,
        help="Also write the include graph as a Mermaid diagram to this Markdown file",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_cli_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.in_dir is not None:
        in_dir = normalize_dir_arg(args.in_dir)
    elif config.in_dir is not None:
        in_dir = config.in_dir
    else:
        parser.error("input directory not specified, use --in=dir_path")

    if not in_dir.is_dir():
        print(f"error: input directory {in_dir} does not exist", file=sys.stderr)
        raise SystemExit(2)

    if args.out_dir is not None:
        out_dir = normalize_dir_arg(args.out_dir)
    elif config.out_dir is not None:
        out_dir = config.out_dir
    else:
        out_dir = default_out_dir(in_dir)

    graph: Optional[Path] = Path(args.graph) if args.graph else config.graph
    cfg = ValidateConfig(
        ignore=config.ignore,
        escalate=config.escalate,
        strict=args.strict or config.strict,
    )

    print(f"input dir: {in_dir}")
    print(f"output dir: {out_dir}")

    try:
        result = build(in_dir, out_dir, cfg=cfg, graph_report=graph)
    except (BuildError, OSError, UnicodeDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(1)

    print(f"built {len(result.written)} file(s)")
