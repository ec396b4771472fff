"""Command-line interface for squiggly.

Enables execution via ``python -m squiggly`` or a plain ``squiggly``
command after install.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from squiggly.errors import SquigglyError

# ── Human-readable help strings ──────────────────────────────────────────────

_TOP_DESCRIPTION = """\
Inspect field-selection filters without running them over real data.

A filter document (YAML or JSON) holds a tree of rules that decide, per
field and per depth, whether a field of a nested object is excluded,
included as a leaf, or included with its children, and which functions
transform its key and value.
"""

_TOP_EPILOG = """\
Quick examples:
  squiggly validate filter.yaml
  squiggly match filter.yaml address.city
  squiggly --config secure.yaml functions
"""

_VALIDATE_EPILOG = """\
Diagnostic output format (written to stderr on failure):
  [error]   path.field: message  -- the filter is malformed; must be fixed
  [warning] path.field: message  -- a rule that can never take effect

Exit codes:
  0 -- filter is valid
  1 -- one or more errors found
"""

_MATCH_EPILOG = """\
PATH is a dotted field path (e.g. address.city). Each segment is matched
at its depth (the first segment is depth 0) against the active rules, and
one JSON decision per segment is printed. Matching stops at the first
segment that is excluded or included as a leaf.

Examples:
  squiggly match filter.yaml id
  squiggly match filter.yaml 'orders.items.sku' --variables-json vars.json
"""


# ── Structured JSON schema (for `squiggly schema`) ───────────────────────────

def _cli_schema() -> dict[str, Any]:
    """Return a structured JSON description of the CLI."""
    return {
        "tool": "squiggly",
        "description": (
            "Validate field-selection filter documents and explain how a "
            "field path is matched."
        ),
        "global_options": {
            "--config": "YAML config: environment, memory_budget, "
                        "exclude_restricted_functions, log_dir",
            "--log-dir": "Directory for JSONL logs (squiggly.log)",
        },
        "commands": [
            {
                "name": "validate",
                "arguments": {"filter": "Path to the filter document"},
                "exit_codes": {"0": "valid", "1": "errors found"},
            },
            {
                "name": "match",
                "arguments": {
                    "filter": "Path to the filter document",
                    "path": "Dotted field path",
                    "--variables-json": "JSON object of variable bindings",
                },
                "output": [
                    {
                        "field": "<string>",
                        "depth": "<int>",
                        "outcome": "exclude | include_leaf | include_with_children",
                        "rule": "<string | null> name of the selected rule",
                    }
                ],
            },
            {
                "name": "functions",
                "arguments": {},
                "output": [
                    {
                        "name": "<string>",
                        "aliases": ["<string>"],
                        "environment": "normal | secure",
                        "min_args": "<int>",
                        "max_args": "<int | null>",
                        "available": "<bool> under the active policy",
                    }
                ],
            },
            {"name": "schema", "arguments": {}, "output": "this document"},
        ],
    }


# ── Argument parser ───────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="squiggly",
        description=_TOP_DESCRIPTION,
        epilog=_TOP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="YAML config file selecting the environment and logging.",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        metavar="DIR",
        help="Write JSONL logs to DIR/squiggly.log.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── validate ─────────────────────────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Statically validate a filter document",
        epilog=_VALIDATE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    val_p.add_argument("filter", type=Path, help="Path to the filter document")

    # ── match ────────────────────────────────────────────────────────────────
    match_p = sub.add_parser(
        "match",
        help="Explain how a dotted field path is matched",
        epilog=_MATCH_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    match_p.add_argument("filter", type=Path, help="Path to the filter document")
    match_p.add_argument("path", help="Dotted field path, e.g. address.city")
    match_p.add_argument(
        "--variables-json",
        type=Path,
        metavar="FILE",
        help="JSON file with a top-level object of variable bindings.",
    )

    # ── functions ────────────────────────────────────────────────────────────
    sub.add_parser("functions", help="List registered functions as JSON")

    # ── schema ───────────────────────────────────────────────────────────────
    sub.add_parser("schema", help="Print a machine-readable JSON schema of this CLI")

    return parser


# ── Command handlers ──────────────────────────────────────────────────────────

def _load_variables(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    with open(path) as f:
        loaded = json.load(f)
    if not isinstance(loaded, dict):
        print(
            f"Error: --variables-json must contain a JSON object, got {type(loaded).__name__}",
            file=sys.stderr,
        )
        sys.exit(1)
    return loaded


def _explain_path(
    nodes: tuple[Any, ...], segments: list[str], variables: dict[str, Any]
) -> list[dict[str, Any]]:
    from squiggly.matching import MatchOutcome, match_field

    decisions: list[dict[str, Any]] = []
    active = nodes
    for depth, segment in enumerate(segments):
        result = match_field(active, segment, depth, variables)
        decisions.append({
            "field": segment,
            "depth": depth,
            "outcome": result.outcome.value,
            "rule": result.node.get_name() if result.node else None,
        })
        if result.outcome != MatchOutcome.INCLUDE_WITH_CHILDREN:
            break
        active = result.children
    return decisions


def _cmd_validate(args: argparse.Namespace) -> int:
    from squiggly.loader import count_nodes
    from squiggly.validator import load_and_validate_filter

    nodes, result = load_and_validate_filter(args.filter)

    if result.ok:
        print(f"Filter is valid ({count_nodes(nodes)} nodes)")
        return 0

    for d in result.diagnostics:
        print(f"[{d.severity.value}] {d.path}.{d.field}: {d.message}", file=sys.stderr)

    error_count = len(result.errors)
    warning_count = len(result.warnings)
    print(f"\n{error_count} error(s), {warning_count} warning(s)", file=sys.stderr)
    return 1


def _cmd_match(args: argparse.Namespace) -> int:
    from squiggly.loader import load_filter

    nodes = load_filter(args.filter)
    variables = _load_variables(args.variables_json)
    decisions = _explain_path(nodes, args.path.split("."), variables)
    print(json.dumps(decisions, indent=2))
    return 0


def _cmd_functions() -> int:
    from squiggly.environment import get_active_policy
    from squiggly.functions import default_registry

    policy = get_active_policy()
    listing = [
        {
            "name": spec.name,
            "aliases": list(spec.aliases),
            "environment": spec.environment.value,
            "min_args": spec.min_args,
            "max_args": spec.max_args,
            "available": policy.allows(spec),
        }
        for spec in sorted(default_registry().specs(), key=lambda s: s.name)
    ]
    print(json.dumps(listing, indent=2))
    return 0


def _cmd_schema() -> int:
    print(json.dumps(_cli_schema(), indent=2))
    return 0


def _configure(args: argparse.Namespace) -> None:
    from squiggly.config import apply_config, load_config
    from squiggly.filter_logger import configure_logging

    if args.config:
        apply_config(load_config(args.config))
    if args.log_dir:
        configure_logging(args.log_dir)


# ── Entry point ───────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        _configure(args)
        if args.command == "validate":
            sys.exit(_cmd_validate(args))
        elif args.command == "match":
            sys.exit(_cmd_match(args))
        elif args.command == "functions":
            sys.exit(_cmd_functions())
        elif args.command == "schema":
            sys.exit(_cmd_schema())
    except SquigglyError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
