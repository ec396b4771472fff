"""Structured JSON logging for filter evaluation.

Writes JSON-lines to disk so operators can see which transforms failed
or were clamped after the fact. Each log entry is a single JSON object
on one line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

_logger = logging.getLogger("squiggly")


def configure_logging(
    log_dir: str | Path, level: int = logging.DEBUG
) -> None:
    """Set up squiggly logging to write JSON-lines to a file.

    Args:
        log_dir: Directory to write ``squiggly.log`` into.
        level: Logging level (default: DEBUG).
    """
    log_path = Path(log_dir) / "squiggly.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(str(log_path))
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    _logger.addHandler(handler)
    _logger.setLevel(level)


def _log(event: dict[str, Any], level: int = logging.INFO) -> None:
    _logger.log(level, json.dumps(event, default=str))


def log_function_failed(function_name: str, error: str) -> None:
    _log(
        {"event": "function_failed", "function": function_name, "error": error},
        logging.WARNING,
    )


def log_size_clamped(requested: int, allowed: int) -> None:
    _log({"event": "size_clamped", "requested": requested, "allowed": allowed})


def log_filter_loaded(source: str, node_count: int) -> None:
    _log({"event": "filter_loaded", "source": source, "node_count": node_count})


def log_policy_activated(environment: str, memory_budget: int) -> None:
    _log({
        "event": "policy_activated",
        "environment": environment,
        "memory_budget": memory_budget,
    })
