# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Entry point for the ability-manager runner.

Usage:
    python -m ability_manager.runner < input.json > output.json
    python -m ability_manager.runner input.json > output.json

The document holds an optional vocabulary, the rules in priority order and
the queries to answer.  One decision per query is written to stdout.

Exit codes:
    0: Every query was evaluated
    1: Failure (error details in JSON output)
"""

from __future__ import annotations

import sys
from pathlib import Path

import structlog

from .executor import Executor
from .schema import RunnerInput, RunnerOutput


def _read_document(argv: list[str]) -> str:
    if argv:
        return Path(argv[0]).read_text(encoding="utf-8")
    return sys.stdin.read()


def main(argv: list[str] | None = None) -> int:
    """Evaluate one rules-and-queries document.

    Args:
        argv: Optional single path to read instead of stdin

    Returns:
        Process exit code
    """
    # stdout carries the JSON document; diagnostics go to stderr
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))

    if argv is None:
        argv = sys.argv[1:]

    try:
        document = RunnerInput.model_validate_json(_read_document(argv))
        output = Executor().execute(document)
    except Exception as e:
        output = RunnerOutput(success=False, error=str(e), error_type=type(e).__name__)

    print(output.model_dump_json())
    return 0 if output.success else 1


if __name__ == "__main__":
    sys.exit(main())
