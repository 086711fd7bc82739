#!/usr/bin/env python3
"""
CLI for computing a design-task estimate from a factor selection.

Usage examples:
    uv run python -m scripts.estimate_cli --factors '{"effort": 5, "sprints": 1, "designerCount": 2, "designerLevels": [1.5, 2], "breakpoints": 3, "fidelity": 3}'
    uv run python -m scripts.estimate_cli --factors-file vote.json --hints effort

Flags:
    --factors JSON        Factor selection as an inline JSON object
    --factors-file PATH   Read the factor selection from a JSON file
    --hints KIND          Also print "+N pts" hints for one factor kind (e.g. effort, designActivity)
    --log-level LEVEL     Logging level (INFO, DEBUG, etc.)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from app.services.estimation import (
    FactorKind,
    estimate_to_hours,
    estimate_to_tshirt_size,
    evaluate_estimate,
    normalize_factors,
    option_hints,
    validate_factors,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute a design-task estimate.")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--factors", type=str, help="Factor selection as an inline JSON object.")
    group.add_argument("--factors-file", type=str, help="Path to a JSON file holding the factor selection.")
    parser.add_argument(
        "--hints",
        type=str,
        default=None,
        help="Print marginal point hints for this factor kind.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (e.g. INFO, DEBUG).",
    )
    return parser.parse_args()


def configure_logging(level: str) -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    )


def main() -> int:
    args = parse_args()
    configure_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        raw = json.loads(args.factors) if args.factors else json.loads(Path(args.factors_file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("estimate.cli.bad_input: %s", e)
        return 2

    normalized = normalize_factors(raw)
    if not normalized.ok:
        logger.error("estimate.cli.unrecoverable: %s", normalized.reason)
        return 2

    result = evaluate_estimate(normalized.factors)
    output = {
        "shape": normalized.shape.value,
        "errors": validate_factors(normalized.factors),
        "complete": result is not None,
    }
    if result is not None:
        output.update(
            {
                "points": result.points,
                "raw_points": result.raw_points,
                "capped": result.capped,
                "hours": estimate_to_hours(result.points),
                "t_shirt": estimate_to_tshirt_size(result.points),
                "warnings": result.warnings,
            }
        )

    if args.hints:
        try:
            kind = FactorKind(args.hints)
        except ValueError:
            logger.error("Invalid factor kind: %s", args.hints)
            return 2
        output["hints"] = {str(k): v for k, v in option_hints(kind, normalized.factors).items()}

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
