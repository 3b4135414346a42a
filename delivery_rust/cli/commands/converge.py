"""
Converge command implementation.

Builds the preparation plan for the host and converges it.
"""

import logging
from pathlib import Path

from delivery_rust.cli.utils import load_run_config
from delivery_rust.converge.engine import ConvergenceEngine
from delivery_rust.recipes.prep_builder import build_prep_plan

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the converge command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_run_config(args)
    resources = build_prep_plan(config)

    engine = ConvergenceEngine(config, why_run=args.dry_run)
    report = engine.converge(resources)

    summary = report.summary()
    mode = "Why-run" if args.dry_run else "Converge"
    print(
        f"{mode} complete: {summary['updated']} updated, "
        f"{summary['up_to_date']} up to date, "
        f"{summary['would_update']} would update, "
        f"{summary['skipped']} skipped"
    )

    if args.report:
        report.save(Path(args.report))
        logger.info(f"Wrote run report to {args.report}")

    return 0
