"""
Plan command implementation.

Shows the resources the preparation recipe would converge, without
touching the host.
"""

import logging

from delivery_rust.cli.utils import format_resource, load_run_config
from delivery_rust.recipes.prep_builder import build_prep_plan

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the plan command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_run_config(args)
    resources = build_prep_plan(config)

    print(f"Platform family: {config.platform_family}")
    if not resources:
        print("No resources to converge")
        return 0

    print(f"Resources ({len(resources)}):")
    for index, resource in enumerate(resources, start=1):
        print(f"  {index}. {format_resource(resource)}")

    return 0
