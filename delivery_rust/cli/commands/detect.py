"""
Detect command implementation.

Prints the platform family of the running host.
"""

import logging

from delivery_rust.core.platform import (
    UnsupportedPlatform,
    detect_platform_family,
    parse_platform_family,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the detect command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    logger.debug(f"Arguments: {args}")

    family = parse_platform_family(detect_platform_family())
    print(family)

    if isinstance(family, UnsupportedPlatform):
        print("  (no build host preparation steps for this platform family)")

    return 0
