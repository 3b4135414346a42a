"""
External command execution for the convergence engine.

All process invocations go through ``CommandRunner`` so failures surface as
``CommandFailedError`` with the command, exit code and output attached.
"""

import logging
import subprocess
from typing import Mapping, Optional, Sequence

from delivery_rust.core.exceptions import CommandFailedError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run commands synchronously and capture their output."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize command runner.

        Args:
            timeout: Per-command timeout in seconds (None waits forever)
        """
        self.timeout = timeout

    def run(
        self,
        command: Sequence[str],
        check: bool = True,
        env: Optional[Mapping[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        """
        Run a command.

        Args:
            command: argv list
            check: Raise when the command exits non-zero
            env: Environment for the child process (default: inherit)

        Returns:
            CompletedProcess with text stdout/stderr

        Raises:
            CommandFailedError: If the executable is missing, times out, or
                (with check=True) exits non-zero
        """
        command = list(command)
        logger.debug(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                env=dict(env) if env is not None else None,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CommandFailedError(command, 127, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise CommandFailedError(
                command, -1, f"timed out after {self.timeout}s"
            ) from e

        if check and result.returncode != 0:
            raise CommandFailedError(
                command, result.returncode, result.stderr or result.stdout or ""
            )

        return result
