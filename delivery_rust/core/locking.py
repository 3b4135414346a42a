"""
Run locking for delivery-rust.

Provisioning assumes it owns the host's filesystem, package database and
environment for the duration of a run. This module provides a file-based
cross-process lock so two runs on the same host do not interleave.

Usage:
    from delivery_rust.core.locking import provisioning_lock

    with provisioning_lock(Path("/tmp/delivery_rust.lock"), timeout=60):
        engine.converge(resources)
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from filelock import FileLock, Timeout as LockTimeout

from delivery_rust.core.exceptions import ProvisioningLockTimeout

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 300


@contextmanager
def provisioning_lock(
    lock_path: Union[str, Path], timeout: float = DEFAULT_LOCK_TIMEOUT
):
    """
    Acquire the provisioning run lock.

    Args:
        lock_path: Lock file location; parent directories are created
        timeout: Maximum wait time in seconds (default: 300)

    Yields:
        None

    Raises:
        ProvisioningLockTimeout: If lock can't be acquired within timeout

    Example:
        >>> with provisioning_lock("/tmp/delivery_rust.lock", timeout=30):
        ...     converge_host()
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired provisioning lock: {lock_path}")
            yield
            logger.debug(f"Released provisioning lock: {lock_path}")
    except LockTimeout as e:
        logger.error(
            f"Could not acquire provisioning lock after {timeout}s. "
            "Another provisioning run may be in progress."
        )
        raise ProvisioningLockTimeout(
            f"Could not acquire provisioning lock {lock_path} after {timeout}s"
        ) from e
