"""
File system utilities for delivery-rust.

This module provides the safe file operations the file resource relies on:
- Atomic writes (temp file + rename)
- Permission mode inspection and enforcement
"""

import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

IS_WINDOWS = os.name == "nt"


def atomic_write(
    file_path: Union[str, Path],
    content: Union[str, bytes],
    encoding: str = "utf-8",
    mode: Optional[int] = None,
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
        mode: Permission bits applied to the file before it is moved into place

    Example:
        >>> atomic_write('/etc/ld.so.conf.d/rust.conf', '/usr/local/lib\\n', mode=0o644)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Create temp file in same directory (ensures same filesystem)
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            # newline="" keeps "\n" as-is on Windows
            with open(temp_fd, "w", encoding=encoding, newline="") as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        if mode is not None:
            set_file_mode(temp_path, mode)

        # Atomic rename (replaces destination if it exists)
        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def get_file_mode(file_path: Union[str, Path]) -> Optional[int]:
    """
    Get the permission bits of a file.

    Args:
        file_path: File to inspect

    Returns:
        Permission bits (e.g., 0o644), or None if the file does not exist
    """
    try:
        return stat.S_IMODE(Path(file_path).stat().st_mode)
    except FileNotFoundError:
        return None


def set_file_mode(file_path: Union[str, Path], mode: int) -> None:
    """
    Set the permission bits of a file.

    Windows only honours the read-only bit, so the call is a no-op there.

    Args:
        file_path: File to change
        mode: Permission bits (e.g., 0o644)
    """
    if IS_WINDOWS:
        return
    os.chmod(file_path, mode)


def mode_matches(file_path: Union[str, Path], mode: Optional[int]) -> bool:
    """
    Check whether a file already has the requested permission bits.

    Args:
        file_path: File to inspect
        mode: Expected permission bits, or None when mode is unmanaged

    Returns:
        True if no mode is requested, on Windows, or when the bits match
    """
    if mode is None or IS_WINDOWS:
        return True
    return get_file_mode(file_path) == mode


def read_text_if_exists(
    file_path: Union[str, Path], encoding: str = "utf-8"
) -> Optional[str]:
    """
    Read a text file, returning None when it does not exist.

    Args:
        file_path: File to read
        encoding: Text encoding

    Returns:
        File content, or None
    """
    try:
        with open(file_path, "r", encoding=encoding, newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None
