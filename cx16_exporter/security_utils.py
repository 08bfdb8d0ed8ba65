#!/usr/bin/env python3
"""
Path checks for the files the exporter reads and writes
"""

from __future__ import annotations

import os
import pathlib

# Input and output files never live under these
PROTECTED_PREFIXES = ("/etc/", "/usr/", "/bin/", "/sbin/", "/lib/", "/sys/", "/proc/", "/dev/")

URI_SCHEMES = ("file:", "http:", "https:", "ftp:", "sftp:")


class SecurityError(Exception):
    """Raised when a file path is rejected"""


def _check_path_format(file_path_str: str) -> None:
    """Reject URIs and parent-directory traversal"""
    if file_path_str.startswith(URI_SCHEMES):
        raise SecurityError(f"URI schemes not allowed: {file_path_str}")

    if ".." in pathlib.PurePath(file_path_str).parts:
        raise SecurityError("Path traversal attempt detected")


def _check_protected(path: pathlib.Path) -> None:
    path_str = path.as_posix()
    if path_str.startswith(PROTECTED_PREFIXES):
        raise SecurityError(f"Access to system directories not allowed: {path}")


def validate_file_path(file_path: str | os.PathLike, max_size: int = 10 * 1024 * 1024) -> str:
    """
    Validate an input file path

    Args:
        file_path: Path to validate
        max_size: Maximum allowed file size in bytes (default 10MB)

    Returns:
        Absolute path if valid

    Raises:
        SecurityError: If the path is unsafe, missing, not a file or too large
    """
    _check_path_format(str(file_path))
    path = pathlib.Path(file_path).resolve()
    _check_protected(path)

    if not path.exists():
        raise SecurityError(f"File does not exist: {path}")
    if not path.is_file():
        raise SecurityError(f"Path is not a file: {path}")

    file_size = path.stat().st_size
    if file_size > max_size:
        raise SecurityError(f"File too large: {file_size} bytes (max {max_size})")

    return str(path)


def validate_output_path(file_path: str | os.PathLike) -> str:
    """
    Validate an output file path

    Args:
        file_path: Path to validate

    Returns:
        Absolute path if valid

    Raises:
        SecurityError: If the path is unsafe or its directory is missing
    """
    _check_path_format(str(file_path))
    path = pathlib.Path(file_path).resolve()
    _check_protected(path)

    if not path.parent.exists():
        raise SecurityError(f"Parent directory does not exist: {path.parent}")
    if path.exists() and not path.is_file():
        raise SecurityError(f"Path is not a file: {path}")

    return str(path)
