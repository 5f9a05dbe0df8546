"""
Tool installation via vendor install scripts.

A tool is installed only when its executable cannot be found. The vendor
script is downloaded with a bounded timeout, optionally checked against a
pinned SHA-256 digest, and run non-interactively into the user's binary
directory. Failures are reported in the returned InstallResult; they never
raise, so a failed tool does not stop the rest of the run.
"""

from __future__ import annotations

import hashlib
import os
import subprocess
import tempfile
import time
import urllib.request
from dataclasses import dataclass

from .common import vlog
from .environment import BootstrapEnvironment, PathResolver
from .logging_config import get_logger
from .tools import ToolSpec

USER_AGENT = "dotfiles-bootstrap/1.0"

DEFAULT_FETCH_TIMEOUT = 30
DEFAULT_INSTALL_TIMEOUT = 300


class NetworkError(Exception):
    """Raised when the install script cannot be downloaded."""


@dataclass(frozen=True)
class InstallResult:
    """
    Outcome of ensuring a tool is installed.

    Attributes:
        tool_name: Name of the tool
        success: Whether the tool is available afterwards
        already_installed: True if no installation was needed
        binary_path: Where the executable was found, if known
        checksum_verified: Whether the install script matched a pinned digest
        exit_code: Exit status of the install script (None if it did not run)
        duration_seconds: Time spent
        error_message: Human-readable error message if failed
        dry_run: True if installation was only planned
    """
    tool_name: str
    success: bool
    already_installed: bool = False
    binary_path: str | None = None
    checksum_verified: bool = False
    exit_code: int | None = None
    duration_seconds: float = 0.0
    error_message: str | None = None
    dry_run: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "tool_name": self.tool_name,
            "success": self.success,
            "already_installed": self.already_installed,
            "binary_path": self.binary_path,
            "checksum_verified": self.checksum_verified,
            "exit_code": self.exit_code,
            "duration_seconds": self.duration_seconds,
            "error_message": self.error_message,
            "dry_run": self.dry_run,
        }


def http_get(url: str, timeout: int = DEFAULT_FETCH_TIMEOUT) -> bytes:
    """
    Perform HTTP GET request.

    Args:
        url: URL to fetch
        timeout: Timeout in seconds

    Returns:
        Response body as bytes

    Raises:
        NetworkError: If request fails
    """
    try:
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return response.read()
    except Exception as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


def verify_checksum(data: bytes, expected_checksum: str, algorithm: str = "sha256") -> bool:
    """
    Check data against an expected hex digest.

    Args:
        data: Downloaded bytes
        expected_checksum: Expected hex digest (case-insensitive)
        algorithm: Hash algorithm name accepted by hashlib

    Returns:
        True if the digest matches
    """
    actual = hashlib.new(algorithm, data).hexdigest()
    return actual.lower() == expected_checksum.strip().lower()


def find_binary(tool: ToolSpec, env: BootstrapEnvironment, resolver: PathResolver) -> str | None:
    """Locate tool's executable on the search path or in the user's bin dir."""
    path = resolver.which(tool.binary)
    if path:
        return path
    candidate = env.bin_dir / tool.binary
    if candidate.is_file() and os.access(candidate, os.X_OK):
        return str(candidate)
    return None


def run_install_script(
    script: bytes,
    args: tuple[str, ...],
    timeout: int = DEFAULT_INSTALL_TIMEOUT,
    verbose: bool = False,
) -> subprocess.CompletedProcess:
    """
    Run a downloaded install script with sh.

    The script is written to a temporary file that is removed afterwards.

    Raises:
        subprocess.TimeoutExpired: If the script runs longer than timeout
        FileNotFoundError: If sh is not available
    """
    fd, script_path = tempfile.mkstemp(prefix="dotfiles-bootstrap-", suffix=".sh")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(script)
        command = ["sh", script_path, *args]
        vlog(f"Executing: {' '.join(command)}", verbose)
        return subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    finally:
        os.unlink(script_path)


def ensure_installed(
    tool: ToolSpec,
    env: BootstrapEnvironment,
    resolver: PathResolver | None = None,
    expected_sha256: str | None = None,
    fetch_timeout: int = DEFAULT_FETCH_TIMEOUT,
    install_timeout: int = DEFAULT_INSTALL_TIMEOUT,
    dry_run: bool = False,
    verbose: bool = False,
) -> InstallResult:
    """
    Make sure tool's executable exists, installing it if it does not.

    Args:
        tool: Tool definition
        env: Captured process environment
        resolver: Executable lookup (defaults to env.search_path)
        expected_sha256: Pinned digest of the install script, if any
        fetch_timeout: Download timeout in seconds
        install_timeout: Install script timeout in seconds
        dry_run: Report the planned installation without running it
        verbose: Enable verbose logging

    Returns:
        InstallResult describing the outcome
    """
    logger = get_logger()
    start_time = time.time()

    if resolver is None:
        resolver = PathResolver(env.search_path)

    existing = find_binary(tool, env, resolver)
    if existing:
        logger.info(f"{tool.name} already installed ({existing}).")
        return InstallResult(
            tool_name=tool.name,
            success=True,
            already_installed=True,
            binary_path=existing,
        )

    bin_dir = str(env.bin_dir)
    args = tool.install_command_args(bin_dir)

    if dry_run:
        logger.info(f"[dry-run] Would install {tool.name} from {tool.install_url} into {bin_dir}")
        return InstallResult(tool_name=tool.name, success=True, dry_run=True)

    logger.info(f"{tool.name} command not found. Attempting to install to {bin_dir}...")

    def failed(message: str, exit_code: int | None = None, verified: bool = False) -> InstallResult:
        return InstallResult(
            tool_name=tool.name,
            success=False,
            checksum_verified=verified,
            exit_code=exit_code,
            duration_seconds=time.time() - start_time,
            error_message=message,
        )

    try:
        env.bin_dir.mkdir(parents=True, exist_ok=True)
        script = http_get(tool.install_url, timeout=fetch_timeout)
    except (NetworkError, OSError) as e:
        return failed(str(e))

    verified = False
    if expected_sha256:
        if not verify_checksum(script, expected_sha256):
            return failed(f"Checksum mismatch for {tool.install_url}; install script not executed")
        verified = True
        vlog(f"Install script checksum verified for {tool.name}", verbose)
    else:
        logger.warning(
            f"Running {tool.install_url} without integrity verification "
            f"(set tool_settings.{tool.name}.installer_sha256 to pin it)."
        )

    try:
        result = run_install_script(script, args, timeout=install_timeout, verbose=verbose)
    except subprocess.TimeoutExpired:
        return failed(f"Install script timed out after {install_timeout}s", verified=verified)
    except OSError as e:
        return failed(f"Could not run install script: {e}", verified=verified)

    if result.stdout:
        vlog(result.stdout.rstrip(), verbose)

    if result.returncode != 0:
        message = f"Install script failed with exit code {result.returncode}"
        if result.stderr:
            message += f": {result.stderr.strip()[:200]}"
        return failed(message, exit_code=result.returncode, verified=verified)

    binary_path = find_binary(tool, env, resolver)
    logger.info(f"{tool.name} installed successfully to {bin_dir}.")
    return InstallResult(
        tool_name=tool.name,
        success=True,
        binary_path=binary_path,
        checksum_verified=verified,
        exit_code=0,
        duration_seconds=time.time() - start_time,
    )
