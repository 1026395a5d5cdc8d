"""Async subprocess utilities.

Provides non-blocking subprocess execution for use in async contexts.

Example:
    >>> from tfplan_commenter.utils.async_subprocess import run_command
    >>> stdout, stderr, code = await run_command("terraform", "version", cwd="/infra")
    >>> if code == 0:
    ...     print(stdout)
"""

import asyncio
from collections.abc import Mapping
from pathlib import Path


async def run_command(
    *args: str,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
    capture_output: bool = True,
) -> tuple[str, str, int]:
    """Run a command asynchronously without shell interpolation.

    The command runs to completion; there is no timeout. A non-zero exit
    code is returned, not raised.

    Args:
        *args: Command and arguments as separate strings.
        cwd: Working directory for command execution. If None, uses the
            current working directory of the parent process.
        env: Complete environment for the child. If None, the parent's
            environment is inherited.
        capture_output: If True (default), capture stdout and stderr as
            strings. If False, output goes to the parent's stdout/stderr
            and the returned strings are empty.

    Returns:
        Tuple of (stdout, stderr, return_code), decoded as UTF-8 with
        replacement for invalid bytes.

    Raises:
        FileNotFoundError: If the command executable is not found.
    """
    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        env=dict(env) if env is not None else None,
        stdout=asyncio.subprocess.PIPE if capture_output else None,
        stderr=asyncio.subprocess.PIPE if capture_output else None,
    )

    stdout_bytes, stderr_bytes = await process.communicate()

    stdout = (stdout_bytes or b"").decode("utf-8", errors="replace")
    stderr = (stderr_bytes or b"").decode("utf-8", errors="replace")

    return stdout, stderr, process.returncode or 0
