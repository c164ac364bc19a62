"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running git, plus the
dry-run aware executor used for every command that changes repository
state, and output formatting helpers.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys


def git(*args: str, check: bool = True, untranslated: bool = False) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "status", "--short").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).
        untranslated: Run under LC_ALL=C, for output parsed by its
               English labels.

    Returns:
        Stripped stdout from the git command.
    """
    env = {**os.environ, "LC_ALL": "C"} if untranslated else None
    result = subprocess.run(
        ["git", *args], capture_output=True, text=True, check=check, env=env
    )
    return result.stdout.strip()


def git_ok(*args: str) -> bool:
    """Run a read-only git query and report whether it exited with 0."""
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=False)
    return result.returncode == 0


def run(*args: str, check: bool = True) -> subprocess.CompletedProcess[bytes]:
    """Run an arbitrary shell command.

    Unlike git(), this doesn't capture output - it streams directly to
    the terminal so users can see merge and push progress.

    Args:
        *args: Command and arguments (e.g., "git", "push", "origin").
        check: If True (default), raise on non-zero exit.

    Returns:
        CompletedProcess with returncode for checking success.
    """
    return subprocess.run(args, check=check)


class Executor:
    """Runs git commands that change repository state.

    In dry-run mode the command is printed instead of executed and always
    reports success, so the rest of the pipeline behaves as if it ran.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def __call__(self, *args: str) -> bool:
        if self.dry_run:
            print(f"  dry-run: {shlex.join(['git', *args])}")
            return True
        return run("git", *args, check=False).returncode == 0


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the release in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the release.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
