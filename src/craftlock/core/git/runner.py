"""Thin wrapper around the ``git`` executable.

Every git invocation in craftlock goes through ``GitRunner``. Commands
are passed as argument lists, never through a shell, so URLs and refs
taken from manifests cannot smuggle in shell syntax. Process failures,
a missing ``git`` binary and timeouts all become
``SourceUnavailableError`` with the original error chained.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from craftlock.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)

GIT_EXECUTABLE: str = "git"

# Seconds allowed for a single git command (clone of a large repo included).
DEFAULT_GIT_TIMEOUT: float = 300.0


class GitRunner:
    """Runs git commands for the resolver.

    Args:
        executable: Name or path of the git binary.
        timeout: Per-command timeout in seconds.
    """

    def __init__(
        self,
        executable: str = GIT_EXECUTABLE,
        timeout: float = DEFAULT_GIT_TIMEOUT,
    ) -> None:
        self.executable = executable
        self.timeout = timeout

    def run(self, args: list[str], cwd: Path | None = None) -> str:
        """Run ``git <args>`` and return its stripped stdout.

        Raises:
            SourceUnavailableError: If git is missing, exits non-zero, or
                exceeds the timeout.
        """
        cmd = [self.executable, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as exc:
            raise SourceUnavailableError(
                f"git executable not found: {self.executable}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise SourceUnavailableError(
                f"git {args[0]} timed out after {self.timeout:g}s"
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise SourceUnavailableError(
                f"git {args[0]} failed (exit {exc.returncode}): {stderr}"
            ) from exc
        return result.stdout.strip()

    def clone(self, url: str, dest: Path, ref: str | None = None) -> None:
        """Shallow-clone ``url`` into ``dest``, at ``ref`` when given."""
        args = ["clone", "--depth", "1"]
        if ref:
            args.extend(["--branch", ref])
        args.extend(["--", url, str(dest)])
        self.run(args)

    def unshallow(self, repo: Path) -> None:
        self.run(["fetch", "--unshallow"], cwd=repo)

    def checkout(self, repo: Path, commit: str) -> None:
        self.run(["checkout", "--quiet", commit, "--"], cwd=repo)

    def head_commit(self, repo: Path) -> str:
        """Return the full hash of HEAD in ``repo``."""
        return self.run(["rev-parse", "HEAD"], cwd=repo)
