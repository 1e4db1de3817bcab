"""Git index helpers used by the ``--staged-only`` options."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Set

from docsync.exceptions import GitError

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30  # seconds


def _run_git(args: List[str], cwd: Optional[Path] = None) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
            check=True,
        )
    except FileNotFoundError as exc:
        raise GitError("git executable not found") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"git {' '.join(args)} timed out") from exc
    except subprocess.CalledProcessError as exc:
        raise GitError(exc.stderr.strip() or f"git {' '.join(args)} failed") from exc
    return result.stdout


def staged_files(cwd: Optional[Path] = None) -> Set[Path]:
    """Return the absolute paths of the files staged in the Git index.

    Deleted files are not reported since there is nothing left to sync.
    """
    root = Path(_run_git(["rev-parse", "--show-toplevel"], cwd).strip())
    output = _run_git(["-c", "core.quotepath=off", "diff", "--cached", "--name-only", "--diff-filter=d"], cwd)
    files = {(root / line).resolve() for line in output.splitlines() if line.strip()}
    logger.debug("Git: %d staged files", len(files))
    return files
