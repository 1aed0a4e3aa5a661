"""
Collect host and git metadata once at startup (RunContext).
"""
import logging
import os
import platform
import socket
import subprocess
from typing import Optional

from core.types import GitInfo, RunContext

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def _git(*args: str, cwd: Optional[str] = None) -> str:
    """Output of `git <args>`, or "Unknown" if git is missing or the command fails."""
    try:
        r = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("git %s failed: %s", " ".join(args), e)
        return UNKNOWN
    out = (r.stdout or "").strip()
    return out or UNKNOWN


def collect_git_info(cwd: Optional[str] = None) -> GitInfo:
    return GitInfo(
        remote_url=_git("remote", "get-url", "origin", cwd=cwd),
        branch=_git("branch", "--show-current", cwd=cwd),
        commit=_git("rev-parse", "HEAD", cwd=cwd),
    )


def collect_context(cwd: Optional[str] = None) -> RunContext:
    workdir = os.path.abspath(cwd or os.getcwd())
    hostname = socket.gethostname()
    return RunContext(
        hostname=hostname,
        short_hostname=hostname.split(".")[0] or hostname,
        os_name=platform.system(),
        cwd=workdir,
        git=collect_git_info(workdir),
    )
