from __future__ import annotations

import logging
import os
import subprocess
from typing import Mapping, Optional, Sequence

from core.interfaces import CommandRunner

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
EXIT_NOT_FOUND = 127


class SubprocessRunner(CommandRunner):
    """
    CommandRunner backed by subprocess.run.

    Output is not captured: cargo and the node write straight to the console,
    same as running them by hand. A missing executable is reported as exit
    code 127 instead of an exception.
    """

    def run(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> int:
        full_env = os.environ.copy()
        if env:
            full_env.update(env)
        logger.debug("exec: %s (cwd=%s)", " ".join(cmd), cwd or ".")
        try:
            result = subprocess.run(list(cmd), env=full_env, cwd=cwd, check=False)
        except FileNotFoundError as e:
            logger.error("Command not found: %s (%s)", cmd[0], e)
            return EXIT_NOT_FOUND
        return result.returncode
