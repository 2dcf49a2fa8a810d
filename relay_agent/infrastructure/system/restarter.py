# relay_agent/infrastructure/system/restarter.py
import logging
import os
import sys

from relay_agent.core.logging_config import flush_logging

logger = logging.getLogger(__name__)


class SystemRestarter:
    """Cold-starts the agent by re-executing the interpreter.

    Nothing is preserved: GPIO outputs fall back to their boot defaults and
    every in-memory state machine starts over.
    """

    def __init__(self, execv=os.execv):
        self._execv = execv

    def restart(self, reason: str) -> None:
        logger.warning(f"Restarting device: {reason}")
        flush_logging()
        self._execv(sys.executable, sys.orig_argv)
