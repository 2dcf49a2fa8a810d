import logging
from pathlib import Path

from relay_agent.core.link_supervisor import Restarter

logger = logging.getLogger(__name__)


class UpdateLifecycleHooks:
    """Reports update progress and restarts once an artifact is staged."""

    def __init__(self, restarter: Restarter):
        self._restarter = restarter
        self._last_percent = -1

    def on_start(self, version: str) -> None:
        self._last_percent = -1
        logger.info(f"Start updating to {version}")

    def on_progress(self, received: int, total: int) -> None:
        if total <= 0:
            logger.debug(f"Update progress: {received} bytes")
            return
        percent = min(100, received * 100 // total)
        if percent // 10 != self._last_percent // 10:
            logger.info(f"Update progress: {percent}%")
        self._last_percent = percent

    def on_end(self, version: str, path: Path) -> None:
        logger.info(f"Update {version} staged at {path}")
        self._restarter.restart(f"update {version} staged")

    def on_error(self, error: Exception) -> None:
        logger.error(f"Update error: {error}")
