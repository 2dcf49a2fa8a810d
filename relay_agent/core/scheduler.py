import logging
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass
class ScheduledJob:
    name: str
    interval_ms: int
    callback: Callable[[], object]
    last_run_ms: int


class IntervalScheduler:
    """Fixed-interval jobs serviced from the tick loop.

    A job runs at most once per ``service`` call, so a loop that stalls does
    not trigger a burst of catch-up runs.
    """

    def __init__(self, clock: Callable[[], int]):
        self._clock = clock
        self.jobs: List[ScheduledJob] = []

    def every(self, name: str, interval_ms: int, callback: Callable[[], object]) -> ScheduledJob:
        if interval_ms < 1:
            raise ValueError("interval_ms must be >= 1")
        job = ScheduledJob(name=name, interval_ms=interval_ms, callback=callback, last_run_ms=self._clock())
        self.jobs.append(job)
        logger.info("Scheduled job %s every %s ms", name, interval_ms)
        return job

    def service(self) -> None:
        now = self._clock()
        for job in self.jobs:
            if now - job.last_run_ms >= job.interval_ms:
                job.last_run_ms = now
                job.callback()
