"""Deferred validation scheduler: fire due jobs, apply the handler's verdict.

The handler decides when to stop by returning a JobResult: Terminate ends
the loop for that PR, Reenqueue(after) schedules a fresh job `after` from
the moment the job fired. The scheduler, not the handler, does the requeue.
"""

import logging
import threading
import time
from datetime import UTC, datetime, timedelta
from typing import Callable

from pydantic import BaseModel, Field

from prmoji.models import ValidationJob
from prmoji.queue import DelayQueue

LOG = logging.getLogger("prmoji.scheduler")


class JobResult(BaseModel):
    """What to do with a job after its handler ran."""

    model_config = {"frozen": True}


class Terminate(JobResult):
    """Stop: no further job for this PR."""


class Reenqueue(JobResult):
    """Run again `after` from the moment the job fired."""

    after: timedelta = Field(description="Delay before the next check")


JobHandler = Callable[[ValidationJob], JobResult]


class DeferredValidationScheduler:
    """Fires due ValidationJobs from a DelayQueue through one registered handler."""

    def __init__(
        self,
        queue: DelayQueue,
        delay: timedelta = timedelta(minutes=1),
        poll_interval: float = 5.0,
    ) -> None:
        self.queue = queue
        self.delay = delay
        self.poll_interval = poll_interval
        self._handler: JobHandler | None = None
        self._stop = threading.Event()

    def on_fire(self, handler: JobHandler) -> None:
        """Register the handler called for every due job (replaces any previous one)."""
        self._handler = handler

    def schedule(self, pr_url: str, now: datetime | None = None) -> ValidationJob:
        """Enqueue the first validation of pr_url after the configured delay."""
        job = self.queue.enqueue(pr_url, self.delay, now=now)
        LOG.info("Scheduled release checklist validation for %s", pr_url)
        return job

    def cancel(self, pr_url: str) -> int:
        """Drop pending validations for pr_url."""
        return self.queue.cancel(pr_url)

    def _fire(self, job: ValidationJob) -> JobResult:
        if self._handler is None:
            LOG.warning("No handler registered; dropping job for %s", job.pr_url)
            return Terminate()
        try:
            return self._handler(job)
        except Exception as e:
            LOG.exception("Validation of %s failed, retrying later: %s", job.pr_url, e)
            return Reenqueue(after=self.delay)

    def run_once(self, now: datetime | None = None) -> int:
        """Fire every job due at `now`, one at a time. Returns how many fired."""
        fired = 0
        for job in self.queue.due(now):
            if not self.queue.claim(job):
                continue
            fired += 1
            result = self._fire(job)
            try:
                self._settle(job, result, now)
            except OSError as e:
                # left in running/, recover() picks it up on the next start
                LOG.exception("Could not settle validation job %s for %s: %s", job.job_id, job.pr_url, e)
        return fired

    def _settle(self, job: ValidationJob, result: JobResult, now: datetime | None) -> None:
        """Apply the handler's verdict to a claimed job."""
        if isinstance(result, Reenqueue):
            # fresh delay measured from when the job ran, never from not_before
            fired_at = max(now or datetime.now(UTC), datetime.now(UTC))
            try:
                self.queue.enqueue(job.pr_url, result.after, attempt=job.attempt + 1, now=fired_at)
            except OSError as e:
                LOG.error("Could not requeue validation of %s, retrying next tick: %s", job.pr_url, e)
                self.queue.release(job)
                return
            LOG.info("Requeued validation of %s in %s", job.pr_url, result.after)
        else:
            LOG.info("Validation of %s finished", job.pr_url)
        self.queue.complete(job)

    def run_forever(self) -> None:
        """Loop: every poll_interval, fire due jobs, until stop() is called."""
        recovered = self.queue.recover()
        LOG.info(
            "Validation scheduler started | delay=%s | poll=%ss | recovered=%s",
            self.delay,
            self.poll_interval,
            recovered,
        )
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception as e:
                LOG.exception("Scheduler tick error: %s", e)
            time.sleep(self.poll_interval)

    def start(self) -> threading.Thread:
        """Start run_forever in a daemon thread."""
        self._stop.clear()
        thread = threading.Thread(target=self.run_forever, name="prmoji-scheduler", daemon=True)
        thread.start()
        return thread

    def stop(self) -> None:
        self._stop.set()
