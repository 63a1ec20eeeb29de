"""Durable delay queue for validation jobs.

One YAML file per job under <queue_dir>/pending/. A job is claimed by moving
its file to running/ and removed when done, so a job that was running when
the process died is moved back to pending/ by recover() and fires again
(at-least-once delivery).
"""

import logging
import uuid
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from prmoji.models import ValidationJob

PENDING = "pending"
RUNNING = "running"

LOG = logging.getLogger("prmoji.queue")


class DelayQueue:
    """File-backed queue of ValidationJob with a not-before time per job."""

    def __init__(self, queue_dir: Path | str) -> None:
        self._base = Path(queue_dir)

    @property
    def pending_dir(self) -> Path:
        return self._base / PENDING

    @property
    def running_dir(self) -> Path:
        return self._base / RUNNING

    def _write(self, path: Path, job: ValidationJob) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        raw = yaml.dump(
            job.model_dump(mode="json"),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
        # write then rename so a reader never sees a half-written job
        tmp = path.with_suffix(".tmp")
        tmp.write_text(raw, encoding="utf-8")
        tmp.replace(path)

    def _read(self, path: Path) -> ValidationJob | None:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not data:
                return None
            return ValidationJob.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            LOG.warning("Skip invalid queue file %s: %s", path, e)
            return None

    def enqueue(
        self,
        pr_url: str,
        delay: timedelta,
        attempt: int = 0,
        now: datetime | None = None,
    ) -> ValidationJob:
        """Schedule a job for pr_url that is not runnable before now + delay."""
        now = now or datetime.now(UTC)
        job = ValidationJob(
            job_id=uuid.uuid4().hex,
            pr_url=pr_url,
            not_before=now + max(delay, timedelta(0)),
            enqueued_at=now,
            attempt=attempt,
        )
        self._write(self.pending_dir / f"{job.job_id}.yaml", job)
        LOG.debug("Enqueued validation of %s at %s (attempt %s)", pr_url, job.not_before.isoformat(), attempt)
        return job

    def list_pending(self) -> List[ValidationJob]:
        """All pending jobs ordered by not_before."""
        if not self.pending_dir.is_dir():
            return []
        jobs = [j for j in (self._read(p) for p in sorted(self.pending_dir.glob("*.yaml"))) if j]
        jobs.sort(key=lambda j: j.not_before)
        return jobs

    def due(self, now: datetime | None = None) -> List[ValidationJob]:
        """Pending jobs whose not_before has passed."""
        now = now or datetime.now(UTC)
        return [j for j in self.list_pending() if j.not_before <= now]

    def claim(self, job: ValidationJob) -> bool:
        """Move a pending job to running/. False if another consumer took it."""
        src = self.pending_dir / f"{job.job_id}.yaml"
        self.running_dir.mkdir(parents=True, exist_ok=True)
        try:
            src.rename(self.running_dir / src.name)
        except FileNotFoundError:
            return False
        return True

    def complete(self, job: ValidationJob) -> None:
        """Forget a claimed job."""
        path = self.running_dir / f"{job.job_id}.yaml"
        path.unlink(missing_ok=True)

    def release(self, job: ValidationJob) -> None:
        """Return a claimed job to pending/ unchanged (it is due again at once)."""
        name = f"{job.job_id}.yaml"
        self.pending_dir.mkdir(parents=True, exist_ok=True)
        (self.running_dir / name).rename(self.pending_dir / name)

    def cancel(self, pr_url: str) -> int:
        """Drop pending jobs for pr_url. Returns how many were removed."""
        removed = 0
        for job in self.list_pending():
            if job.pr_url != pr_url:
                continue
            (self.pending_dir / f"{job.job_id}.yaml").unlink(missing_ok=True)
            removed += 1
        if removed:
            LOG.info("Cancelled %s pending validation job(s) for %s", removed, pr_url)
        return removed

    def recover(self) -> int:
        """Move jobs left in running/ (process died mid-job) back to pending/."""
        if not self.running_dir.is_dir():
            return 0
        moved = 0
        self.pending_dir.mkdir(parents=True, exist_ok=True)
        for path in self.running_dir.glob("*.yaml"):
            path.rename(self.pending_dir / path.name)
            moved += 1
        if moved:
            LOG.info("Recovered %s interrupted validation job(s)", moved)
        return moved
