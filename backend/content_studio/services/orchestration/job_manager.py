"""
Job Manager - Track video generation jobs with file-based persistence.

Each job is one JSON file under JOB_DATA_DIR, rewritten atomically on every
update so a crash mid-write never leaves a truncated record. A bounded
in-memory cache fronts the files; jobs that are still running are never
evicted from it.
"""

import json
import os
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

from content_studio.config import JOB_DATA_DIR
from content_studio.core import get_logger, parse_int_env
from content_studio.models.status import JobStatus

logger = get_logger(__name__, component="job_manager")

INTERRUPTED_MESSAGE = "Job was interrupted by server restart"

ACTIVE_STATUSES = frozenset(status for status in JobStatus if not status.is_terminal())


def _now() -> str:
    return datetime.now().isoformat()


@dataclass
class Job:
    id: str
    title: str = ""
    status: JobStatus = JobStatus.PENDING
    progress: float = 0.0
    message: str = "Job created"
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    credential_invalid: bool = False
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        """Build a job from a stored record; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values["status"] = JobStatus(data["status"])
        values["credential_invalid"] = bool(values.get("credential_invalid", False))
        return cls(**values)

    def touch(self) -> None:
        self.updated_at = _now()


class JobManager:
    """Manages generation jobs with disk-first persistence and bounded RAM cache."""

    def __init__(self, storage_dir: Optional[str] = None, cache_limit: Optional[int] = None):
        self._storage_dir = Path(storage_dir) if storage_dir else JOB_DATA_DIR
        self._storage_dir.mkdir(parents=True, exist_ok=True)
        if cache_limit is None:
            cache_limit = parse_int_env(os.getenv("JOB_MANAGER_CACHE_LIMIT"), 200, minimum=25)
        self._cache_limit = cache_limit

        self._lock = RLock()
        self._jobs: Dict[str, Job] = {}
        # ids of every job on disk, so lookups for unknown ids never touch the filesystem
        self._known_job_ids = {path.stem for path in self._storage_dir.glob("*.json")}

    # === Storage ===

    def _job_file(self, job_id: str) -> Path:
        return self._storage_dir / f"{job_id}.json"

    def _read(self, job_id: str) -> Optional[Job]:
        job_file = self._job_file(job_id)
        try:
            return Job.from_dict(json.loads(job_file.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError) as e:
            logger.error("Unreadable job record", extra={"job_file": str(job_file), "error": str(e)})
            return None

    def _write(self, job: Job) -> None:
        job_file = self._job_file(job.id)
        tmp_file = job_file.with_suffix(".json.tmp")
        try:
            tmp_file.write_text(json.dumps(job.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_file, job_file)
            self._known_job_ids.add(job.id)
        except OSError as e:
            logger.error("Error saving job", extra={"job_id": job.id, "error": str(e)})

    # === Cache ===

    def _remember(self, job: Job) -> None:
        self._jobs[job.id] = job
        overflow = len(self._jobs) - self._cache_limit
        if overflow <= 0:
            return
        finished = sorted((j for j in self._jobs.values() if not j.is_active), key=lambda j: j.updated_at)
        for stale in finished[:overflow]:
            del self._jobs[stale.id]

    def _persist(self, job: Job) -> None:
        self._write(job)
        self._remember(job)

    # === Public API ===

    def create_job(self, job_id: str, title: str = "") -> Job:
        with self._lock:
            job = Job(id=job_id, title=title)
            self._persist(job)
            return job

    def get_job(self, job_id: str) -> Optional[Job]:
        with self._lock:
            cached = self._jobs.get(job_id)
            if cached:
                return cached
            if job_id not in self._known_job_ids:
                return None

            job = self._read(job_id)
            if job is None:
                self._known_job_ids.discard(job_id)
                return None
            if job.is_active or len(self._jobs) < self._cache_limit:
                self._remember(job)
            return job

    def update_job(
        self,
        job_id: str,
        status: Optional[JobStatus] = None,
        progress: Optional[float] = None,
        message: Optional[str] = None,
        result: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        credential_invalid: Optional[bool] = None,
    ) -> Optional[Job]:
        """Apply the given fields; a finished job is returned unchanged."""
        changes = {
            "status": status,
            "progress": progress,
            "message": message,
            "result": result,
            "error": error,
            "credential_invalid": credential_invalid,
        }
        with self._lock:
            job = self.get_job(job_id)
            if job is None:
                return None
            if not job.is_active:
                logger.debug("Ignoring update to finished job", extra={"job_id": job_id, "status": job.status.value})
                return job

            for name, value in changes.items():
                if value is not None:
                    setattr(job, name, value)
            job.touch()
            self._persist(job)
            return job

    def delete_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Forget a job and remove its record; returns the record if there was one."""
        with self._lock:
            job = self.get_job(job_id)
            self._jobs.pop(job_id, None)
            self._known_job_ids.discard(job_id)
            self._job_file(job_id).unlink(missing_ok=True)
            return job.to_dict() if job else None

    def get_all_jobs(self) -> List[Job]:
        """All jobs, most recently created first."""
        with self._lock:
            jobs = [job for job in map(self.get_job, list(self._known_job_ids)) if job]
        return sorted(jobs, key=lambda job: job.created_at, reverse=True)

    def get_interrupted_jobs(self) -> List[Job]:
        """Jobs a previous process left in a non-terminal state."""
        with self._lock:
            return [job for job in self.get_all_jobs() if job.is_active]

    def mark_interrupted_jobs_failed(self) -> int:
        """Fail every interrupted job; returns how many were marked."""
        with self._lock:
            interrupted = self.get_interrupted_jobs()
            for job in interrupted:
                job.status = JobStatus.FAILED
                job.message = INTERRUPTED_MESSAGE
                job.error = INTERRUPTED_MESSAGE
                job.touch()
                self._persist(job)
        if interrupted:
            logger.warning("Marked interrupted jobs as failed", extra={"count": len(interrupted)})
        return len(interrupted)


_job_manager_instance: Optional[JobManager] = None


def get_job_manager() -> JobManager:
    """Get the shared JobManager instance (singleton pattern)."""
    global _job_manager_instance
    if _job_manager_instance is None:
        _job_manager_instance = JobManager()
    return _job_manager_instance
