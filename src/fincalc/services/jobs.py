"""Background execution of large Monte Carlo runs.

A queued run is tracked as a :class:`SimulationJob`. The job's target returns
a ``Result``: a ``Success`` marks the job ``succeeded`` and stores the
presented value, a ``Failure`` marks it ``failed`` with the failure's message
and payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock, Thread
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from ..logging_config import get_logger
from .results import Result

__all__ = [
    "SimulationJob",
    "enqueue",
    "get_job",
    "set_async_execution",
    "clear_jobs",
]

logger = get_logger(__name__)

MAX_TRACKED_JOBS = 100


@dataclass
class SimulationJob:
    """Status and outcome of one queued simulation."""

    id: str
    name: str
    created_at: datetime
    status: str = "queued"
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None
    result: Any = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def record(self, outcome: Result[Any], present: Callable[[Any], Any]) -> None:
        if outcome.ok:
            self.status = "succeeded"
            self.result = present(outcome.value)
        else:
            self.status = "failed"
            self.error = outcome.message
            self.result = outcome.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        stamps = {
            key: value.isoformat() if value else None
            for key, value in (
                ("created_at", self.created_at),
                ("started_at", self.started_at),
                ("finished_at", self.finished_at),
            )
        }
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            **stamps,
            "error": self.error,
            "result": self.result,
            "metadata": self.metadata,
        }


_JOBS: Dict[str, SimulationJob] = {}
_LOCK = Lock()
_RUN_ASYNC = True


def set_async_execution(enabled: bool) -> None:
    """Run jobs on daemon threads (True) or inline in the caller (False)."""

    global _RUN_ASYNC
    _RUN_ASYNC = enabled


def clear_jobs() -> None:
    with _LOCK:
        _JOBS.clear()


def _track(job: SimulationJob) -> None:
    with _LOCK:
        _JOBS[job.id] = job
        overflow = len(_JOBS) - MAX_TRACKED_JOBS
        if overflow > 0:
            oldest = sorted(_JOBS.values(), key=lambda tracked: tracked.created_at)[:overflow]
            for tracked in oldest:
                del _JOBS[tracked.id]


def _execute(
    job: SimulationJob,
    target: Callable[..., Result[Any]],
    present: Callable[[Any], Any],
    params: Dict[str, Any],
) -> None:
    job.status = "running"
    job.started_at = datetime.now(timezone.utc)
    try:
        job.record(target(**params), present)
    except Exception as exc:  # reported through the job status endpoint
        logger.exception("Simulation job crashed", extra={"job_id": job.id, "job_name": job.name})
        job.status = "failed"
        job.error = str(exc)
    finally:
        job.finished_at = datetime.now(timezone.utc)
    if job.status == "failed" and job.result is not None:
        logger.warning(
            "Simulation job failed", extra={"job_id": job.id, "reason": job.result["error"]}
        )


def enqueue(
    name: str,
    target: Callable[..., Result[Any]],
    *,
    present: Callable[[Any], Any] = lambda value: value,
    metadata: Optional[Dict[str, Any]] = None,
    **params: Any,
) -> SimulationJob:
    """Queue ``target(**params)`` and return its tracked job.

    ``present`` turns a successful value into what the status endpoint shows.
    """

    job = SimulationJob(
        id=uuid4().hex,
        name=name,
        created_at=datetime.now(timezone.utc),
        metadata=metadata or {},
    )
    _track(job)

    if _RUN_ASYNC:
        Thread(
            target=_execute,
            args=(job, target, present, params),
            name=f"FinCalcJob-{job.id}",
            daemon=True,
        ).start()
    else:
        _execute(job, target, present, params)
    return job


def get_job(job_id: str) -> Optional[Dict[str, Any]]:
    """Status payload for ``job_id``, or ``None`` if it is unknown or pruned."""

    with _LOCK:
        job = _JOBS.get(job_id)
    return job.to_dict() if job else None
