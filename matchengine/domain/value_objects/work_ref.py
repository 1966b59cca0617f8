"""WorkRef value object — points at exactly one unit of work."""

from dataclasses import dataclass
from typing import Any, Mapping

from matchengine.domain.value_objects.enums import WorkKind

_COLUMNS = {
    WorkKind.REQUEST: "request_id",
    WorkKind.JOB: "job_id",
}


@dataclass(frozen=True)
class WorkRef:
    kind: WorkKind
    id: str

    @classmethod
    def request(cls, request_id: str) -> "WorkRef":
        return cls(kind=WorkKind.REQUEST, id=request_id)

    @classmethod
    def job(cls, job_id: str) -> "WorkRef":
        return cls(kind=WorkKind.JOB, id=job_id)

    @property
    def column(self) -> str:
        """Name of the assignment field that carries this reference."""
        return _COLUMNS[self.kind]

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "WorkRef":
        """Read the reference back from an assignment record.

        Raises:
            ValueError: if the record references both or neither kind of work.
        """
        request_id = record.get("request_id")
        job_id = record.get("job_id")
        if request_id and job_id:
            raise ValueError(f"Assignment {record.get('id')} references both a request and a job")
        if request_id:
            return cls.request(request_id)
        if job_id:
            return cls.job(job_id)
        raise ValueError(f"Assignment {record.get('id')} has no work reference")

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"
