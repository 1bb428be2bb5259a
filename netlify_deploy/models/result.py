"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .site import NetlifySite


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OperationStatus(Enum):
    """Outcome of a deploy for one target"""
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"


class StepStatus(Enum):
    """Pipeline step lifecycle state"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ToolLocation:
    """Result of looking up an executable on the search path"""

    found: bool
    path: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def not_found(cls, name: Optional[str] = None) -> 'ToolLocation':
        return cls(found=False, path=None, name=name)

    @property
    def command(self) -> Optional[str]:
        """Path to invoke, or the bare name so the OS resolves it"""
        return self.path if self.found else self.name


@dataclass
class ExecutionResult:
    """Captured result of an external process"""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def is_success(self) -> bool:
        return self.exit_code == 0


@dataclass
class StepResult:
    """Final state of one pipeline step"""

    name: str
    status: StepStatus = StepStatus.PENDING
    message: str = ""
    error: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def duration(self) -> Optional[float]:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "error": self.error,
            "duration": self.duration,
        }


@dataclass
class DeployOutcome:
    """Result of deploying one target"""

    target_name: str
    status: OperationStatus
    message: str = ""
    deploy_url: Optional[str] = None
    logs_url: Optional[str] = None
    site: Optional[NetlifySite] = None
    execution: Optional[ExecutionResult] = None
    error: Optional[str] = None
    finished_at: datetime = field(default_factory=_utcnow)

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def site_id(self) -> Optional[str]:
        return self.site.site_id if self.site else None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "target": self.target_name,
            "status": self.status.value,
            "message": self.message,
        }

        if self.deploy_url:
            data["deploy_url"] = self.deploy_url
        if self.logs_url:
            data["logs_url"] = self.logs_url
        if self.site:
            data["site"] = self.site.to_dict()
        if self.error:
            data["error"] = self.error
        if self.execution:
            data["exit_code"] = self.execution.exit_code

        return data


@dataclass
class PipelineResult:
    """Result of a full pipeline run"""

    steps: Dict[str, StepResult] = field(default_factory=dict)
    outcomes: List[DeployOutcome] = field(default_factory=list)
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    @property
    def success(self) -> bool:
        steps_ok = all(s.status == StepStatus.SUCCEEDED for s in self.steps.values())
        outcomes_ok = all(o.is_success for o in self.outcomes)
        return steps_ok and outcomes_ok

    @property
    def cancelled(self) -> bool:
        return (
            any(s.status == StepStatus.CANCELLED for s in self.steps.values())
            or any(o.status == OperationStatus.CANCELLED for o in self.outcomes)
        )

    @property
    def failed_outcomes(self) -> List[DeployOutcome]:
        return [o for o in self.outcomes if o.status == OperationStatus.FAILED]

    @property
    def duration(self) -> Optional[float]:
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def get_outcome(self, target_name: str) -> Optional[DeployOutcome]:
        for outcome in self.outcomes:
            if outcome.target_name == target_name:
                return outcome
        return None

    def complete(self) -> None:
        self.end_time = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "steps": [s.to_dict() for s in self.steps.values()],
            "outcomes": [o.to_dict() for o in self.outcomes],
            "duration": self.duration,
        }
