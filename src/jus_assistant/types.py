from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RunStatus(str, Enum):
    """Terminal state of a run as reported by the hosted service."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    INCOMPLETE = "incomplete"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


@dataclass(slots=True)
class ToolCallRequest:
    id: str
    name: str
    arguments: str


@dataclass(slots=True)
class ToolOutput:
    tool_call_id: str
    output: str

    def as_payload(self) -> dict[str, str]:
        return {"tool_call_id": self.tool_call_id, "output": self.output}


@dataclass(slots=True)
class RunOutcome:
    thread_id: str
    status: RunStatus = RunStatus.IN_PROGRESS
    run_id: Optional[str] = None
    tool_rounds: int = 0
    error: Optional[str] = None
