import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

import config


class WorkflowState(str, enum.Enum):
    IDLE = "idle"
    TRANSCRIBING = "transcribing"
    GENERATING = "generating"
    READY = "ready"
    EDITING = "editing"
    SENDING = "sending"


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Summary:
    id: str
    content: str
    prompt: str
    original_transcript: str
    created_at: str
    title: str


@dataclass(frozen=True)
class StoredResponse:
    id: str
    summary: Summary
    timestamp: str


@dataclass
class Session:
    """Working fields of the active workflow."""

    transcript: str = ""
    prompt: str = config.DEFAULT_PROMPT
    summary: str = ""
    title: str = ""
    state: WorkflowState = WorkflowState.IDLE
    selected_id: str | None = None
    history: list[StoredResponse] = field(default_factory=list)


@dataclass(frozen=True)
class Notification:
    text: str
    kind: str  # "success", "error" or "info"
    expires_at: float
