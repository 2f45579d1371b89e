# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that flows
# between the agent client, the remote agent service and the tool server.
# They carry almost no behavior.
#
# TWO FAMILIES OF MODELS:
#   - Tool contract:  ToolParameter, ToolDescriptor  (what a tool looks like)
#   - Run traffic:    ToolCall, ToolOutput, RunState, RunSnapshot, ...
#                     (what moves through the polling loop)
#
# Nothing here imports a framework.  The remote service's own SDK types are
# translated into these models at the edge (agent/foundry.py).
# =============================================================================

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# -----------------------------------------------------------------------------
# ToolParameter / ToolDescriptor — the advertised tool contract
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolParameter:
    """One named argument of a tool."""

    type: str
    description: str


@dataclass(frozen=True)
class ToolDescriptor:
    """A named, schema-described capability the agent may invoke."""

    name: str
    description: str
    parameters: dict[str, ToolParameter] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    def json_schema(self) -> dict:
        """Render the parameters as the JSON schema object sent to the agent."""
        return {
            "type": "object",
            "properties": {
                name: {"type": p.type, "description": p.description}
                for name, p in self.parameters.items()
            },
            "required": list(self.required),
        }


# -----------------------------------------------------------------------------
# ToolCall / ToolOutput — one request from the agent and its answer
# -----------------------------------------------------------------------------
# A ToolCall is created by the remote service and consumed exactly once.
# Its ToolOutput must echo the same id, or the service rejects the batch.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolCall:
    id: str                            # Remote-assigned, opaque
    name: str
    arguments_json: str = "{}"
    type: str = "function"             # The service may send non-function calls


@dataclass(frozen=True)
class ToolOutput:
    call_id: str
    result: str


# -----------------------------------------------------------------------------
# InvocationResult — typed outcome of resolving one ToolCall
# -----------------------------------------------------------------------------
class InvocationStatus(str, Enum):
    OK = "ok"
    BAD_ARGUMENTS = "bad_arguments"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"
    BAD_RESPONSE = "bad_response"
    UNSUPPORTED_CALL = "unsupported_call"


@dataclass(frozen=True)
class InvocationResult:
    """What happened when a tool was called.

    `text` is always a string the agent can read: the tool's content on
    success, or an "Error calling <tool>: ..." sentence on failure.
    """

    status: InvocationStatus
    text: str
    status_code: Optional[int] = None  # HTTP status, when a response arrived

    @property
    def ok(self) -> bool:
        return self.status is InvocationStatus.OK

    def to_output(self, call_id: str) -> ToolOutput:
        return ToolOutput(call_id=call_id, result=self.text)


# -----------------------------------------------------------------------------
# RunState — the remote service's status for a run
# -----------------------------------------------------------------------------
# Not owned locally.  We only read it from polling and react to it.
# -----------------------------------------------------------------------------
class RunState(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value) -> "RunState":
        """Map a service status (enum or string) onto RunState.

        Anything unrecognized becomes UNKNOWN, which is terminal.
        """
        raw = getattr(value, "value", value)
        try:
            return cls(str(raw).lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self not in _ACTIVE_STATES


_ACTIVE_STATES = frozenset({
    RunState.QUEUED,
    RunState.IN_PROGRESS,
    RunState.REQUIRES_ACTION,
    RunState.CANCELLING,
})


@dataclass(frozen=True)
class RunSnapshot:
    """One observation of a run, as returned by get/create/submit."""

    run_id: str
    state: RunState
    tool_calls: tuple[ToolCall, ...] = ()   # Only populated in REQUIRES_ACTION
    last_error: Optional[str] = None


# -----------------------------------------------------------------------------
# AgentSession / ConversationMessage / RunOutcome
# -----------------------------------------------------------------------------
@dataclass
class AgentSession:
    """Remote resources owned by one orchestrator invocation.

    Filled in step by step as each resource is created.  Never reused.
    """

    agent_id: Optional[str] = None
    thread_id: Optional[str] = None
    run_id: Optional[str] = None


@dataclass(frozen=True)
class ConversationMessage:
    role: str
    text: str
    message_id: str = ""


@dataclass
class RunOutcome:
    session: AgentSession
    state: RunState
    error: Optional[str] = None
    messages: list[ConversationMessage] = field(default_factory=list)
    tool_calls_handled: int = 0
    polls: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.COMPLETED

    def to_dict(self) -> dict:
        return {
            "agent_id": self.session.agent_id,
            "thread_id": self.session.thread_id,
            "run_id": self.session.run_id,
            "state": self.state.value,
            "error": self.error,
            "tool_calls_handled": self.tool_calls_handled,
            "polls": self.polls,
            "messages": [{"role": m.role, "text": m.text} for m in self.messages],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
