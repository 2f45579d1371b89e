# =============================================================================
# agent/run_loop.py  —  AgentRunLoop: poll the run, service tool calls
# =============================================================================
#
# THE LOOP:
#
#      ┌──────────── sleep(poll_interval) ◀───────────────┐
#      ▼                                                  │
#   get_run ──▶ queued / in_progress / cancelling ────────┤
#      │                                                  │
#      ├─────▶ requires_action ──▶ invoke each call ──▶ submit batch
#      │                           (sequentially)
#      ▼
#   completed / failed / cancelled / expired / ...  ──▶  return
#
# RULES:
#   - Every pending call gets exactly one ToolOutput with its id, and the
#     whole batch is submitted in one request.
#   - Once a terminal state is observed (from a poll or from a submission),
#     the run is never polled again.
#   - Errors from the service (network blips while polling included)
#     propagate.  There is no retry layer.
# =============================================================================

import logging
import time
from typing import Callable, Iterable

from agent.invoker import ToolInvoker
from agent.service import AgentService
from core.models import AgentSession, RunSnapshot, RunState, ToolCall, ToolOutput

logger = logging.getLogger(__name__)


class AgentRunLoop:

    def __init__(self, service: AgentService, invoker: ToolInvoker,
                 poll_interval: float = 0.5,
                 sleep: Callable[[float], None] = time.sleep):
        self._service = service
        self._invoker = invoker
        self.poll_interval = poll_interval
        self._sleep = sleep
        self.polls = 0
        self.tool_calls_handled = 0

    def resolve_batch(self, calls: Iterable[ToolCall]) -> list[ToolOutput]:
        """One ToolOutput per call, same order, invoked one at a time."""
        outputs = []
        for call in calls:
            logger.info("Tool call: %s -> %s", call.id, call.name or call.type)
            outputs.append(self._invoker.invoke(call))
        return outputs

    def run(self, session: AgentSession, initial: RunSnapshot) -> RunSnapshot:
        """Drive the run from `initial` until it reaches a terminal state."""
        self.polls = 0
        self.tool_calls_handled = 0
        run = initial

        while not run.state.is_terminal:
            self._sleep(self.poll_interval)
            run = self._service.get_run(session.thread_id, run.run_id)
            self.polls += 1
            logger.info("Run status: %s", run.state.value)

            if run.state is RunState.REQUIRES_ACTION:
                if not run.tool_calls:
                    logger.warning("Run %s requires action but lists no tool calls", run.run_id)
                logger.info("Processing %d tool call(s)...", len(run.tool_calls))
                outputs = self.resolve_batch(run.tool_calls)
                self.tool_calls_handled += len(outputs)
                run = self._service.submit_tool_outputs(session.thread_id, run.run_id, outputs)

        return run
