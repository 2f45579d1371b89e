# =============================================================================
# agent/orchestrator.py  —  One conversation, end to end
# =============================================================================
#
# WHAT THIS FILE DOES:
#   1. Creates the agent (model + instructions + every tool in the catalog)
#   2. Creates a thread and posts the user message
#   3. Starts a run and hands it to AgentRunLoop
#   4. Reports success or the service's failure message
#   5. Fetches the conversation
#   6. Deletes the agent — always, exactly once, even when steps 2-5 raise
#
# A cleanup failure is logged and swallowed so it never hides the real
# outcome (or the real exception) of the conversation.
# =============================================================================

import logging
import time
from typing import Callable, Optional

from agent.config import Settings
from agent.invoker import ToolInvoker
from agent.prompt import get_agent_instructions
from agent.run_loop import AgentRunLoop
from agent.service import AgentService
from core.catalog import ToolCatalog, default_catalog
from core.models import AgentSession, RunOutcome, RunState

logger = logging.getLogger(__name__)


def cleanup_session(service: AgentService, session: AgentSession) -> bool:
    """Delete the session's agent.  Returns False if that failed."""
    if session.agent_id is None:
        return True
    logger.info("Cleaning up resources...")
    try:
        service.delete_agent(session.agent_id)
    except Exception:
        logger.exception("Failed to delete agent %s", session.agent_id)
        return False
    logger.info("Deleted agent, agent ID: %s", session.agent_id)
    return True


def run_conversation(
    service: AgentService,
    invoker: ToolInvoker,
    settings: Settings,
    catalog: Optional[ToolCatalog] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunOutcome:
    """Run one user message through a fresh agent and return the outcome.

    Exceptions from the service propagate after the agent has been deleted.
    """
    catalog = catalog or default_catalog()
    session = AgentSession()

    logger.info("Creating agent with tools: %s", ", ".join(catalog.names()))
    session.agent_id = service.create_agent(
        name=settings.agent_name,
        model=settings.model_deployment_name,
        instructions=get_agent_instructions(),
        tools=list(catalog),
    )
    logger.info("Created agent, agent ID: %s", session.agent_id)

    try:
        session.thread_id = service.create_thread()
        logger.info("Created thread, thread ID: %s", session.thread_id)

        service.post_user_message(session.thread_id, settings.user_message)
        logger.info("Created message with content: %s", settings.user_message)

        initial = service.create_run(session.thread_id, session.agent_id)
        session.run_id = initial.run_id
        logger.info("Started run, run ID: %s", session.run_id)

        loop = AgentRunLoop(service, invoker, poll_interval=settings.poll_interval, sleep=sleep)
        final = loop.run(session, initial)

        error = None
        if final.state is RunState.FAILED:
            error = final.last_error or "Unknown error"
            logger.error("Run failed: %s", error)
        elif final.state is RunState.COMPLETED:
            logger.info("Run completed successfully")
        else:
            error = final.last_error
            logger.warning("Run ended with status: %s", final.state.value)

        messages = service.list_messages(session.thread_id)
        logger.info("=== Conversation History ===")
        for message in messages:
            logger.info("%s: %s", message.role, message.text)

        return RunOutcome(
            session=session,
            state=final.state,
            error=error,
            messages=messages,
            tool_calls_handled=loop.tool_calls_handled,
            polls=loop.polls,
        )
    finally:
        cleanup_session(service, session)
