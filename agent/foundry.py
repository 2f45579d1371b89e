# =============================================================================
# agent/foundry.py  —  AgentService backed by Azure AI Foundry Agent Service
# =============================================================================
#
# Translates between the azure-ai-agents SDK and core/models.py:
#
#   ToolDescriptor   →  FunctionToolDefinition(FunctionDefinition(...))
#   ThreadRun        →  RunSnapshot  (status + pending function calls)
#   ToolOutput       →  azure ToolOutput(tool_call_id, output)
#   ThreadMessage    →  ConversationMessage
#
# Credentials come from DefaultAzureCredential (az login, managed identity,
# environment variables, ...).  Nothing here retries or sleeps; pacing is
# the run loop's job.
# =============================================================================

import logging
from typing import Optional

from azure.ai.agents import AgentsClient
from azure.ai.agents.models import (
    FunctionDefinition,
    FunctionToolDefinition,
    ListSortOrder,
    MessageRole,
    RequiredFunctionToolCall,
    SubmitToolOutputsAction,
)
from azure.ai.agents.models import ToolOutput as AzureToolOutput
from azure.identity import DefaultAzureCredential

from agent.service import AgentService
from core.models import (
    ConversationMessage,
    RunSnapshot,
    RunState,
    ToolCall,
    ToolDescriptor,
    ToolOutput,
)

logger = logging.getLogger(__name__)


def to_function_tool(descriptor: ToolDescriptor) -> FunctionToolDefinition:
    return FunctionToolDefinition(
        function=FunctionDefinition(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.json_schema(),
        )
    )


def _pending_calls(run) -> tuple[ToolCall, ...]:
    action = getattr(run, "required_action", None)
    if not isinstance(action, SubmitToolOutputsAction):
        return ()
    calls = []
    for tool_call in action.submit_tool_outputs.tool_calls:
        if isinstance(tool_call, RequiredFunctionToolCall):
            calls.append(ToolCall(
                id=tool_call.id,
                name=tool_call.function.name,
                arguments_json=tool_call.function.arguments or "",
            ))
        else:
            calls.append(ToolCall(id=tool_call.id, name="", type=getattr(tool_call, "type", "unknown")))
    return tuple(calls)


def _error_message(run) -> Optional[str]:
    error = getattr(run, "last_error", None)
    if error is None:
        return None
    return getattr(error, "message", None) or str(error)


def to_snapshot(run) -> RunSnapshot:
    return RunSnapshot(
        run_id=run.id,
        state=RunState.parse(run.status),
        tool_calls=_pending_calls(run),
        last_error=_error_message(run),
    )


class FoundryAgentService(AgentService):

    def __init__(self, endpoint: str, credential=None, client: Optional[AgentsClient] = None):
        self._client = client or AgentsClient(
            endpoint=endpoint,
            credential=credential or DefaultAzureCredential(),
        )
        logger.info("Created Agents client for endpoint: %s", endpoint)

    def create_agent(self, name, model, instructions, tools):
        agent = self._client.create_agent(
            model=model,
            name=name,
            instructions=instructions,
            tools=[to_function_tool(t) for t in tools],
        )
        return agent.id

    def create_thread(self):
        return self._client.threads.create().id

    def post_user_message(self, thread_id, content):
        message = self._client.messages.create(
            thread_id=thread_id, role=MessageRole.USER, content=content)
        return message.id

    def create_run(self, thread_id, agent_id):
        return to_snapshot(self._client.runs.create(thread_id=thread_id, agent_id=agent_id))

    def get_run(self, thread_id, run_id):
        return to_snapshot(self._client.runs.get(thread_id=thread_id, run_id=run_id))

    def submit_tool_outputs(self, thread_id, run_id, outputs: list[ToolOutput]):
        run = self._client.runs.submit_tool_outputs(
            thread_id=thread_id,
            run_id=run_id,
            tool_outputs=[AzureToolOutput(tool_call_id=o.call_id, output=o.result) for o in outputs],
        )
        return to_snapshot(run)

    def list_messages(self, thread_id):
        messages = []
        for msg in self._client.messages.list(thread_id=thread_id, order=ListSortOrder.ASCENDING):
            text = "\n".join(part.text.value for part in (msg.text_messages or []))
            messages.append(ConversationMessage(
                role=str(getattr(msg.role, "value", msg.role)),
                text=text,
                message_id=msg.id,
            ))
        return messages

    def delete_agent(self, agent_id):
        self._client.delete_agent(agent_id)

    def close(self) -> None:
        self._client.close()
