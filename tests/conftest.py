import json

import httpx
import pytest

from agent.config import Settings
from agent.invoker import ToolInvoker
from agent.service import AgentService
from core.models import ConversationMessage, RunSnapshot, RunState, ToolCall


def snap(state, *calls, run_id="run_1", error=None):
    return RunSnapshot(run_id=run_id, state=state, tool_calls=tuple(calls), last_error=error)


class FakeAgentService(AgentService):
    """Replays a scripted sequence of polled run states."""

    def __init__(self, polled, after_submit=RunState.IN_PROGRESS, fail_on=None,
                 messages=None):
        self.polled = list(polled)
        self.after_submit = after_submit
        self.fail_on = fail_on or {}
        self.messages = messages or [
            ConversationMessage(role="user", text="hi", message_id="m1"),
            ConversationMessage(role="assistant", text="done", message_id="m2"),
        ]
        self.log = []
        self.submitted = []
        self.deleted = []
        self.created_tools = []

    def _record(self, name):
        self.log.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def create_agent(self, name, model, instructions, tools):
        self._record("create_agent")
        self.created_tools = list(tools)
        return "agent_1"

    def create_thread(self):
        self._record("create_thread")
        return "thread_1"

    def post_user_message(self, thread_id, content):
        self._record("post_user_message")
        return "msg_1"

    def create_run(self, thread_id, agent_id):
        self._record("create_run")
        return snap(RunState.QUEUED)

    def get_run(self, thread_id, run_id):
        self._record("get_run")
        if not self.polled:
            raise AssertionError("run polled after it reached a terminal state")
        return self.polled.pop(0)

    def submit_tool_outputs(self, thread_id, run_id, outputs):
        self._record("submit_tool_outputs")
        self.submitted.append(list(outputs))
        return snap(self.after_submit, run_id=run_id)

    def list_messages(self, thread_id):
        self._record("list_messages")
        return list(self.messages)

    def delete_agent(self, agent_id):
        self.deleted.append(agent_id)
        self._record("delete_agent")

    @property
    def polls(self):
        return self.log.count("get_run")


class RecordingTransport:
    """httpx handler that records requests and answers with {"content": ...}."""

    def __init__(self, responder=None):
        self.requests = []
        self.responder = responder or (lambda request, body: httpx.Response(
            200, json={"content": f"ran {request.url.path}"}))

    def __call__(self, request):
        body = json.loads(request.content) if request.content else None
        self.requests.append((request, body))
        return self.responder(request, body)


@pytest.fixture
def settings():
    return Settings.from_env({"MCP_EXTENSION_KEY": "secret-key", "POLL_INTERVAL_SECONDS": "0"})


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def invoker(transport):
    client = httpx.Client(transport=httpx.MockTransport(transport))
    with ToolInvoker("http://tools.test", "secret-key", client=client) as inv:
        yield inv


@pytest.fixture
def get_snippet_call():
    return ToolCall(id="t1", name="get_snippet", arguments_json='{"snippetname": "foo"}')
