from types import SimpleNamespace

import pytest
from azure.ai.agents.models import (
    RequiredFunctionToolCall,
    RequiredFunctionToolCallDetails,
    RequiredToolCall,
    SubmitToolOutputsAction,
    SubmitToolOutputsDetails,
)

from agent.foundry import FoundryAgentService, to_function_tool, to_snapshot
from agent.service import AgentService
from core.catalog import default_catalog
from core.models import RunState, ToolCall, ToolOutput


def _requires_action(*tool_calls, run_id="run_1"):
    action = SubmitToolOutputsAction(
        submit_tool_outputs=SubmitToolOutputsDetails(tool_calls=list(tool_calls)))
    return SimpleNamespace(id=run_id, status="requires_action",
                           required_action=action, last_error=None)


class FakeRuns:
    def __init__(self, returned):
        self.returned = returned
        self.submitted = None

    def submit_tool_outputs(self, **kwargs):
        self.submitted = kwargs
        return self.returned


def test_descriptor_becomes_function_tool():
    tool = to_function_tool(default_catalog().describe("get_snippet"))
    assert tool.function.name == "get_snippet"
    assert tool.function.description == "Retrieve a snippet by name."
    assert tool.function.parameters["required"] == ["snippetname"]


def test_snapshot_of_failed_run():
    run = SimpleNamespace(id="run_9", status="failed", required_action=None,
                          last_error=SimpleNamespace(message="quota exceeded"))
    snapshot = to_snapshot(run)
    assert snapshot.run_id == "run_9"
    assert snapshot.state is RunState.FAILED
    assert snapshot.tool_calls == ()
    assert snapshot.last_error == "quota exceeded"


def test_snapshot_of_running_run():
    run = SimpleNamespace(id="run_1", status="in_progress", required_action=None, last_error=None)
    snapshot = to_snapshot(run)
    assert snapshot.state is RunState.IN_PROGRESS
    assert snapshot.last_error is None


def test_pending_calls_keep_order_and_kind():
    run = _requires_action(
        RequiredFunctionToolCall(
            id="t1",
            function=RequiredFunctionToolCallDetails(
                name="get_snippet", arguments='{"snippetname":"foo"}')),
        RequiredToolCall(id="c1", type="code_interpreter"),
        RequiredFunctionToolCall(
            id="t2",
            function=RequiredFunctionToolCallDetails(name="hello_mcp", arguments="")),
    )

    snapshot = to_snapshot(run)

    assert snapshot.state is RunState.REQUIRES_ACTION
    assert snapshot.tool_calls == (
        ToolCall(id="t1", name="get_snippet", arguments_json='{"snippetname":"foo"}'),
        ToolCall(id="c1", name="", type="code_interpreter"),
        ToolCall(id="t2", name="hello_mcp", arguments_json=""),
    )


def test_submit_tool_outputs_sends_azure_outputs():
    runs = FakeRuns(SimpleNamespace(id="run_1", status="in_progress",
                                    required_action=None, last_error=None))
    service = FoundryAgentService("https://foundry.test", client=SimpleNamespace(runs=runs))

    snapshot = service.submit_tool_outputs("thread_1", "run_1", [
        ToolOutput(call_id="t1", result="print(1)"),
        ToolOutput(call_id="c1", result="Tool call processed successfully"),
    ])

    assert runs.submitted["thread_id"] == "thread_1"
    assert runs.submitted["run_id"] == "run_1"
    sent = [(o.tool_call_id, o.output) for o in runs.submitted["tool_outputs"]]
    assert sent == [("t1", "print(1)"), ("c1", "Tool call processed successfully")]
    assert snapshot.run_id == "run_1"
    assert snapshot.state is RunState.IN_PROGRESS


def test_agent_service_is_abstract():
    with pytest.raises(TypeError):
        AgentService()
