import json

import pytest

from core.catalog import ToolCatalog, ToolNotFoundError, default_catalog
from core.models import RunState


def test_bundled_catalog_has_three_tools():
    catalog = default_catalog()
    assert catalog.names() == ["hello_mcp", "get_snippet", "save_snippet"]
    assert len(catalog) == 3
    assert "get_snippet" in catalog


def test_describe_returns_schema():
    save = default_catalog().describe("save_snippet")
    assert save.description == "Save a snippet with a name."
    assert save.json_schema() == {
        "type": "object",
        "properties": {
            "snippetname": {"type": "string", "description": "The name of the snippet."},
            "snippet": {"type": "string", "description": "The content of the snippet."},
        },
        "required": ["snippetname", "snippet"],
    }


def test_hello_tool_takes_no_parameters():
    assert default_catalog().describe("hello_mcp").json_schema()["properties"] == {}


def test_unknown_tool_raises():
    with pytest.raises(ToolNotFoundError) as err:
        default_catalog().describe("delete_everything")
    assert str(err.value) == "Unknown tool: delete_everything"


def test_load_custom_file(tmp_path):
    path = tmp_path / "tools.json"
    path.write_text(json.dumps({"tools": [{"name": "echo", "description": "Echo."}]}))
    catalog = ToolCatalog.load(path)
    assert catalog.describe("echo").parameters == {}


def test_duplicate_names_rejected():
    data = {"tools": [{"name": "a"}, {"name": "a"}]}
    with pytest.raises(ValueError):
        ToolCatalog.from_dict(data)


@pytest.mark.parametrize("raw, expected", [
    ("queued", RunState.QUEUED),
    ("REQUIRES_ACTION", RunState.REQUIRES_ACTION),
    ("something_new", RunState.UNKNOWN),
])
def test_run_state_parse(raw, expected):
    assert RunState.parse(raw) is expected


def test_terminal_states():
    assert not RunState.REQUIRES_ACTION.is_terminal
    assert not RunState.CANCELLING.is_terminal
    assert RunState.COMPLETED.is_terminal
    assert RunState.UNKNOWN.is_terminal
