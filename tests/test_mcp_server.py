import asyncio

import pytest
from fastmcp import Client
from starlette.testclient import TestClient

from core.snippets import MemorySnippetStore
from tools.mcp_server import build_server


@pytest.fixture
def store():
    return MemorySnippetStore({"greeting": "print('hi')"})


@pytest.fixture
def client(store):
    return TestClient(build_server(store, access_key="secret-key").http_app())


def _post(client, tool, arguments=None, code="secret-key"):
    params = {"code": code} if code is not None else {}
    return client.post(f"/api/{tool}", params=params, json={"arguments": arguments or {}})


def test_hello_endpoint(client):
    resp = _post(client, "hello_mcp")
    assert resp.status_code == 200
    assert resp.json() == {"content": "Hello I am MCPTool!"}


def test_get_and_save_endpoints(client, store):
    assert _post(client, "get_snippet", {"snippetname": "greeting"}).json() == \
        {"content": "print('hi')"}

    resp = _post(client, "save_snippet", {"snippetname": "s2", "snippet": "x = 1"})
    assert resp.json() == {"content": "Snippet 's2' saved successfully"}
    assert store.get("s2") == "x = 1"


def test_missing_snippet_is_still_200(client):
    resp = _post(client, "get_snippet", {"snippetname": "absent"})
    assert resp.status_code == 200
    assert resp.json()["content"] == "Snippet not found"


def test_unknown_tool_is_404(client):
    assert _post(client, "drop_tables").status_code == 404


@pytest.mark.parametrize("code", [None, "wrong"])
def test_access_key_required(client, code):
    assert _post(client, "hello_mcp", code=code).status_code == 401


def test_bad_bodies_are_400(client):
    resp = client.post("/api/hello_mcp", params={"code": "secret-key"}, content=b"not json")
    assert resp.status_code == 400
    resp = client.post("/api/hello_mcp", params={"code": "secret-key"}, json={"arguments": [1]})
    assert resp.status_code == 400


def test_open_server_without_key(store):
    client = TestClient(build_server(store).http_app())
    assert _post(client, "hello_mcp", code=None).status_code == 200


def test_health(client):
    assert client.get("/health").json() == {
        "status": "ok", "tools": ["hello_mcp", "get_snippet", "save_snippet"]}


def test_mcp_tools_use_catalog_descriptions(store):
    server = build_server(store)

    async def scenario():
        async with Client(server) as mcp_client:
            tools = {t.name: t for t in await mcp_client.list_tools()}
            saved = await mcp_client.call_tool(
                "save_snippet", {"snippetname": "n", "snippet": "body"})
            return tools, saved

    tools, saved = asyncio.run(scenario())

    assert set(tools) == {"hello_mcp", "get_snippet", "save_snippet"}
    assert tools["get_snippet"].description == "Retrieve a snippet by name."
    props = tools["save_snippet"].inputSchema["properties"]
    assert props["snippet"]["description"] == "The content of the snippet."
    assert saved.content[0].text == "Snippet 'n' saved successfully"
    assert store.get("n") == "body"
