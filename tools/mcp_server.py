# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (hello / get / save snippet)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds ONE FastMCP server that exposes the three snippet tools two ways:
#
#     1. As MCP tools (hello_mcp, get_snippet, save_snippet) for any MCP
#        client that connects over stdio, SSE or streamable HTTP.
#     2. As plain HTTP endpoints:  POST /api/<toolName>
#        with body {"arguments": {...}}  →  200 {"content": "<result>"}
#        This is what the agent client's ToolInvoker calls.
#
#   Both paths run the same functions from core/snippets.py, and both take
#   names and descriptions from core/tool_catalog.json.
#
# ACCESS KEY:
#   When MCP_EXTENSION_KEY is set, the HTTP endpoints require it as the
#   "code" query parameter (?code=...), the same way the agent client sends
#   it.  Missing or wrong keys get 401.
#
# RUNNING THIS SERVER:
#   python -m tools.mcp_server                     # streamable HTTP on :8000
#   python -m tools.mcp_server --transport stdio   # MCP over stdin/stdout
# =============================================================================

import argparse
import hmac
import json
import logging
import os
import sys
from typing import Annotated, Callable, Optional

from fastmcp import FastMCP
from pydantic import Field
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse

from core.catalog import (
    GET_SNIPPET_TOOL,
    HELLO_TOOL,
    SAVE_SNIPPET_TOOL,
    SNIPPET_NAME_PROPERTY,
    SNIPPET_PROPERTY,
    ToolCatalog,
    default_catalog,
)
from core.snippets import SnippetStore, get_snippet, hello, save_snippet

# =============================================================================
# Logging
# =============================================================================
# Logs go to STDERR: with the stdio transport, STDOUT carries the MCP
# protocol stream and must not receive anything else.
#
#   CYAN   → incoming tool calls
#   GREEN  → responses
#   YELLOW → status / rejections
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logger = logging.getLogger("tools.mcp_server")


def _log_request(tool_name: str, params: dict) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: str) -> str:
    logger.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(result)}{_RESET}")
    return result


def _str_arg(arguments: dict, key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


# =============================================================================
# Server factory
# =============================================================================
def build_server(
    store: SnippetStore,
    access_key: Optional[str] = None,
    catalog: Optional[ToolCatalog] = None,
) -> FastMCP:
    """Create the FastMCP server with MCP tools and /api/<tool> routes.

    Args:
        store: Where snippets are read from and written to.
        access_key: If given, required as ?code= on the HTTP endpoints.
        catalog: Tool contracts; the bundled catalog by default.
    """
    catalog = catalog or default_catalog()
    mcp = FastMCP("snippet-tools")

    # One handler per tool, keyed by catalog name.  Both the MCP tools and
    # the HTTP routes go through these.
    handlers: dict[str, Callable[[dict], str]] = {
        HELLO_TOOL: lambda args: hello(),
        GET_SNIPPET_TOOL: lambda args: get_snippet(
            store, _str_arg(args, SNIPPET_NAME_PROPERTY)),
        SAVE_SNIPPET_TOOL: lambda args: save_snippet(
            store, _str_arg(args, SNIPPET_NAME_PROPERTY), _str_arg(args, SNIPPET_PROPERTY)),
    }
    for name in handlers:
        catalog.describe(name)  # fail at startup if the catalog lost a tool

    def run_tool(tool_name: str, arguments: dict) -> str:
        _log_request(tool_name, arguments)
        return _log_response(tool_name, handlers[tool_name](arguments))

    # -------------------------------------------------------------------------
    # MCP tools
    # -------------------------------------------------------------------------
    hello_desc = catalog.describe(HELLO_TOOL)
    get_desc = catalog.describe(GET_SNIPPET_TOOL)
    save_desc = catalog.describe(SAVE_SNIPPET_TOOL)

    @mcp.tool(name=HELLO_TOOL, description=hello_desc.description)
    def hello_mcp() -> str:
        return run_tool(HELLO_TOOL, {})

    @mcp.tool(name=GET_SNIPPET_TOOL, description=get_desc.description)
    def get_snippet_tool(
        snippetname: Annotated[str, Field(
            description=get_desc.parameters[SNIPPET_NAME_PROPERTY].description)],
    ) -> str:
        return run_tool(GET_SNIPPET_TOOL, {SNIPPET_NAME_PROPERTY: snippetname})

    @mcp.tool(name=SAVE_SNIPPET_TOOL, description=save_desc.description)
    def save_snippet_tool(
        snippetname: Annotated[str, Field(
            description=save_desc.parameters[SNIPPET_NAME_PROPERTY].description)],
        snippet: Annotated[str, Field(
            description=save_desc.parameters[SNIPPET_PROPERTY].description)],
    ) -> str:
        return run_tool(SAVE_SNIPPET_TOOL,
                        {SNIPPET_NAME_PROPERTY: snippetname, SNIPPET_PROPERTY: snippet})

    # -------------------------------------------------------------------------
    # HTTP routes
    # -------------------------------------------------------------------------
    @mcp.custom_route("/api/{tool_name}", methods=["POST"])
    async def call_tool(request: Request) -> JSONResponse:
        tool_name = request.path_params["tool_name"]
        if tool_name not in handlers:
            _log_status(f"Unknown tool requested: {tool_name}")
            return JSONResponse({"error": f"Unknown tool: {tool_name}"}, status_code=404)

        if access_key:
            supplied = request.query_params.get("code", "")
            if not hmac.compare_digest(supplied.encode(), access_key.encode()):
                _log_status(f"Rejected {tool_name} call: bad access key")
                return JSONResponse({"error": "Unauthorized"}, status_code=401)

        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Request body must be JSON"}, status_code=400)

        arguments = body.get("arguments", {}) if isinstance(body, dict) else None
        if not isinstance(arguments, dict):
            return JSONResponse({"error": "'arguments' must be a JSON object"}, status_code=400)

        content = await run_in_threadpool(run_tool, tool_name, arguments)
        return JSONResponse({"content": content})

    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "tools": catalog.names()})

    return mcp


# =============================================================================
# Server entry point
# =============================================================================
def main(argv: Optional[list[str]] = None) -> None:
    from dotenv import load_dotenv

    from tools.blob_store import store_from_env

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(description="Run the snippet tool server.")
    parser.add_argument("--host", default=os.getenv("MCP_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("MCP_PORT", "8000")))
    parser.add_argument("--transport", choices=["http", "sse", "stdio"], default="http")
    args = parser.parse_args(argv)

    access_key = os.getenv("MCP_EXTENSION_KEY") or None
    if access_key is None:
        logger.warning("MCP_EXTENSION_KEY is not set; /api endpoints accept any caller")

    mcp = build_server(store_from_env(), access_key=access_key)
    if args.transport == "stdio":
        mcp.run()
    else:
        mcp.run(transport=args.transport, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
