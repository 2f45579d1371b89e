# =============================================================================
# tools/__init__.py
# =============================================================================
# This package hosts the snippet tools.
#
#   mcp_server.py → FastMCP server: MCP tools + POST /api/<tool> endpoints
#   blob_store.py → Azure Blob Storage backend for snippets
#
# The tool logic itself lives in core/snippets.py; the tool names and
# descriptions come from core/tool_catalog.json.
# =============================================================================
