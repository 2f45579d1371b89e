# =============================================================================
# core/__init__.py
# =============================================================================
# Models, the tool catalog and the snippet tool logic.
#
# Nothing in this package imports FastMCP, httpx or an Azure SDK.  The
# agent/ and tools/ layers translate between these types and the outside
# world.
# =============================================================================
