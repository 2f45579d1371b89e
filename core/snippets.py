# =============================================================================
# core/snippets.py  —  Snippet Storage & the Three Tool Behaviors
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   - Defines SnippetStore, the narrow get/put interface the tools need
#   - Provides FileSnippetStore, a local-directory implementation
#   - Implements hello(), get_snippet() and save_snippet(): the logic behind
#     the hello_mcp / get_snippet / save_snippet tools
#
# Each snippet is stored as one object named "<snippetname>.json".  The name
# comes straight from the tool arguments; only empty names are rejected.
#
# The Azure Blob implementation lives in tools/blob_store.py so that core/
# stays free of cloud SDKs.
#
# TOOL RESULTS ARE ALWAYS STRINGS:
#   None of the tool functions raise.  Missing input, missing snippets and
#   storage failures all come back as short sentences the agent can read.
# =============================================================================

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SNIPPET_CONTAINER = "snippets"
HELLO_MESSAGE = "Hello I am MCPTool!"


def blob_name(snippet_name: str) -> str:
    """Object name used for a snippet in any store."""
    return f"{snippet_name}.json"


# -----------------------------------------------------------------------------
# Stores
# -----------------------------------------------------------------------------
class SnippetStore(ABC):
    """Key-value storage interface for snippets."""

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Return the snippet content, or None if it does not exist."""

    @abstractmethod
    def put(self, name: str, content: str) -> None: ...


class FileSnippetStore(SnippetStore):
    """Stores each snippet as <root>/<name>.json on the local disk."""

    def __init__(self, root):
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        root = self.root.resolve()
        path = (root / blob_name(name)).resolve()
        if root not in path.parents:
            raise ValueError(f"Snippet name escapes the store directory: {name!r}")
        return path

    def get(self, name: str) -> Optional[str]:
        path = self._path(name)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def put(self, name: str, content: str) -> None:
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


class MemorySnippetStore(SnippetStore):
    """In-process store, handy for demos and tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data = dict(initial or {})

    def get(self, name: str) -> Optional[str]:
        return self._data.get(name)

    def put(self, name: str, content: str) -> None:
        self._data[name] = content


# -----------------------------------------------------------------------------
# Tool behaviors
# -----------------------------------------------------------------------------
def hello() -> str:
    return HELLO_MESSAGE


def get_snippet(store: SnippetStore, snippet_name: Optional[str]) -> str:
    """Retrieve a snippet by name.

    Returns the stored content, "Snippet not found", or one of the
    error sentences below.  Never raises.
    """
    if not snippet_name:
        return "No snippet name provided"

    try:
        content = store.get(snippet_name)
    except Exception:
        logger.exception("Error retrieving snippet %r", snippet_name)
        return "Error retrieving snippet"

    if content is None:
        return "Snippet not found"
    return content


def save_snippet(store: SnippetStore, snippet_name: Optional[str],
                 snippet: Optional[str]) -> str:
    """Save a snippet under a name, overwriting any previous content."""
    if not snippet_name:
        return "No snippet name provided"
    if not snippet:
        return "No snippet content provided"

    try:
        store.put(snippet_name, snippet)
    except Exception:
        logger.exception("Error saving snippet %r", snippet_name)
        return "Error saving snippet"

    return f"Snippet '{snippet_name}' saved successfully"
