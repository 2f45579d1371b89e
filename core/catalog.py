# =============================================================================
# core/catalog.py  —  Tool Catalog (the single source of tool contracts)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Loads tool_catalog.json into ToolDescriptor objects and answers
#   "what does tool X look like?".
#
# WHO READS IT:
#   - tools/mcp_server.py  → registers MCP tools with these descriptions
#   - agent/orchestrator.py → advertises the same tools to the remote agent
#
#   Both sides load the SAME data file, so a tool's name, description and
#   parameters cannot drift between the server and the client.
#
# The catalog is read once at startup.  The run loop never consults it.
# =============================================================================

import json
from pathlib import Path
from typing import Iterator, Optional

from core.models import ToolDescriptor, ToolParameter

DEFAULT_CATALOG_PATH = Path(__file__).with_name("tool_catalog.json")

# Tool names used in code.  Kept equal to the names in tool_catalog.json.
HELLO_TOOL = "hello_mcp"
GET_SNIPPET_TOOL = "get_snippet"
SAVE_SNIPPET_TOOL = "save_snippet"
SNIPPET_NAME_PROPERTY = "snippetname"
SNIPPET_PROPERTY = "snippet"


class ToolNotFoundError(KeyError):
    """Raised when a tool name is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


class ToolCatalog:
    """Immutable name → ToolDescriptor registry."""

    def __init__(self, descriptors: list[ToolDescriptor]):
        self._tools: dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._tools:
                raise ValueError(f"Duplicate tool name in catalog: {descriptor.name}")
            self._tools[descriptor.name] = descriptor

    @classmethod
    def from_dict(cls, data: dict) -> "ToolCatalog":
        descriptors = []
        for entry in data.get("tools", []):
            params = {
                name: ToolParameter(type=param.get("type", "string"),
                                    description=param.get("description", ""))
                for name, param in (entry.get("parameters") or {}).items()
            }
            descriptors.append(ToolDescriptor(
                name=entry["name"],
                description=entry.get("description", ""),
                parameters=params,
                required=tuple(entry.get("required", ())),
            ))
        return cls(descriptors)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ToolCatalog":
        """Load a catalog from a JSON file (the bundled one by default)."""
        path = Path(path) if path else DEFAULT_CATALOG_PATH
        with path.open(encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))

    def describe(self, name: str) -> ToolDescriptor:
        """Return the descriptor for `name`, or raise ToolNotFoundError."""
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


_default: Optional[ToolCatalog] = None


def default_catalog() -> ToolCatalog:
    """The bundled catalog, loaded once per process."""
    global _default
    if _default is None:
        _default = ToolCatalog.load()
    return _default
