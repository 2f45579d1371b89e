# =============================================================================
# agent/prompt.py  —  Instructions given to the hosted agent
# =============================================================================
#
# The remote agent receives these instructions once, when it is created.
# The tool list itself is not repeated here: the service receives the tool
# descriptors from core/tool_catalog.json alongside the instructions.
# =============================================================================

from datetime import date

AGENT_INSTRUCTIONS = (
    "You are a helpful assistant. Use the tools provided to answer the user's "
    "questions. Be sure to cite your sources."
)


def get_agent_instructions(today: date | None = None) -> str:
    """Instructions with the current date appended."""
    today = today or date.today()
    return (
        f"{AGENT_INSTRUCTIONS}\n\n"
        f"TODAY'S DATE: {today.isoformat()}\n"
        "Snippets are stored by name. Save a snippet with save_snippet before "
        "referring to it, and use get_snippet to read one back. If a tool "
        "returns a message starting with 'Error calling', tell the user what "
        "failed instead of retrying silently."
    )
