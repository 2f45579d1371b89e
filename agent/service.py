# =============================================================================
# agent/service.py  —  The remote agent service, as the run loop sees it
# =============================================================================
#
# The hosted agent service is a black box reached through a handful of RPCs.
# This class names them, in terms of core/models.py types only.  The Azure
# AI Foundry implementation is agent/foundry.py; tests use an in-memory fake.
# =============================================================================

from abc import ABC, abstractmethod

from core.models import ConversationMessage, RunSnapshot, ToolDescriptor, ToolOutput


class AgentService(ABC):
    """Interface to a hosted agent service.  Subclasses implement every RPC."""

    @abstractmethod
    def create_agent(self, name: str, model: str, instructions: str,
                     tools: list[ToolDescriptor]) -> str:
        """Create an agent and return its id."""

    @abstractmethod
    def create_thread(self) -> str: ...

    @abstractmethod
    def post_user_message(self, thread_id: str, content: str) -> str: ...

    @abstractmethod
    def create_run(self, thread_id: str, agent_id: str) -> RunSnapshot: ...

    @abstractmethod
    def get_run(self, thread_id: str, run_id: str) -> RunSnapshot: ...

    @abstractmethod
    def submit_tool_outputs(self, thread_id: str, run_id: str,
                            outputs: list[ToolOutput]) -> RunSnapshot: ...

    @abstractmethod
    def list_messages(self, thread_id: str) -> list[ConversationMessage]:
        """Messages of the thread, oldest first."""

    @abstractmethod
    def delete_agent(self, agent_id: str) -> None: ...
