# =============================================================================
# agent/config.py  —  Agent client configuration (environment + defaults)
# =============================================================================
#
# Every setting comes from the environment (a .env file is loaded by
# main.py through python-dotenv) and has a documented fallback, except
# MCP_EXTENSION_KEY: without it the tool server cannot be called, so
# Settings.from_env() refuses to start.
# =============================================================================

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

DEFAULT_PROJECT_ENDPOINT = (
    "https://your-agent-service-resource.services.ai.azure.com/api/projects/your-project-name"
)
DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_TOOL_SERVER_URL = "http://127.0.0.1:8000"
DEFAULT_USER_MESSAGE = "Create a snippet called snippet1 that prints 'Hello, World!' in Python."
DEFAULT_AGENT_NAME = "my-mcp-agent"
DEFAULT_POLL_INTERVAL = 0.5
REDACTED = "[REDACTED]"


class ConfigurationError(RuntimeError):
    """A required setting is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    project_endpoint: str
    model_deployment_name: str
    tool_server_url: str
    tool_server_key: str
    user_message: str
    agent_name: str = DEFAULT_AGENT_NAME
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        key = env.get("MCP_EXTENSION_KEY")
        if not key:
            raise ConfigurationError(
                "MCP_EXTENSION_KEY environment variable is required but not set")

        raw_interval = env.get("POLL_INTERVAL_SECONDS") or str(DEFAULT_POLL_INTERVAL)
        try:
            poll_interval = float(raw_interval)
        except ValueError:
            raise ConfigurationError(
                f"POLL_INTERVAL_SECONDS must be a number, got {raw_interval!r}") from None
        if poll_interval < 0:
            raise ConfigurationError("POLL_INTERVAL_SECONDS must not be negative")

        return cls(
            project_endpoint=env.get("PROJECT_ENDPOINT") or DEFAULT_PROJECT_ENDPOINT,
            model_deployment_name=env.get("MODEL_DEPLOYMENT_NAME") or DEFAULT_MODEL,
            tool_server_url=(env.get("TOOL_SERVER_URL") or DEFAULT_TOOL_SERVER_URL).rstrip("/"),
            tool_server_key=key,
            user_message=env.get("USER_MESSAGE") or DEFAULT_USER_MESSAGE,
            agent_name=env.get("AGENT_NAME") or DEFAULT_AGENT_NAME,
            poll_interval=poll_interval,
        )

    def with_overrides(self, **changes) -> "Settings":
        """Copy with the non-None values of `changes` applied (CLI flags)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def describe(self) -> dict[str, str]:
        """Log-safe view of the settings; the key is never included."""
        return {
            "Project Endpoint": self.project_endpoint,
            "Model Deployment": self.model_deployment_name,
            "Tool Server URL": self.tool_server_url,
            "Agent Name": self.agent_name,
            "Poll Interval": f"{self.poll_interval}s",
            "User Message": self.user_message,
            "MCP Extension Key": REDACTED,
        }
