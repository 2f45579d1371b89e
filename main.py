# =============================================================================
# main.py  —  Entry point for the snippet agent client
# =============================================================================
#
# HOW TO RUN:
#   python -m tools.mcp_server          # in one terminal (tool server)
#   python main.py                      # in another (agent client)
#   python main.py --message "Show me snippet1"
#
# WHAT HAPPENS:
#   1. Settings are read from the environment / .env (MCP_EXTENSION_KEY is
#      required; everything else has a default)
#   2. An agent is created on Azure AI Foundry with the three snippet tools
#   3. The user message is posted and a run is started
#   4. The run is polled; tool calls are forwarded to the tool server
#   5. The conversation is printed and the agent is deleted
#
# EXIT CODES:
#   0 → the conversation ran (even if the remote run itself failed)
#   1 → configuration error or an unhandled exception
# =============================================================================

import argparse
import logging
import sys

from dotenv import load_dotenv

logger = logging.getLogger("main")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive a hosted agent that uses the snippet tools.")
    parser.add_argument("--message", help="User message (default: USER_MESSAGE or a demo prompt)")
    parser.add_argument("--poll-interval", type=float,
                        help="Seconds between run status polls (default: 0.5)")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [AGENT] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    args = parse_args(argv)

    from agent.config import ConfigurationError, Settings

    try:
        settings = Settings.from_env().with_overrides(
            user_message=args.message, poll_interval=args.poll_interval)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    logger.info("Configuration loaded successfully:")
    for label, value in settings.describe().items():
        logger.info("- %s: %s", label, value)

    from agent.foundry import FoundryAgentService
    from agent.invoker import ToolInvoker
    from agent.orchestrator import run_conversation

    try:
        service = FoundryAgentService(settings.project_endpoint)
        try:
            with ToolInvoker(settings.tool_server_url, settings.tool_server_key) as invoker:
                outcome = run_conversation(service, invoker, settings)
        finally:
            service.close()
    except Exception:
        logger.exception("Error occurred while running agent service")
        return 1

    if args.json:
        print(outcome.to_json())
    else:
        print("=" * 70)
        for message in outcome.messages:
            print(f"{message.role}: {message.text}\n")
        print("=" * 70)
        print(f"Run {outcome.session.run_id}: {outcome.state.value}"
              + (f" ({outcome.error})" if outcome.error else ""))
    return 0


if __name__ == "__main__":
    sys.exit(main())
