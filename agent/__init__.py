# =============================================================================
# agent/__init__.py
# =============================================================================
# This package drives a hosted agent (Azure AI Foundry Agent Service).
#
# ARCHITECTURAL ROLE:
#   The agent itself runs remotely.  This package only:
#     1. Creates the agent, a thread and a run            (orchestrator.py)
#     2. Polls the run and reacts to its status           (run_loop.py)
#     3. Forwards requested tool calls to the tool server (invoker.py)
#     4. Submits the results so the run can continue
#
#   The remote service is reached through the AgentService interface
#   (service.py); foundry.py is the Azure implementation.
# =============================================================================
