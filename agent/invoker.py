# =============================================================================
# agent/invoker.py  —  ToolInvoker: one ToolCall → one HTTP POST → one string
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Turns a tool call requested by the remote agent into a call against the
#   tool server's HTTP endpoint, and turns whatever happens into a string the
#   agent can read.
#
#     ToolCall(id="t1", name="get_snippet", arguments_json='{"snippetname":"foo"}')
#        │
#        ▼
#     POST {TOOL_SERVER_URL}/api/get_snippet?code=<key>
#          {"arguments": {"snippetname": "foo"}}
#        │
#        ▼
#     ToolOutput(call_id="t1", result="<content>"  or  "Error calling get_snippet: ...")
#
# FAILURES NEVER ESCAPE:
#   Bad argument JSON, connection errors, non-2xx statuses and unreadable
#   response bodies all become an InvocationResult with an error status and
#   an "Error calling <tool>: <cause>" text.  The batch for the run is always
#   complete, and the agent gets to see what went wrong.
#
# SECRETS:
#   The access key travels as a query parameter.  It is replaced with
#   [REDACTED] in every log line and in every error text sent to the agent.
# =============================================================================

import json
import logging
import re
from typing import Optional
from urllib.parse import quote, quote_plus

import httpx

from core.models import InvocationResult, InvocationStatus, ToolCall, ToolOutput

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"
EMPTY_CONTENT_RESULT = "Function executed successfully"
NON_FUNCTION_RESULT = "Tool call processed successfully"

_CODE_PARAM = re.compile(r"\bcode=[^&\s\"'<>]+")


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON value")


class ToolInvoker:
    """Resolves tool calls against `<base_url>/api/<tool_name>`."""

    def __init__(self, base_url: str, access_key: Optional[str] = None,
                 client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self._access_key = access_key or None
        self._client = client or httpx.Client()
        self._key_forms: tuple[str, ...] = ()
        if self._access_key:
            encoded = str(httpx.QueryParams({"code": self._access_key})).partition("=")[2]
            forms = {encoded, quote(self._access_key, safe=""),
                     quote_plus(self._access_key), self._access_key}
            # Longest first, so a form is never split by a shorter one.
            self._key_forms = tuple(sorted(forms, key=len, reverse=True))

    def endpoint(self, tool_name: str) -> str:
        return f"{self.base_url}/api/{tool_name}"

    def redact(self, text: str) -> str:
        """Scrub the key, raw or percent-encoded, and any code= parameter."""
        if not self._access_key:
            return text
        for form in self._key_forms:
            text = text.replace(form, REDACTED)
        return _CODE_PARAM.sub(f"code={REDACTED}", text)

    def _loggable_url(self, tool_name: str) -> str:
        url = self.endpoint(tool_name)
        return f"{url}?code={REDACTED}" if self._access_key else url

    def _error(self, call: ToolCall, status: InvocationStatus, cause: str,
               status_code: Optional[int] = None) -> InvocationResult:
        return InvocationResult(
            status=status,
            text=self.redact(f"Error calling {call.name}: {cause}"),
            status_code=status_code,
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    def invoke(self, call: ToolCall) -> ToolOutput:
        """Resolve `call` and key the result to its id."""
        return self.resolve(call).to_output(call.id)

    def resolve(self, call: ToolCall) -> InvocationResult:
        if call.type != "function":
            logger.info("Non-function tool call %s (%s) acknowledged", call.id, call.type)
            return InvocationResult(InvocationStatus.UNSUPPORTED_CALL, NON_FUNCTION_RESULT)

        # Step 1: parse and re-encode the arguments before touching the network.
        # NaN/Infinity and lone surrogates parse but cannot be sent as JSON.
        try:
            arguments = (json.loads(call.arguments_json, parse_constant=_reject_constant)
                         if call.arguments_json.strip() else {})
            if not isinstance(arguments, dict):
                raise ValueError("expected a JSON object")
            body = json.dumps({"arguments": arguments}, allow_nan=False,
                              ensure_ascii=False).encode("utf-8")
        except ValueError as exc:
            logger.error("Invalid arguments for %s: %s", call.name, exc)
            return self._error(call, InvocationStatus.BAD_ARGUMENTS, f"invalid arguments: {exc}")

        # Step 2: one POST, no retry
        params = {"code": self._access_key} if self._access_key else None
        logger.info("Calling tool function: %s", self._loggable_url(call.name))
        try:
            response = self._client.post(
                self.endpoint(call.name), params=params, content=body,
                headers={"Content-Type": "application/json"})
        except Exception as exc:
            logger.error("Error calling tool function %s: %s", call.name, self.redact(str(exc)))
            return self._error(call, InvocationStatus.TRANSPORT_ERROR, str(exc))

        if not response.is_success:
            logger.error("Tool function call failed: %s - %s",
                         response.status_code, self.redact(response.text))
            cause = f"HTTP {response.status_code} {response.reason_phrase}".rstrip()
            return self._error(call, InvocationStatus.HTTP_ERROR, cause, response.status_code)

        # Step 3: normalize the body into a string
        body = response.text
        logger.info("Tool function response: %s", self.redact(body))
        try:
            payload = json.loads(body)
        except ValueError as exc:
            return self._error(call, InvocationStatus.BAD_RESPONSE,
                               f"unreadable response: {exc}", response.status_code)

        if isinstance(payload, dict) and "content" in payload:
            content = payload["content"]
            if content is None:
                text = EMPTY_CONTENT_RESULT
            elif isinstance(content, str):
                text = content
            else:
                text = json.dumps(content, ensure_ascii=False)
        else:
            text = body
        return InvocationResult(InvocationStatus.OK, text, response.status_code)

    # -------------------------------------------------------------------------
    # Resource handling
    # -------------------------------------------------------------------------
    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ToolInvoker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
