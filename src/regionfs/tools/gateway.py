"""Tool execution with policy and validation."""

from __future__ import annotations

import logging
import time

from regionfs.core.errors import RegionFSError, SchemaInvalid, ToolDenied
from regionfs.core.policy import Decision, ToolPolicy
from regionfs.tools.registry import ToolRegistry
from regionfs.tools.schemas import ToolCall, ToolResult, error_result, text_result
from regionfs.utils.jsonschema import validate_jsonschema

logger = logging.getLogger(__name__)


class ToolGateway:
    """Runs tool calls and turns every failure into an ``Error:`` result.

    Nothing raised by a handler escapes ``execute``; domain errors are logged
    as warnings, anything else with its traceback.
    """

    def __init__(self, registry: ToolRegistry, policy: ToolPolicy) -> None:
        self._registry = registry
        self._policy = policy

    async def execute(self, call: ToolCall) -> ToolResult:
        start = time.perf_counter()
        try:
            text = await self._run(call)
        except (RegionFSError, OSError, UnicodeDecodeError, KeyError) as exc:
            message = _message(exc)
            logger.warning("Tool %s failed: %s", call.tool, message)
            return error_result(call.call_id, message, _elapsed_ms(start))
        except Exception as exc:
            logger.exception("Tool %s crashed", call.tool)
            return error_result(call.call_id, _message(exc), _elapsed_ms(start))
        logger.info("Tool %s succeeded", call.tool)
        return text_result(call.call_id, text, _elapsed_ms(start))

    async def _run(self, call: ToolCall) -> str:
        spec = self._registry.get(call.tool)
        decision = self._policy.evaluate(spec.name, spec.risk_level)
        if decision.decision is Decision.DENY:
            raise ToolDenied(decision.reason)
        args = call.args if call.args is not None else {}
        if not isinstance(args, dict):
            raise SchemaInvalid(
                f"Invalid arguments for {spec.name}: expected an object"
            )
        validate_jsonschema(spec.name, spec.args_schema, args)
        handler = self._registry.handler(spec.name)
        return await handler(**args)


def _message(exc: BaseException) -> str:
    # KeyError wraps its message in quotes
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc) or exc.__class__.__name__


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
