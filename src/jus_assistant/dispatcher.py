from __future__ import annotations

import asyncio
import json
import logging
from typing import Mapping, Sequence

from langchain_core.tools import BaseTool
from pydantic import ValidationError

from .schemas import SearchLegalArgs
from .search import SearchProviderError
from .tools import ToolKind
from .types import ToolCallRequest, ToolOutput

logger = logging.getLogger(__name__)

INVALID_ARGUMENTS_OUTPUT = "Error: Invalid arguments."
UNKNOWN_TOOL_OUTPUT = "Error: Unknown tool."

_ARGUMENT_MODELS = {
    ToolKind.SEARCH_LEGAL: SearchLegalArgs,
}


class ToolDispatcher:
    """Turns tool-call requests from a paused run into tool outputs.

    Every request yields exactly one output. Bad arguments, unknown tools and
    search failures become error strings so the run can always resume.
    """

    def __init__(self, tools: Mapping[ToolKind, BaseTool]) -> None:
        missing = [kind.value for kind in ToolKind if kind not in tools]
        if missing:
            raise ValueError(f"No tool registered for: {', '.join(missing)}")
        self._tools = dict(tools)

    async def dispatch(self, call: ToolCallRequest) -> ToolOutput:
        kind = ToolKind.from_name(call.name)
        if kind is None:
            logger.warning("[DISPATCH] Unknown tool requested: %s (call_id=%s)", call.name, call.id)
            return ToolOutput(tool_call_id=call.id, output=UNKNOWN_TOOL_OUTPUT)

        try:
            raw = json.loads(call.arguments or "")
            args = _ARGUMENT_MODELS[kind].model_validate(raw)
        except (ValueError, ValidationError) as exc:
            logger.error("[DISPATCH] Invalid arguments for %s (call_id=%s): %s", call.name, call.id, exc)
            return ToolOutput(tool_call_id=call.id, output=INVALID_ARGUMENTS_OUTPUT)

        logger.info("[DISPATCH] Executing tool %s with args: %s", kind.value, args.model_dump())
        try:
            result = await self._tools[kind].ainvoke(args.model_dump())
        except SearchProviderError as exc:
            logger.error("[DISPATCH] Tool %s failed (call_id=%s): %s", kind.value, call.id, exc)
            return ToolOutput(tool_call_id=call.id, output=f"Error: Search failed: {exc}")
        except Exception as exc:
            logger.exception("[DISPATCH] Tool execution failed: %s", kind.value)
            return ToolOutput(tool_call_id=call.id, output=f"Error: Tool '{kind.value}' failed: {exc}")

        output = result if isinstance(result, str) else json.dumps(result, ensure_ascii=False)
        return ToolOutput(tool_call_id=call.id, output=output)

    async def dispatch_all(self, calls: Sequence[ToolCallRequest]) -> list[ToolOutput]:
        """Run all calls of one pause point concurrently; outputs follow request order."""
        return list(await asyncio.gather(*(self.dispatch(call) for call in calls)))
