"""
Request/response channel between execution contexts.

Every request gets exactly one MessageResult back. A handler that raises or
does not answer within the timeout produces a failure result instead, so a
caller never waits forever and never sees a raw exception.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Union

from joblens.contexts.analysis.logger import _log_warning
from joblens.contexts.analysis.messages import MessageResult, Request, to_wire

DEFAULT_TIMEOUT_S = 90.0

Handler = Callable[[Dict[str, Any]], Awaitable[MessageResult]]


class MessageChannel:
    """
    Args:
        handler: Receives the wire dict, returns a MessageResult
        timeout: Default seconds to wait for an answer
    """

    def __init__(self, handler: Handler, timeout: float = DEFAULT_TIMEOUT_S):
        self.handler = handler
        self.timeout = timeout

    async def request(
        self, message: Union[Request, Dict[str, Any]], timeout: float = None
    ) -> MessageResult:
        wire = message if isinstance(message, dict) else to_wire(message)
        wait = self.timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(self.handler(wire), timeout=wait)
        except asyncio.TimeoutError:
            _log_warning(f"{wire.get('type')} got no response within {wait:g}s")
            return MessageResult.failure(f"No response within {wait:g} seconds. Please try again.")
        except Exception as e:
            _log_warning(f"{wire.get('type')} handler failed: {e}")
            return MessageResult.failure(str(e) or "Request failed")
