"""Unit tests for MessageChannel."""

import asyncio

import pytest

from joblens.contexts.analysis.channel import MessageChannel
from joblens.contexts.analysis.messages import GetRateLimitStatus, MessageResult


@pytest.mark.unit
@pytest.mark.asyncio
async def test_request_passes_wire_dict():
    received = []

    async def handler(wire):
        received.append(wire)
        return MessageResult.ok({"remaining": 10})

    result = await MessageChannel(handler).request(GetRateLimitStatus())

    assert result.success
    assert received == [{"type": "GET_RATE_LIMIT_STATUS", "payload": {}}]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_raw_dicts_pass_through():
    async def handler(wire):
        return MessageResult.ok(wire["type"])

    result = await MessageChannel(handler).request({"type": "CLEAR_CACHE"})
    assert result.data == "CLEAR_CACHE"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_timeout_becomes_failure():
    async def handler(wire):
        await asyncio.sleep(1)
        return MessageResult.ok()

    result = await MessageChannel(handler, timeout=0.01).request(GetRateLimitStatus())

    assert not result.success
    assert result.error == "No response within 0.01 seconds. Please try again."


@pytest.mark.unit
@pytest.mark.asyncio
async def test_per_request_timeout_override():
    async def handler(wire):
        await asyncio.sleep(0.05)
        return MessageResult.ok("late but fine")

    channel = MessageChannel(handler, timeout=0.01)
    result = await channel.request(GetRateLimitStatus(), timeout=1)

    assert result.data == "late but fine"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_handler_exception_becomes_failure():
    async def handler(wire):
        raise RuntimeError("listener went away")

    result = await MessageChannel(handler).request(GetRateLimitStatus())

    assert not result.success
    assert result.error == "listener went away"
