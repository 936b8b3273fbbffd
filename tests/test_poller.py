"""Tests for the long-running operation poller."""

from __future__ import annotations

import asyncio

import pytest

from luis_predict.prediction import (
    InvalidArgumentError,
    OperationFailedError,
    OperationPoller,
    OperationTimeoutError,
    ProtocolViolationError,
    RemoteCallError,
)
from luis_predict.prediction.responses import ConvertResponse
from tests.helpers import LOCATION, RecordingSleep, Reply, ScriptedTransport, headers, location, status

START_URI = "https://luis.example.test/start"
OPERATION_URI = "https://luis.example.test/operations/42"
RESULT_URI = "https://luis.example.test/results/42"


def _poller(script, **kwargs):
    transport = ScriptedTransport(script=list(script))
    sleep = RecordingSleep()
    kwargs.setdefault("poll_interval", 0.5)
    return OperationPoller(transport, sleep=sleep, **kwargs), transport, sleep


@pytest.mark.asyncio
async def test_run_polls_until_succeeded_and_fetches_result_location():
    poller, transport, sleep = _poller(
        [
            Reply(headers=location(OPERATION_URI)),
            status("running"),
            status("Running"),
            status("Succeeded", RESULT_URI),
            Reply({"documentText": '["chunk"]'}),
        ]
    )

    result = await poller.run(START_URI, ConvertResponse.from_json, data=b"payload")

    assert result == ConvertResponse(document_text='["chunk"]')
    assert sleep.delays == [0.5, 0.5]
    assert [(c.method, c.uri) for c in transport.calls] == [
        ("POST", START_URI),
        ("GET", OPERATION_URI),
        ("GET", OPERATION_URI),
        ("GET", OPERATION_URI),
        ("GET", RESULT_URI),
    ]
    assert transport.calls[0].data == b"payload"


@pytest.mark.asyncio
async def test_not_started_is_a_transient_state():
    poller, transport, sleep = _poller(
        [status("NotStarted"), status("succeeded", RESULT_URI), Reply({"documentText": "[]"})]
    )

    await poller.wait_for_result(OPERATION_URI, ConvertResponse.from_json)

    assert sleep.delays == [0.5]
    assert transport.calls[-1].uri == RESULT_URI


@pytest.mark.asyncio
async def test_immediate_success_does_not_sleep():
    poller, transport, sleep = _poller(
        [status("succeeded", RESULT_URI), Reply({"documentText": "[]"})]
    )

    await poller.wait_for_result(OPERATION_URI, ConvertResponse.from_json)

    assert sleep.delays == []
    assert transport.methods == ["GET", "GET"]


@pytest.mark.asyncio
@pytest.mark.parametrize("reported", ["Failed", "failed", "Cancelled", "unknown"])
async def test_non_success_terminal_status_raises_without_fetch(reported):
    poller, transport, _ = _poller([status("running"), status(reported)])

    with pytest.raises(OperationFailedError) as exc_info:
        await poller.wait_for_result(OPERATION_URI, ConvertResponse.from_json)

    assert exc_info.value.status == reported
    assert exc_info.value.operation_uri == OPERATION_URI
    assert [c.uri for c in transport.calls] == [OPERATION_URI, OPERATION_URI]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "start_headers",
    [headers(), headers((LOCATION, OPERATION_URI), (LOCATION, OPERATION_URI))],
    ids=["missing", "duplicate"],
)
async def test_start_requires_exactly_one_operation_location(start_headers):
    poller, transport, _ = _poller([Reply(headers=start_headers)])

    with pytest.raises(ProtocolViolationError) as exc_info:
        await poller.start(START_URI, json={"query": "text"})

    assert exc_info.value.header_name == LOCATION
    assert transport.methods == ["POST"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "success_headers",
    [headers(), headers((LOCATION, RESULT_URI), (LOCATION, RESULT_URI))],
    ids=["missing", "duplicate"],
)
async def test_succeeded_response_requires_exactly_one_result_location(success_headers):
    poller, transport, _ = _poller([Reply({"status": "succeeded"}, success_headers)])

    with pytest.raises(ProtocolViolationError) as exc_info:
        await poller.wait_for_result(OPERATION_URI, ConvertResponse.from_json)

    assert exc_info.value.occurrences == len(success_headers.getall(LOCATION, []))
    assert transport.methods == ["GET"]


def test_operation_location_header_is_case_insensitive():
    assert OperationPoller.get_operation_location(
        headers(("operation-location", OPERATION_URI))
    ) == OPERATION_URI


def test_relative_operation_location_is_rejected():
    with pytest.raises(ProtocolViolationError):
        OperationPoller.get_operation_location(location("/operations/42"))


@pytest.mark.asyncio
async def test_remote_error_during_poll_propagates():
    error = RemoteCallError(method="GET", uri=OPERATION_URI, status_code=500, response_text="boom")
    poller, transport, _ = _poller([status("running"), error])

    with pytest.raises(RemoteCallError) as exc_info:
        await poller.wait_for_result(OPERATION_URI, ConvertResponse.from_json)

    assert exc_info.value is error
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_cancellation_during_sleep_issues_no_further_calls():
    transport = ScriptedTransport(script=[status("running"), status("succeeded", RESULT_URI)])
    poller = OperationPoller(transport, poll_interval=10.0)
    loop = asyncio.get_running_loop()

    task = asyncio.create_task(poller.wait_for_result(OPERATION_URI, ConvertResponse.from_json))
    while not transport.calls:
        await asyncio.sleep(0)
    await asyncio.sleep(0.01)

    started = loop.time()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert loop.time() - started < 10.0
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_max_wait_time_raises_operation_timeout():
    async def slow_sleep(delay):
        await asyncio.sleep(0.02)

    transport = ScriptedTransport(script=[status("running")] * 10)
    poller = OperationPoller(transport, poll_interval=0.01, max_wait_time=0.03, sleep=slow_sleep)

    with pytest.raises(OperationTimeoutError) as exc_info:
        await poller.wait_for_result(OPERATION_URI, ConvertResponse.from_json)

    assert exc_info.value.timeout_seconds == 0.03
    assert 1 < len(transport.calls) < 10
    assert set(transport.methods) == {"GET"}


@pytest.mark.parametrize(
    "kwargs",
    [{"poll_interval": 0}, {"poll_interval": -1.0}, {"max_wait_time": 0}],
)
def test_invalid_timing_is_rejected(kwargs):
    with pytest.raises(InvalidArgumentError):
        OperationPoller(ScriptedTransport(), **kwargs)
