"""Tests for count-then-records delivery."""

import pytest
from fakes import RecordingTransport, make_response

from nmbs_departures.application.services import RecordFormatter, SequentialTransmitter
from nmbs_departures.domain.constants import MAX_DEPARTURES
from nmbs_departures.domain.models import (
    DepartureCount,
    DepartureMessage,
    ErrorKind,
    JobKind,
    MessageType,
    StationCount,
    StationMessage,
    TransmissionJob,
    TransmissionState,
)


def _search_job(count: int, request_id: int) -> TransmissionJob:
    formatter = RecordFormatter()
    connections = make_response(count).connection
    return TransmissionJob(
        kind=JobKind.SEARCH_RESULTS,
        header=lambda n: DepartureCount(n, request_id),
        records=[
            DepartureMessage(formatter.departure_record(c, i), request_id)
            for i, c in enumerate(connections)
        ],
        limit=MAX_DEPARTURES,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, 1, 5, 11, 12, 30, 50])
async def test_count_matches_records_and_carries_request_id(count: int) -> None:
    """Given N connections, when transmitting, then min(N, 11) records follow a matching count."""
    transport = RecordingTransport()
    transmitter = SequentialTransmitter(transport)

    result = await transmitter.transmit(_search_job(count, request_id=17))

    expected = min(count, MAX_DEPARTURES)
    header, *records = transport.sent
    assert header["MESSAGE_TYPE"] == MessageType.SEND_COUNT
    assert header["DATA_COUNT"] == expected
    assert len(records) == expected
    assert all(p["MESSAGE_TYPE"] == MessageType.SEND_DEPARTURE for p in records)
    assert [p["DEPARTURE_INDEX"] for p in records] == list(range(expected))
    assert {p["REQUEST_ID"] for p in transport.sent} == {17}
    assert result.state is TransmissionState.DONE
    assert result.count == expected
    assert result.error is None
    assert result.delivered == expected


@pytest.mark.asyncio
async def test_count_failure_aborts_job() -> None:
    """Given the count message fails, when transmitting, then no record is sent."""
    transport = RecordingTransport(fail_when=lambda m: isinstance(m, DepartureCount))
    transmitter = SequentialTransmitter(transport)

    result = await transmitter.transmit(_search_job(3, request_id=1))

    assert result.state is TransmissionState.ABORTED
    assert result.error is not None
    assert result.error.kind is ErrorKind.TRANSPORT_SEND_FAILED
    assert result.error.reason == "NACK"
    assert not result.completed
    assert len(transport.attempted) == 1
    assert transport.sent == []


@pytest.mark.asyncio
async def test_record_failure_advances_to_next_record() -> None:
    """Given record 1 fails, when transmitting, then records 2.. are still sent once each."""
    transport = RecordingTransport(
        fail_when=lambda m: isinstance(m, DepartureMessage) and m.record.index == 1
    )
    transmitter = SequentialTransmitter(transport)

    result = await transmitter.transmit(_search_job(4, request_id=3))

    assert [p.get("DEPARTURE_INDEX") for p in transport.attempted[1:]] == [0, 1, 2, 3]
    assert [p["DEPARTURE_INDEX"] for p in transport.sent[1:]] == [0, 2, 3]
    assert result.state is TransmissionState.DONE
    assert result.failed_indices == (1,)
    assert result.delivered == 3


@pytest.mark.asyncio
async def test_unavailable_records_are_skipped_but_counted() -> None:
    """Given a missing record, when transmitting, then it is skipped without a send."""
    transport = RecordingTransport()
    transmitter = SequentialTransmitter(transport)
    job = TransmissionJob(
        kind=JobKind.FAVORITES,
        header=StationCount,
        records=[StationMessage(0, "Ghent", "G"), None, StationMessage(2, "Leuven", "L")],
    )

    result = await transmitter.transmit(job)

    assert transport.sent[0] == {
        "MESSAGE_TYPE": MessageType.SEND_STATION_COUNT,
        "CONFIG_STATION_COUNT": 3,
    }
    assert [p["CONFIG_STATION_INDEX"] for p in transport.sent[1:]] == [0, 2]
    assert result.skipped_indices == (1,)
    assert result.completed


@pytest.mark.asyncio
async def test_send_single_reports_failure() -> None:
    """Given a rejected one-shot message, when sending, then the receipt says so."""
    transport = RecordingTransport(fail_when=lambda m: True)
    transmitter = SequentialTransmitter(transport)

    receipt = await transmitter.send_single(DepartureCount(0, 9))

    assert receipt.delivered is False
    assert receipt.reason == "NACK"
    assert receipt.error is not None
    assert receipt.error.kind is ErrorKind.TRANSPORT_SEND_FAILED
