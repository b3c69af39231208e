"""Unit tests for dispatch correlation and historical queries."""

from unittest.mock import MagicMock

import pytest

from hyperlane_cli.config import QueryConfig
from hyperlane_cli.domains import lookup_domain
from hyperlane_cli.errors import LogCountMismatchError
from hyperlane_cli.event_correlator import (
    DEFAULT_LOOKBACK_BLOCKS,
    DispatchFilter,
    DispatchQuery,
    correlate,
    parse_dispatch,
    parse_dispatch_id,
    query_dispatches,
)
from hyperlane_cli.models import DispatchEvent, DispatchIdEvent
from hyperlane_cli.utils.chain_client import ChainClient

from conftest import (
    OTHER_SENDER,
    RECIPIENT,
    RECIPIENT_BYTES32,
    SENDER,
    make_dispatch_id_log,
    make_dispatch_log,
)

MAILBOX = "0xcc737a94fecaec165abcf12ded095bb13f037685"


def _dispatch(sender=SENDER, destination=80001, recipient=RECIPIENT_BYTES32) -> DispatchEvent:
    return DispatchEvent(sender=sender, destination=destination, recipient=recipient, message=b"hi")


def _dispatch_id(byte: int) -> DispatchIdEvent:
    return DispatchIdEvent(message_id=bytes([byte]) * 32)


@pytest.fixture
def mock_client():
    """Create a read-only client mock serving Dispatch/DispatchId logs."""
    client = MagicMock(spec=ChainClient)
    client.block_number.return_value = 5000
    client.logs = {"Dispatch": [], "DispatchId": []}

    def get_logs(address, abi_name, event_name, from_block, to_block="latest"):
        return client.logs[event_name]

    client.get_logs.side_effect = get_logs
    return client


class TestParsing:
    def test_parse_dispatch(self):
        event = parse_dispatch(make_dispatch_log(destination=97, message=b"payload"))
        assert event.sender.lower() == SENDER
        assert event.destination == 97
        assert event.recipient == RECIPIENT_BYTES32
        assert event.message == b"payload"
        assert event.transaction_hash == "0x" + "01" * 32
        assert event.block_number == 100

    def test_parse_dispatch_id(self):
        event = parse_dispatch_id(make_dispatch_id_log(bytes(32)))
        assert event.message_id == bytes(32)
        assert event.message_id_hex == "0x" + "00" * 32


class TestCorrelate:
    """Tests for positional pairing."""

    def test_pairs_in_original_order(self):
        dispatches = [_dispatch(destination=d) for d in (1, 2, 3)]
        ids = [_dispatch_id(b) for b in (1, 2, 3)]

        pairs = list(correlate(dispatches, ids))

        assert len(pairs) == 3
        assert [p.dispatch.destination for p in pairs] == [1, 2, 3]
        assert [p.dispatch_id.message_id[0] for p in pairs] == [1, 2, 3]

    def test_empty_streams(self):
        assert list(correlate([], [])) == []

    def test_length_mismatch_fails_before_yielding(self):
        """Test that unequal streams abort without producing any pair."""
        with pytest.raises(LogCountMismatchError):
            correlate([_dispatch(), _dispatch()], [_dispatch_id(1)])

    def test_result_is_lazy(self):
        """Test that filtering happens while iterating, not up front."""
        dispatch_filter = MagicMock()
        dispatch_filter.matches.return_value = True

        pairs = correlate([_dispatch()], [_dispatch_id(1)], dispatch_filter)
        dispatch_filter.matches.assert_not_called()

        assert len(list(pairs)) == 1
        dispatch_filter.matches.assert_called_once()


class TestDispatchFilter:
    """Tests for single-criterion, precedence-ordered filtering."""

    def test_no_filter_passes_everything(self):
        assert DispatchFilter().matches(_dispatch())

    def test_sender_filter_is_case_insensitive(self):
        dispatch_filter = DispatchFilter(sender=SENDER.upper().replace("0X", "0x"))
        assert dispatch_filter.matches(_dispatch(sender=SENDER))
        assert not dispatch_filter.matches(_dispatch(sender=OTHER_SENDER))

    def test_sender_takes_precedence(self):
        """Test that a sender filter alone decides, whatever else is set."""
        dispatch_filter = DispatchFilter(sender=SENDER, destination=1, recipient=bytes(32))
        # Destination and recipient both differ, sender matches
        assert dispatch_filter.matches(_dispatch(sender=SENDER, destination=80001))
        # Destination and recipient both match, sender differs
        assert not DispatchFilter(sender=OTHER_SENDER, destination=80001).matches(
            _dispatch(sender=SENDER, destination=80001)
        )

    def test_destination_takes_precedence_over_recipient(self):
        dispatch_filter = DispatchFilter(destination=80001, recipient=bytes(32))
        assert dispatch_filter.matches(_dispatch(destination=80001))
        assert not dispatch_filter.matches(_dispatch(destination=97))

    def test_recipient_is_canonicalized(self):
        """Test that a 20-byte address matches its 32-byte padded form."""
        dispatch_filter = DispatchFilter(recipient=bytes.fromhex("bb" * 20))
        assert dispatch_filter.matches(_dispatch(recipient=RECIPIENT_BYTES32))
        assert not dispatch_filter.matches(_dispatch(recipient=bytes(32)))

    def test_from_config(self):
        config = QueryConfig(
            origin=lookup_domain("goerli"),
            destination_domain=lookup_domain("mumbai"),
            recipient=RECIPIENT,
        )
        dispatch_filter = DispatchFilter.from_config(config)
        assert dispatch_filter.sender is None
        assert dispatch_filter.destination == 80001
        assert dispatch_filter.recipient == RECIPIENT_BYTES32


class TestDispatchQuery:
    """Tests for fetching both event streams."""

    def test_default_range_is_last_1000_blocks(self, mock_client):
        query = DispatchQuery(mock_client, MAILBOX)
        assert query.resolve_block_range(None) == (5000 - DEFAULT_LOOKBACK_BLOCKS, 5000)

    def test_default_range_clamps_at_genesis(self, mock_client):
        mock_client.block_number.return_value = 10
        query = DispatchQuery(mock_client, MAILBOX)
        assert query.resolve_block_range(None) == (0, 10)

    def test_explicit_from_block(self, mock_client):
        query = DispatchQuery(mock_client, MAILBOX)
        assert query.resolve_block_range(1234) == (1234, 5000)

    @pytest.mark.asyncio
    async def test_fetch_queries_both_events_over_same_range(self, mock_client):
        """Test that both log queries hit the Mailbox with identical bounds."""
        mock_client.logs["Dispatch"] = [make_dispatch_log()]
        mock_client.logs["DispatchId"] = [make_dispatch_id_log()]

        query = DispatchQuery(mock_client, MAILBOX)
        dispatches, ids = await query.fetch()

        assert len(dispatches) == 1 and len(ids) == 1
        calls = mock_client.get_logs.call_args_list
        assert [c.args[2] for c in calls] == ["Dispatch", "DispatchId"]
        for c in calls:
            assert c.args[0].lower() == MAILBOX
            assert c.kwargs["from_block"] == 4000
            assert c.kwargs["to_block"] == 5000

    @pytest.mark.asyncio
    async def test_fetch_rejects_mismatched_streams(self, mock_client):
        mock_client.logs["Dispatch"] = [make_dispatch_log(), make_dispatch_log(tx_byte="02")]
        mock_client.logs["DispatchId"] = [make_dispatch_id_log()]

        query = DispatchQuery(mock_client, MAILBOX)
        with pytest.raises(LogCountMismatchError):
            await query.fetch()

    @pytest.mark.asyncio
    async def test_run_applies_filter(self, mock_client):
        mock_client.logs["Dispatch"] = [
            make_dispatch_log(destination=80001),
            make_dispatch_log(destination=97, tx_byte="02"),
        ]
        mock_client.logs["DispatchId"] = [
            make_dispatch_id_log(bytes([1]) * 32),
            make_dispatch_id_log(bytes([2]) * 32, tx_byte="02"),
        ]

        query = DispatchQuery(mock_client, MAILBOX)
        pairs = list(await query.run(dispatch_filter=DispatchFilter(destination=97)))

        assert len(pairs) == 1
        assert pairs[0].dispatch_id.message_id == bytes([2]) * 32


class TestQueryDispatches:
    """End-to-end query with a mocked client."""

    @pytest.mark.asyncio
    async def test_goerli_default_range(self, mock_client):
        """Test that goerli without --from-block queries from height - 1000."""
        factory = MagicMock(return_value=mock_client)
        config = QueryConfig(origin=lookup_domain("goerli"))

        count = await query_dispatches(config, client_factory=factory)

        assert count == 0
        factory.assert_called_once_with(
            "https://goerli.infura.io/v3/9aa3d95b3bc440fa88ea12eaa4456161"
        )
        for c in mock_client.get_logs.call_args_list:
            assert c.kwargs["from_block"] == 4000

    @pytest.mark.asyncio
    async def test_recipient_filter_prints_only_matches(self, mock_client, capsys):
        """Test that only dispatches to the requested recipient are printed."""
        mock_client.logs["Dispatch"] = [
            make_dispatch_log(recipient=RECIPIENT_BYTES32),
            make_dispatch_log(recipient=bytes(32), tx_byte="02"),
            make_dispatch_log(recipient=RECIPIENT_BYTES32, tx_byte="03"),
        ]
        mock_client.logs["DispatchId"] = [
            make_dispatch_id_log(bytes([1]) * 32),
            make_dispatch_id_log(bytes([2]) * 32, tx_byte="02"),
            make_dispatch_id_log(bytes([3]) * 32, tx_byte="03"),
        ]
        config = QueryConfig(origin=lookup_domain("goerli"), recipient=RECIPIENT)

        count = await query_dispatches(config, client_factory=MagicMock(return_value=mock_client))

        output = capsys.readouterr().out
        assert count == 2
        assert output.count("Hyperlane Message ID:") == 2
        assert "0x" + "01" * 32 in output
        assert "0x" + "03" * 32 in output
        assert "0x" + "02" * 32 not in output
        assert f"Recipient: 0x{RECIPIENT_BYTES32.hex()}" in output
        assert f"contract address: {MAILBOX}" in output.lower()
