"""Tests for command encoding and response decoding."""

import pytest

from mpdox.mpd import Ack, Command, Filter, MpdDecodeError
from mpdox.mpd.protocol import (
    decode_batch,
    decode_response,
    encode_batch,
    encode_command,
    parse_ack,
    parse_greeting,
    parse_pair,
    quote_arg,
    split_records,
    values_of,
)


class TestEncoding:
    """Test command serialization."""

    def test_plain_arguments_are_not_quoted(self) -> None:
        """Simple tokens go out as they are."""
        assert encode_command(Command("playid", ("12",))) == "playid 12\n"

    def test_whitespace_and_empty_arguments_are_quoted(self) -> None:
        """Arguments the server would split, or lose, are double-quoted."""
        assert quote_arg("Abbey Road") == '"Abbey Road"'
        assert quote_arg("") == '""'

    def test_quotes_and_backslashes_are_escaped(self) -> None:
        """Embedded quote and backslash characters are escaped inside quotes."""
        assert quote_arg('say "hi"') == '"say \\"hi\\""'
        assert quote_arg("a\\b") == '"a\\\\b"'

    def test_filters_are_flattened_after_leading_arguments(self) -> None:
        """Tag filters become alternating tag / value arguments."""
        command = Command.with_filters("list", [Filter("Artist", "The Band")], "Album")
        assert encode_command(command) == 'list Album Artist "The Band"\n'

    def test_invalid_verb_rejected(self) -> None:
        """A verb with whitespace can't be encoded."""
        with pytest.raises(ValueError):
            encode_command(Command("play id"))

    def test_batch_wraps_commands_in_a_command_list(self) -> None:
        """Batches use the list_OK flavour of command lists."""
        payload = encode_batch([Command("status"), Command("currentsong")])
        assert payload == "command_list_ok_begin\nstatus\ncurrentsong\ncommand_list_end\n"

    def test_password_masked_when_rendered(self) -> None:
        """Rendering a password command for display hides its argument; the wire form keeps it."""
        command = Command("password", ("hunter2",))
        assert str(command) == "password ***"
        assert encode_command(command) == "password hunter2\n"
        assert str(Command("playid", ("12",))) == "playid 12"


class TestDecoding:
    """Test single-response decoding."""

    def test_pairs_in_server_order(self) -> None:
        """Every body line becomes exactly one pair."""
        lines = ["volume: 40", "state: play", "OK"]
        assert decode_response(lines) == [("volume", "40"), ("state", "play")]

    def test_empty_response(self) -> None:
        """A bare OK is an empty result."""
        assert decode_response(["OK"]) == []

    def test_values_may_contain_separator(self) -> None:
        """Only the first ': ' splits field from value."""
        assert parse_pair("Title: Part 1: The Start") == ("Title", "Part 1: The Start")

    def test_ack_line_decoded(self) -> None:
        """An ACK terminator yields the exact code, index, verb and message."""
        reply = decode_response(["ACK [50@0] {lsinfo} No such directory"])
        assert reply == Ack(code=50, index=0, command="lsinfo", message="No such directory")

    def test_malformed_line_raises(self) -> None:
        """Lines outside the field: value grammar are never silently dropped."""
        with pytest.raises(MpdDecodeError) as excinfo:
            decode_response(["volume: 40", "garbage", "OK"])
        assert excinfo.value.line == "garbage"

    def test_unterminated_response_raises(self) -> None:
        """A response without OK/ACK is incomplete."""
        with pytest.raises(MpdDecodeError):
            decode_response(["volume: 40"])

    def test_malformed_ack_raises(self) -> None:
        """ACK lines must follow the [code@index] {verb} grammar."""
        with pytest.raises(MpdDecodeError):
            parse_ack("ACK something went wrong")

    def test_ack_str(self) -> None:
        """Acks render back to the server's format."""
        ack = parse_ack("ACK [2@1] {add} wrong number of arguments")
        assert str(ack) == "[2@1] {add} wrong number of arguments"

    def test_greeting(self) -> None:
        """The handshake line carries the protocol version."""
        assert parse_greeting("OK MPD 0.23.5") == "0.23.5"
        with pytest.raises(MpdDecodeError):
            parse_greeting("HELLO")


class TestBatchDecoding:
    """Test command-list responses."""

    def test_results_split_on_list_ok(self) -> None:
        """Each command's output is delimited by list_OK."""
        lines = ["state: stop", "list_OK", "list_OK", "playlist: 3", "list_OK", "OK"]
        assert decode_batch(lines, 3) == [[("state", "stop")], [], [("playlist", "3")]]

    def test_failure_reports_failing_index(self) -> None:
        """A failure at command k reports index k and nothing as succeeded."""
        lines = ["list_OK", "list_OK", "ACK [50@2] {add} No such song"]
        reply = decode_batch(lines, 4)
        assert isinstance(reply, Ack)
        assert reply.index == 2
        assert reply.command == "add"

    def test_result_count_must_match(self) -> None:
        """Fewer list_OK markers than commands is a decode error."""
        with pytest.raises(MpdDecodeError):
            decode_batch(["list_OK", "OK"], 2)


class TestRecords:
    """Test record grouping."""

    def test_repeated_field_starts_new_record(self) -> None:
        """Without delimiters, a repeated field name is a record boundary."""
        pairs = [("playlist", "a"), ("Last-Modified", "x"), ("playlist", "b")]
        assert split_records(pairs) == [
            [("playlist", "a"), ("Last-Modified", "x")],
            [("playlist", "b")],
        ]

    def test_delimiters_keep_multi_valued_tags_together(self) -> None:
        """With delimiters, repeated tags stay inside one record."""
        pairs = [
            ("file", "a.flac"),
            ("Artist", "One"),
            ("Artist", "Two"),
            ("file", "b.flac"),
        ]
        records = split_records(pairs, delimiters=("file",))
        assert len(records) == 2
        assert records[0] == [("file", "a.flac"), ("Artist", "One"), ("Artist", "Two")]

    def test_empty_stream(self) -> None:
        """No pairs, no records."""
        assert split_records([]) == []

    def test_values_of_is_case_insensitive(self) -> None:
        """'list album' answers with 'Album:' lines."""
        pairs = [("Album", "A"), ("Album", "B")]
        assert values_of(pairs, "album") == ["A", "B"]
