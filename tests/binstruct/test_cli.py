"""Tests for the command line field dumper."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from binstruct.__main__ import (
    dump_fields,
    format_value,
    load_data,
    main,
    resolve_field,
    setup_logging,
)
from binstruct.decoder import Decoder


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Iterator[None]:
    """Remove handlers that `main` installs on the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestFormatValue:
    """Tests for value rendering."""

    def test_bytes_as_hex(self) -> None:
        """Blocks print as hex."""
        assert format_value(b"\x01\xff") == "01ff"

    def test_empty_bytes(self) -> None:
        """Empty blocks are marked explicitly."""
        assert format_value(b"") == "(empty)"

    def test_text_repr(self) -> None:
        """Strings print quoted."""
        assert format_value("a b") == "'a b'"

    def test_numbers(self) -> None:
        """Integers and booleans print plainly."""
        assert format_value(-5) == "-5"
        assert format_value(True) == "True"


class TestLoadData:
    """Tests for reading the input buffer."""

    def test_hex_whitespace_ignored(self) -> None:
        """Spaces between hex digits are allowed."""
        assert load_data("01 ff", None) == b"\x01\xff"

    def test_file_wins(self, tmp_path: Path) -> None:
        """A file path is read when given."""
        path = tmp_path / "record.bin"
        path.write_bytes(b"\x07")
        assert load_data(None, path) == b"\x07"

    def test_no_source(self) -> None:
        """Missing both sources is a ValueError, not an assertion."""
        with pytest.raises(ValueError, match="hex string or a file path"):
            load_data(None, None)


class TestResolveField:
    """Tests for mapping field names to decode calls."""

    def test_fixed_length_block(self) -> None:
        """block:N binds the length."""
        decoder = Decoder(b"abcd")
        assert resolve_field(decoder, "block:3")() == b"abc"

    def test_named_operation(self) -> None:
        """Other names select decode_<name>."""
        decoder = Decoder(b"\x81\x82")
        assert resolve_field(decoder, "u16_le")() == 0x8281

    @pytest.mark.parametrize("field", ["u24", "block", "block:x", "position"])
    def test_unknown(self, field: str) -> None:
        """Unknown names and malformed lengths are rejected."""
        with pytest.raises(ValueError):
            resolve_field(Decoder(b""), field)


class TestDumpFields:
    """Tests for decoding a field list."""

    def test_lines(self) -> None:
        """Each line has the start offset, the field and the value."""
        decoder = Decoder(bytes.fromhex("81828384e58e26") + b"hi\x00" + b"\x02ab")
        lines = dump_fields(decoder, ["u32_be", "uleb128", "cstring", "block_u8"])
        assert [line.split() for line in lines] == [
            ["0", "u32_be", str(0x81828384)],
            ["4", "uleb128", "624485"],
            ["7", "cstring", "'hi'"],
            ["10", "block_u8", "6162"],
        ]

    def test_unknown_field_before_decoding(self) -> None:
        """A bad field name fails before anything is read."""
        decoder = Decoder(b"\x01")
        with pytest.raises(ValueError):
            dump_fields(decoder, ["u8", "nope"])
        assert decoder.position == 0


class TestMain:
    """Tests for the CLI entry point."""

    def test_hex_input(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Fields decoded from a hex string are printed in order."""
        main(["--no-color", "--hex", "e5 8e 26 9b f1 59", "uleb128", "sleb128"])
        out = capsys.readouterr().out.splitlines()
        assert out[0].split() == ["0", "uleb128", "624485"]
        assert out[1].split() == ["3", "sleb128", "-624485"]

    def test_file_input(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Fields can be decoded from a file."""
        path = tmp_path / "record.bin"
        path.write_bytes(b"\x00\x01test")
        main(["--no-color", "--file", str(path), "bool", "bool", "cstring"])
        out = capsys.readouterr().out.splitlines()
        assert [line.split()[-1] for line in out] == ["False", "True", "'test'"]

    def test_encoding_option(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--encoding selects the cstring text encoding."""
        main(["--no-color", "--hex", "e900", "--encoding", "latin-1", "cstring"])
        assert capsys.readouterr().out.split()[-1] == "'é'"

    def test_decode_failure_exits_1(self, caplog: pytest.LogCaptureFixture) -> None:
        """A short buffer is logged and exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--no-color", "--hex", "0574657374", "block_u8"])
        assert exc_info.value.code == 1
        assert "Decoding failed at offset 1" in caplog.text

    @pytest.mark.parametrize(
        "argv",
        [
            ["--hex", "zz", "u8"],
            ["--hex", "00", "nope"],
            ["--hex", "00", "--encoding", "no-such-codec", "cstring"],
            ["u8"],
        ],
    )
    def test_usage_errors_exit_2(self, argv: list[str]) -> None:
        """Malformed input, unknown fields and missing sources are usage errors."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--no-color", *argv])
        assert exc_info.value.code == 2

    def test_verbose_logs_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        """--verbose enables debug logging of each field."""
        main(["--no-color", "-v", "--hex", "01", "u8"])
        assert "Decoded u8 at 0, cursor now 1" in caplog.text


class TestSetupLogging:
    """Tests for logging configuration."""

    @pytest.mark.parametrize(("verbose", "level"), [(False, logging.INFO), (True, logging.DEBUG)])
    def test_level(self, verbose: bool, level: int) -> None:
        """Verbosity selects the root level."""
        setup_logging(verbose, no_color=True)
        assert logging.getLogger().level == level

    def test_colored_formatter(self) -> None:
        """Colored output wraps the level name in ANSI codes."""
        setup_logging(no_color=False)
        formatter = logging.getLogger().handlers[-1].formatter
        assert formatter is not None
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
        text = formatter.format(record)
        assert "\x1b[" in text
        assert text.endswith("hello")
