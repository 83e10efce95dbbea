"""Tests for the command-line interface."""

import pytest
from pathlib import Path

from uac_dump import __version__
from uac_dump.cli import create_parser, main, parse_strings
from uac_dump.parser import ParseError


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestArguments:
    """Tests for option parsing."""

    def test_defaults(self):
        """Test default option values."""
        args = create_parser().parse_args([])
        assert args.file is None
        assert args.kind is None
        assert args.revision == 1
        assert args.string == []

    def test_kind_choices(self):
        """Test that kinds are given by lowercase name."""
        args = create_parser().parse_args(["-k", "ac_clock_source", "-r", "2"])
        assert args.kind == "ac_clock_source"
        assert args.revision == 2

    def test_bad_revision(self):
        """Test that unknown revisions are rejected."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["-r", "4"])

    def test_strings(self):
        """Test INDEX=TEXT parsing."""
        assert parse_strings(["5=Speaker", "7=Line=In"]) == {5: "Speaker", 7: "Line=In"}
        with pytest.raises(ParseError):
            parse_strings(["Speaker"])


class TestMain:
    """Tests for running the tool."""

    def test_configuration(self, capsys):
        """Test dumping a configuration from a hex file."""
        assert main([str(FIXTURES_DIR / "uac2_clock_source.hex")]) == 0
        out = capsys.readouterr().out
        assert "Interface 0 (alternate 0): AudioControl, UAC 2" in out
        assert "5 descriptor(s), 5 complete" in out

    def test_single_descriptor(self, tmp_path, capsys):
        """Test decoding one descriptor by kind with a string."""
        path = tmp_path / "terminal.hex"
        path.write_text("03 01 03 00 02 05\n")
        status = main(["-k", "ac_output_terminal", "-S", "5=Line Out", str(path)])
        assert status == 0
        out = capsys.readouterr().out
        assert "Speaker" in out
        assert "Line Out" in out

    def test_unsupported_kind(self, tmp_path, capsys):
        """Test a kind the revision does not define."""
        path = tmp_path / "clock.hex"
        path.write_text("05 01 07 00 00")
        assert main(["-k", "ac_clock_source", str(path)]) == 0
        assert "not implemented for UAC 1" in capsys.readouterr().out

    def test_binary(self, tmp_path, capsys):
        """Test raw binary input with an assumed interface."""
        path = tmp_path / "header.bin"
        path.write_bytes(bytes([0x09, 0x24, 0x01, 0x00, 0x02, 0x01, 0x40, 0x00, 0x00]))
        status = main(["--binary", "-i", "control", "-r", "2", str(path)])
        assert status == 0
        out = capsys.readouterr().out
        assert "bcdADC" in out
        assert "2.00" in out

    def test_parse_error(self, tmp_path, capsys):
        """Test that bad hex exits with an error."""
        path = tmp_path / "bad.hex"
        path.write_text("09 0g")
        assert main([str(path)]) == 1
        assert "Parse error:" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        """Test that a missing file exits with status 1."""
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "missing.hex")])
        assert excinfo.value.code == 1

    def test_empty_input(self, tmp_path, capsys):
        """Test an input holding only comments."""
        path = tmp_path / "empty.hex"
        path.write_text("# nothing here\n")
        assert main([str(path)]) == 1
        assert "Empty input" in capsys.readouterr().err

    def test_version(self, capsys):
        """Test --version."""
        assert main(["--version"]) == 0
        assert capsys.readouterr().out.strip() == f"uac-dump {__version__}"
