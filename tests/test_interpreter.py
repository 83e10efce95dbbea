"""Tests for the field interpreter."""

from types import SimpleNamespace

import pytest

from uac_dump.descriptors import (
    UAC1_AC_FEATURE_UNIT,
    UAC1_AC_HEADER,
    UAC1_AC_INPUT_TERMINAL,
    UAC1_AC_MIXER_UNIT,
    UAC1_AC_OUTPUT_TERMINAL,
    UAC1_AS_FORMAT_TYPE_I,
    UAC1_AS_INTERFACE,
    UAC1_AS_ISOCHRONOUS_ENDPOINT,
    UAC2_AC_CLOCK_SOURCE,
    UAC2_AC_FEATURE_UNIT,
    UAC2_AC_HEADER,
    UAC2_AS_INTERFACE,
    format_tag_name,
    render_clock_source_attributes,
    render_uac2_formats,
)
from uac_dump.formatting import format_bcd, format_field_line, format_hex
from uac_dump.interpreter import (
    TRUNCATED_WARNING,
    BitCursor,
    channel_names,
    control_states,
    decode,
    decode_descriptor,
)
from uac_dump.model import DecodeOutcome, DescriptorKind, NumberField, Revision
from uac_dump.tables import (
    FEATURE_UNIT_CONTROLS,
    UAC1_CHANNEL_NAMES,
    UAC2_CHANNEL_NAMES,
    get_terminal_type_name,
)


# UAC1 Input Terminal 1: microphone, 2 channels (L R), no strings
UAC1_MICROPHONE = bytes([0x01, 0x01, 0x02, 0x00, 0x02, 0x03, 0x00, 0x00, 0x00])


class TestHelpers:
    """Tests for the pure value helpers."""

    def test_bcd(self):
        """Test BCD release numbers."""
        assert format_bcd(0x0200) == "2.00"
        assert format_bcd(0x0110) == "1.10"

    def test_hex_width(self):
        """Test that hex values keep two digits per byte."""
        assert format_hex(0x5, 1) == "0x05"
        assert format_hex(0x24, 4) == "0x00000024"

    def test_control_states_two_bit(self):
        """Test two-bit control decoding."""
        states = control_states(0x24, 1, FEATURE_UNIT_CONTROLS, 2)
        assert states == [
            ("Mute", "not present"),
            ("Volume", "read-only"),
            ("Bass", "reserved"),
            ("Mid", "not present"),
        ]

    def test_control_states_read_write(self):
        """Test that 0b11 is read/write."""
        states = dict(control_states(0x34, 1, FEATURE_UNIT_CONTROLS, 2))
        assert states["Volume"] == "read-only"
        assert states["Bass"] == "read/write"

    def test_control_states_one_bit(self):
        """Test one-bit control decoding, limited by the name table."""
        states = control_states(0x0003, 2, FEATURE_UNIT_CONTROLS, 1)
        assert len(states) == len(FEATURE_UNIT_CONTROLS)
        assert states[0] == ("Mute", "present")
        assert states[1] == ("Volume", "present")
        assert states[2] == ("Bass", "not present")

    def test_channel_names(self):
        """Test channel configuration bits."""
        assert channel_names(3, UAC2_CHANNEL_NAMES) == ["Front Left (FL)", "Front Right (FR)"]
        assert channel_names(0, UAC1_CHANNEL_NAMES) == []

    def test_uac2_channel_table_ends_at_bit_25(self):
        """Test that only bits 0-25 of bmChannelConfig have names."""
        assert len(UAC2_CHANNEL_NAMES) == 26
        assert channel_names(1 << 25, UAC2_CHANNEL_NAMES) == ["Back Left of Center (BLC)"]
        assert channel_names(1 << 26, UAC2_CHANNEL_NAMES) == []

    def test_unknown_terminal_type(self):
        """Test that unknown terminal types are undefined."""
        assert get_terminal_type_name(0xFFFF) == "undefined"
        assert get_terminal_type_name(0x0301) == "Speaker"

    def test_bit_cursor(self):
        """Test MSB-first bit reads."""
        cursor = BitCursor(bytes([0b10110000]))
        assert cursor.read(1) == 1
        assert cursor.read(2) == 0b01
        assert cursor.read(1) == 1
        assert cursor.remaining == 4
        with pytest.raises(ValueError):
            cursor.read(5)


class TestInputTerminal:
    """Tests decoding a UAC 1.0 input terminal end to end."""

    @pytest.fixture
    def result(self):
        return decode(UAC1_AC_INPUT_TERMINAL, UAC1_MICROPHONE)

    def test_complete(self, result):
        """Test the outcome and field order."""
        assert result.outcome == DecodeOutcome.COMPLETE
        assert result.is_complete
        assert [f.label for f in result.fields] == [
            "bTerminalID",
            "wTerminalType",
            "bAssocTerminal",
            "bNrChannels",
            "wChannelConfig",
            "iChannelNames",
            "iTerminal",
        ]

    def test_terminal_type(self, result):
        """Test terminal type rendering."""
        field = result.get_field("wTerminalType")
        assert field.value == 0x0201
        assert field.text == "0x0201"
        assert field.annotation == "Microphone"
        assert "wTerminalType" + " " * 8 + "0x0201 Microphone" in result.lines

    def test_channel_config(self, result):
        """Test that set channels are listed beneath the value."""
        field = result.get_field("wChannelConfig")
        assert field.text == "0x0003"
        assert field.details == ["Left Front (L)", "Right Front (R)"]
        index = result.lines.index(format_field_line("wChannelConfig", "0x0003"))
        assert result.lines[index + 1] == "  Left Front (L)"
        assert result.lines[index + 2] == "  Right Front (R)"

    def test_layout(self, result):
        """Test label and value columns."""
        assert result.lines[0] == "bTerminalID" + " " * 14 + "1"
        assert result.lines[2] == format_field_line("bAssocTerminal", "0x00")

    def test_indent(self):
        """Test that every line is indented, detail lines one step deeper."""
        result = decode(UAC1_AC_INPUT_TERMINAL, UAC1_MICROPHONE, indent=2)
        assert result.lines[0].startswith("    bTerminalID")
        assert "      Left Front (L)" in result.lines

    def test_deterministic(self):
        """Test that decoding the same bytes twice gives the same report."""
        first = decode(UAC1_AC_INPUT_TERMINAL, UAC1_MICROPHONE)
        second = decode(UAC1_AC_INPUT_TERMINAL, UAC1_MICROPHONE)
        assert first.lines == second.lines

    @pytest.mark.parametrize("length,decoded", [
        (0, 0), (1, 1), (2, 1), (3, 2), (4, 3), (5, 4), (6, 4), (7, 5), (8, 6),
    ])
    def test_truncated(self, length, decoded):
        """Test that a short buffer keeps the fields that fit and warns."""
        result = decode(UAC1_AC_INPUT_TERMINAL, UAC1_MICROPHONE[:length])
        assert result.outcome == DecodeOutcome.TRUNCATED
        assert len(result.fields) == decoded
        assert result.lines[-1] == TRUNCATED_WARNING
        assert result.message == TRUNCATED_WARNING

    def test_extra_bytes_ignored(self):
        """Test that trailing bytes past the table are not an error."""
        result = decode(UAC1_AC_INPUT_TERMINAL, UAC1_MICROPHONE + b"\xff\xff")
        assert result.is_complete
        assert len(result.fields) == 7

    def test_custom_terminal_names(self):
        """Test that terminal type names can be supplied by the caller."""
        result = decode(UAC1_AC_INPUT_TERMINAL, UAC1_MICROPHONE,
                        terminal_names=lambda code: f"type {code}")
        assert result.get_field("wTerminalType").annotation == "type 513"


class TestStrings:
    """Tests for string descriptor lookup."""

    # UAC1 Output Terminal 3: unknown type, source 2, iTerminal 5
    DATA = bytes([0x03, 0xFF, 0xFF, 0x00, 0x02, 0x05])

    def test_resolved(self):
        """Test that a resolved string follows the index."""
        result = decode(UAC1_AC_OUTPUT_TERMINAL, self.DATA, strings={5: "Speaker out"}.get)
        field = result.get_field("iTerminal")
        assert field.text == "5"
        assert field.annotation == "Speaker out"
        assert result.get_field("wTerminalType").annotation == "undefined"

    def test_no_lookup(self):
        """Test that without a lookup only the index is shown."""
        result = decode(UAC1_AC_OUTPUT_TERMINAL, self.DATA)
        assert result.get_field("iTerminal").annotation == ""
        assert result.lines[-1] == format_field_line("iTerminal", "5")

    def test_failing_lookup(self):
        """Test that a failing lookup does not stop decoding."""
        def strings(index):
            raise OSError("device unplugged")

        result = decode(UAC1_AC_OUTPUT_TERMINAL, self.DATA, strings=strings)
        assert result.is_complete
        assert result.get_field("iTerminal").annotation == ""


class TestArrays:
    """Tests for counted, free and matrix arrays."""

    def test_counted_array(self):
        """Test an array sized by a prior field."""
        data = bytes([0x00, 0x01, 0x28, 0x00, 0x02, 0x01, 0x02])
        result = decode(UAC1_AC_HEADER, data)
        assert result.is_complete
        assert result.get_field("bcdADC").text == "1.00"
        assert result.get_field("wTotalLength").text == "0x0028"
        assert result.get_field("baInterfaceNr(0)").value == 1
        assert result.get_field("baInterfaceNr(1)").value == 2

    def test_counted_array_truncated(self):
        """Test that an array running out of data is truncated."""
        data = bytes([0x00, 0x01, 0x28, 0x00, 0x03, 0x01])
        result = decode(UAC1_AC_HEADER, data)
        assert result.outcome == DecodeOutcome.TRUNCATED
        assert result.get_field("baInterfaceNr(0)") is not None
        assert result.get_field("baInterfaceNr(1)") is None

    def test_free_array_sized_by_field(self):
        """Test UAC1 feature unit controls, one entry per channel."""
        data = bytes([0x02, 0x01, 0x01, 0x01, 0x02, 0x02, 0x00])
        result = decode(UAC1_AC_FEATURE_UNIT, data)
        assert result.is_complete
        labels = [f.label for f in result.fields]
        assert labels == [
            "bUnitID", "bSourceID", "bControlSize",
            "bmaControls(0)", "bmaControls(1)", "bmaControls(2)",
            "iFeature",
        ]
        assert result.get_field("bmaControls(0)").details == ["Mute Control"]
        assert result.get_field("bmaControls(1)").details == ["Volume Control"]

    def test_free_array_empty(self):
        """Test that a zero control size gives no entries."""
        result = decode(UAC1_AC_FEATURE_UNIT, bytes([0x02, 0x01, 0x00, 0x00]))
        assert result.is_complete
        assert [f.label for f in result.fields][-1] == "iFeature"
        assert result.get_field("bmaControls(0)") is None

    def test_two_bit_controls(self):
        """Test UAC2 feature unit control states."""
        data = bytes([0x02, 0x01]) + bytes([0x0F, 0, 0, 0]) + bytes([0x34, 0, 0, 0]) + b"\x00"
        result = decode(UAC2_AC_FEATURE_UNIT, data)
        assert result.is_complete
        assert result.get_field("bmaControls(0)").details == [
            "Mute Control (read/write)",
            "Volume Control (read/write)",
        ]
        assert result.get_field("bmaControls(1)").details == [
            "Volume Control (read-only)",
            "Bass Control (read/write)",
        ]

    def test_no_controls(self):
        """Test that an empty control bitmap says none."""
        data = bytes([0x00, 0x02, 0x01, 0x40, 0x00, 0x00])
        result = decode(UAC2_AC_HEADER, data)
        assert result.get_field("bcdADC").text == "2.00"
        field = result.get_field("bmControls")
        assert field.annotation == "none"
        assert field.details == []

    def test_mixer_matrix(self):
        """Test a bit-packed mixer control matrix."""
        data = bytes([0x01, 0x02, 0x01, 0x02, 0x02, 0x03, 0x00, 0x00, 0x90, 0x00])
        result = decode(UAC1_AC_MIXER_UNIT, data)
        assert result.is_complete
        field = result.get_field("bmControls")
        assert field.text == "0x90"
        assert field.details == ["row 0: 1 0", "row 1: 0 1"]
        assert result.get_field("iMixer").value == 0

    def test_mixer_matrix_truncated(self):
        """Test a matrix with too few bytes left."""
        data = bytes([0x01, 0x03, 0x01, 0x02, 0x03, 0x03, 0x03, 0x00, 0x00])
        result = decode(UAC1_AC_MIXER_UNIT, data)
        assert result.outcome == DecodeOutcome.TRUNCATED
        assert result.get_field("bmControls") is None

    def test_sample_frequencies(self):
        """Test discrete sampling frequencies of a Type I format."""
        data = bytes([0x01, 0x02, 0x02, 0x10, 0x02, 0x44, 0xAC, 0x00, 0x80, 0xBB, 0x00])
        result = decode(UAC1_AS_FORMAT_TYPE_I, data)
        assert result.is_complete
        assert result.get_field("tSamFreq(0)").value == 44100
        assert result.get_field("tSamFreq(1)").annotation == "Hz"
        assert format_field_line("tSamFreq(1)", "48000", "Hz") in result.lines


class TestCustomRenderers:
    """Tests for the fields with irregular encodings."""

    def test_clock_source_attributes(self):
        """Test clock type and SOF synchronization."""
        assert render_clock_source_attributes(0x00) == ("External clock", [])
        assert render_clock_source_attributes(0x05) == (
            "Internal fixed clock (synchronized to SOF)", [])
        assert render_clock_source_attributes(0x03)[0] == "Internal programmable clock"

    def test_clock_source_decode(self):
        """Test a full UAC2 clock source."""
        result = decode(UAC2_AC_CLOCK_SOURCE, bytes([0x05, 0x01, 0x07, 0x00, 0x00]))
        assert result.get_field("bmAttributes").annotation == "Internal fixed clock"
        assert result.get_field("bmControls").details == [
            "Clock Frequency Control (read/write)",
            "Clock Validity Control (read-only)",
        ]

    @pytest.mark.parametrize("tag,name", [
        (0x0001, "PCM"),
        (0x0005, "MULAW"),
        (0x1001, "MPEG"),
        (0x2001, "IEC1937_AC-3"),
        (0x1005, "undefined"),
        (0x3000, "undefined"),
    ])
    def test_format_tag(self, tag, name):
        """Test wFormatTag lookup across the three format tables."""
        assert format_tag_name(tag) == name

    def test_format_tag_decode(self):
        """Test a UAC1 AS general descriptor."""
        result = decode(UAC1_AS_INTERFACE, bytes([0x01, 0x01, 0x01, 0x00]))
        assert result.get_field("bDelay").annotation == "frames"
        field = result.get_field("wFormatTag")
        assert field.text == "0x0001"
        assert field.annotation == "PCM"

    def test_uac2_formats(self):
        """Test bmFormats lines."""
        assert render_uac2_formats(0) == ("none", [])
        assert render_uac2_formats(0x80000001) == ("", ["PCM", "TYPE_I_RAW_DATA"])

    def test_uac2_formats_decode(self):
        """Test formats and channels of a UAC2 AS general descriptor."""
        data = bytes([0x01, 0x00, 0x01, 0x05, 0, 0, 0, 0x02, 0x03, 0, 0, 0, 0x00])
        result = decode(UAC2_AS_INTERFACE, data)
        assert result.is_complete
        assert result.get_field("bmFormats").details == ["PCM", "IEEE_FLOAT"]
        assert result.get_field("bmChannelConfig").details == [
            "Front Left (FL)", "Front Right (FR)"]

    def test_endpoint(self):
        """Test endpoint attributes and lock delay units."""
        result = decode(UAC1_AS_ISOCHRONOUS_ENDPOINT, bytes([0x81, 0x01, 0x02, 0x00]))
        assert result.get_field("bmAttributes").details == [
            "Sampling Frequency", "MaxPacketsOnly"]
        assert result.get_field("bLockDelayUnits").annotation == "Milliseconds"
        assert result.get_field("wLockDelay").value == 2

    def test_lock_delay_out_of_range(self):
        """Test a lock delay unit past the end of the table."""
        result = decode(UAC1_AS_ISOCHRONOUS_ENDPOINT, bytes([0x00, 0x07, 0x00, 0x00]))
        assert result.get_field("bLockDelayUnits").annotation == "undefined"
        assert result.get_field("bmAttributes").annotation == "none"


class TestDecodeDescriptor:
    """Tests for decoding by kind and revision."""

    def test_lookup_and_decode(self):
        """Test that the table for the revision is used."""
        result = decode_descriptor(DescriptorKind.AC_INPUT_TERMINAL, Revision.UAC_1,
                                   UAC1_MICROPHONE)
        assert result.title == "UAC1 Input Terminal"
        assert result.is_complete

    def test_unsupported_revision(self):
        """Test a kind the revision does not define."""
        result = decode_descriptor(DescriptorKind.AC_CLOCK_SOURCE, 1, b"\x05\x01")
        assert result.outcome == DecodeOutcome.UNSUPPORTED_REVISION
        assert result.fields == []
        assert result.lines == [
            "Unsupported descriptor: Clock Source is not implemented for UAC 1"]

    def test_uac3_unsupported(self):
        """Test that UAC 3.0 descriptors are reported, not decoded."""
        result = decode_descriptor(DescriptorKind.AC_HEADER, Revision.UAC_3, b"\x00\x03",
                                   indent=1)
        assert result.outcome == DecodeOutcome.UNSUPPORTED_REVISION
        assert result.lines[0].startswith("  Unsupported descriptor: Header")


class TestSchemaErrors:
    """Tests for tables that bypass construction-time checks."""

    def test_missing_dependency(self):
        """Test that a missing length field stops decoding with an error."""
        table = SimpleNamespace(
            name="UAC1 Broken",
            revision=Revision.UAC_1,
            fields=(
                NumberField("bUnitID"),
                NumberField("bmControls", size_field="bControlSize"),
            ),
        )
        result = decode(table, bytes([0x01, 0x02, 0x03]))
        assert result.outcome == DecodeOutcome.SCHEMA_ERROR
        assert [f.label for f in result.fields] == ["bUnitID"]
        assert result.lines[-1].startswith("Error: UAC1 Broken: field 'bmControls'")
        assert "bControlSize" in result.message
