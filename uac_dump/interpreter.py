"""
Field interpreter for USB Audio Class descriptors.

This module walks a descriptor table against the raw bytes of one descriptor
(with the bLength, bDescriptorType and bDescriptorSubtype header already
stripped) and renders every field as text. Malformed data never raises: a
short buffer ends the walk with a truncation warning and whatever was
rendered so far.
"""

import logging
from typing import Callable, Mapping, Optional, Sequence, Union

from .formatting import format_bcd, format_field_line, format_hex, indent_text
from .model import (
    BCDField,
    BitmapField,
    ChannelConfigField,
    ConstantField,
    ControlBitmapField,
    CustomField,
    DecodeContext,
    DecodedField,
    DecodeOutcome,
    DecodeResult,
    DescriptorKind,
    DescriptorTable,
    FieldSpec,
    NumberStringsField,
    NumberSuffixField,
    Revision,
    SchemaDependencyError,
    StringIndexField,
    TerminalTypeField,
)
from .registry import lookup
from .tables import CONTROL_PRESENCE, CONTROL_STATES, UNDEFINED, get_terminal_type_name

_logger = logging.getLogger(__name__)

# Resolves a string descriptor index to its text; None if unavailable
StringLookup = Callable[[int], Optional[str]]

TRUNCATED_WARNING = "Warning: Length insufficient for descriptor type."

__all__ = [
    "BitCursor",
    "FieldInterpreter",
    "StringLookup",
    "channel_names",
    "control_states",
    "decode",
    "decode_descriptor",
    "format_bcd",
]


class BitCursor:
    """Reads bit-packed cells, most significant bit of each byte first."""

    def __init__(self, data: bytes):
        self.data = data
        self.position = 0

    @property
    def remaining(self) -> int:
        """Get the number of unread bits."""
        return len(self.data) * 8 - self.position

    def read(self, bits: int) -> int:
        """Read the next ``bits`` bits as an unsigned integer."""
        if bits > self.remaining:
            raise ValueError(f"only {self.remaining} bits left, {bits} requested")
        value = 0
        for _ in range(bits):
            byte = self.data[self.position // 8]
            value = (value << 1) | ((byte >> (7 - self.position % 8)) & 1)
            self.position += 1
        return value


def control_states(value: int, size: int, controls: Sequence[str],
                   bits_per_control: int) -> list[tuple[str, str]]:
    """
    Split a control bitmap into per-control states.

    Args:
        value: The bitmap
        size: Width of the bitmap in bytes
        controls: Control names, one per group of bits starting at bit 0
        bits_per_control: 1 (UAC 1.0) or 2 (UAC 2.0)

    Returns:
        (control name, state) pairs, stopping at whichever of the name table
        or the bitmap runs out first
    """
    states = CONTROL_PRESENCE if bits_per_control == 1 else CONTROL_STATES
    mask = (1 << bits_per_control) - 1
    result = []
    for index, name in enumerate(controls):
        if (index + 1) * bits_per_control > size * 8:
            break
        result.append((name, states[(value >> (index * bits_per_control)) & mask]))
    return result


def channel_names(value: int, channels: Sequence[str]) -> list[str]:
    """Get the names of the channels set in a channel configuration bitmap."""
    return [name for bit, name in enumerate(channels) if value & (1 << bit)]


def _set_bit_names(value: int, names: Mapping[int, str]) -> list[str]:
    return [names[bit] for bit in sorted(names) if value & (1 << bit)]


class FieldInterpreter:
    """Decodes one descriptor according to its table."""

    def __init__(self, table: DescriptorTable, data: bytes, indent: int = 0,
                 strings: Optional[StringLookup] = None,
                 terminal_names: Callable[[int], str] = get_terminal_type_name):
        self.table = table
        self.context = DecodeContext(bytes(data))
        self.indent = indent
        self.strings = strings
        self.terminal_names = terminal_names
        self.result = DecodeResult(title=table.name)

    @property
    def bits_per_control(self) -> int:
        """Width of one control in bmControls bitmaps for this revision."""
        return 1 if self.table.revision == Revision.UAC_1 else 2

    def decode(self) -> DecodeResult:
        """Decode every field in table order until done or out of data."""
        fields = self.table.fields
        for position, spec in enumerate(fields):
            try:
                complete = self._decode_field(spec, fields[position + 1:])
            except SchemaDependencyError as e:
                _logger.error("Schema error: %s", e)
                self._stop(DecodeOutcome.SCHEMA_ERROR, f"Error: {e}")
                break
            if not complete:
                self._stop(DecodeOutcome.TRUNCATED, TRUNCATED_WARNING)
                break
        return self.result

    def _stop(self, outcome: DecodeOutcome, message: str) -> None:
        self.result.outcome = outcome
        self.result.message = message
        self.result.lines.append(indent_text(message, self.indent))

    def _value_of(self, spec: FieldSpec, name: str) -> int:
        """Get the decoded value of a field ``spec`` depends on."""
        try:
            return self.context.values[name]
        except KeyError:
            raise SchemaDependencyError(self.table.name, spec.name, name) from None

    def _entry_count(self, spec: FieldSpec, following: Sequence[FieldSpec], size: int) -> int:
        """Get the number of entries in a one-dimensional array field."""
        if spec.array.length_field:
            return self._value_of(spec, spec.array.length_field)
        if size == 0:
            return 0
        # No length field: the array takes what the fixed fields after it leave
        trailing = sum(f.size for f in following if f.is_fixed_size)
        return max(self.context.remaining - trailing, 0) // size

    def _decode_field(self, spec: FieldSpec, following: Sequence[FieldSpec]) -> bool:
        """Decode one table entry; returns False if the data ran out."""
        if spec.size_field:
            size = self._value_of(spec, spec.size_field)
        else:
            size = spec.size

        if spec.array is None:
            return self._decode_entry(spec, spec.name, size)
        if spec.array.is_matrix:
            return self._decode_matrix(spec)

        for index in range(self._entry_count(spec, following, size)):
            if not self._decode_entry(spec, f"{spec.name}({index})", size):
                return False
        return True

    def _decode_entry(self, spec: FieldSpec, label: str, size: int) -> bool:
        if self.context.remaining < size:
            return False
        value = self.context.read(size)
        if spec.array is None:
            self.context.values[spec.name] = value
        self._emit(self._render(spec, label, value, size))
        return True

    def _decode_matrix(self, spec: FieldSpec) -> bool:
        """Decode a bit-packed rows x columns matrix."""
        rows = self._value_of(spec, spec.array.length_field)
        columns = self._value_of(spec, spec.array.second_length_field)
        bits = spec.array.bits_per_cell
        size = (rows * columns * bits + 7) // 8
        if self.context.remaining < size:
            return False

        raw = self.context.read_bytes(size)
        decoded = DecodedField(label=spec.name, value=int.from_bytes(raw, "big"),
                               size=size, text=f"0x{raw.hex()}" if raw else "none")
        if columns:
            cursor = BitCursor(raw)
            for row in range(rows):
                cells = [str(cursor.read(bits)) for _ in range(columns)]
                decoded.details.append(f"row {row}: {' '.join(cells)}")
        self._emit(decoded)
        return True

    def _render(self, spec: FieldSpec, label: str, value: int, size: int) -> DecodedField:
        """Render one value according to the field's type."""
        decoded = DecodedField(label=label, value=value, size=size, text=str(value))

        if isinstance(spec, BCDField):
            decoded.text = format_bcd(value)
        elif isinstance(spec, ConstantField):
            decoded.text = format_hex(value, size)
        elif isinstance(spec, BitmapField):
            decoded.text = format_hex(value, size)
            if spec.names is not None:
                self._list_names(decoded, _set_bit_names(value, spec.names))
        elif isinstance(spec, ChannelConfigField):
            decoded.text = format_hex(value, size)
            self._list_names(decoded, channel_names(value, spec.channels))
        elif isinstance(spec, ControlBitmapField):
            decoded.text = format_hex(value, size)
            self._list_controls(decoded, spec.controls)
        elif isinstance(spec, StringIndexField):
            decoded.annotation = self._resolve_string(value)
        elif isinstance(spec, NumberSuffixField):
            decoded.annotation = spec.suffix
        elif isinstance(spec, NumberStringsField):
            decoded.annotation = spec.strings[value] if value < len(spec.strings) else UNDEFINED
        elif isinstance(spec, TerminalTypeField):
            decoded.text = format_hex(value, size)
            decoded.annotation = self.terminal_names(value)
        elif isinstance(spec, CustomField):
            decoded.text = format_hex(value, size)
            decoded.annotation, decoded.details = spec.render(value)

        return decoded

    @staticmethod
    def _list_names(decoded: DecodedField, names: list[str]) -> None:
        if names:
            decoded.details = names
        else:
            decoded.annotation = "none"

    def _list_controls(self, decoded: DecodedField, controls: Sequence[str]) -> None:
        bits = self.bits_per_control
        for name, state in control_states(decoded.value, decoded.size, controls, bits):
            if state == CONTROL_STATES[0]:
                continue
            if bits == 1:
                decoded.details.append(f"{name} Control")
            else:
                decoded.details.append(f"{name} Control ({state})")
        if not decoded.details:
            decoded.annotation = "none"

    def _resolve_string(self, index: int) -> str:
        """Look up a string descriptor; failures leave just the index."""
        if not index or self.strings is None:
            return ""
        try:
            text = self.strings(index)
        except Exception as e:
            _logger.debug("String descriptor %d unavailable: %s", index, e)
            return ""
        return text or ""

    def _emit(self, decoded: DecodedField) -> None:
        self.result.fields.append(decoded)
        self.result.lines.append(
            format_field_line(decoded.label, decoded.text, decoded.annotation, self.indent))
        for detail in decoded.details:
            self.result.lines.append(indent_text(detail, self.indent + 1))


def decode(table: DescriptorTable, data: bytes, indent: int = 0,
           strings: Optional[StringLookup] = None,
           terminal_names: Callable[[int], str] = get_terminal_type_name) -> DecodeResult:
    """
    Decode and render one descriptor.

    Args:
        table: Descriptor table to decode against
        data: Descriptor bytes after the three header bytes
        indent: Indentation level of the rendered lines
        strings: Optional string descriptor lookup
        terminal_names: Terminal type name lookup

    Returns:
        DecodeResult holding the rendered lines and the outcome
    """
    return FieldInterpreter(table, data, indent, strings, terminal_names).decode()


def decode_descriptor(kind: DescriptorKind, revision: Union[Revision, int], data: bytes,
                      indent: int = 0, strings: Optional[StringLookup] = None) -> DecodeResult:
    """
    Look up the table for a descriptor kind and revision, then decode.

    A kind the revision does not define yields an UNSUPPORTED_REVISION
    result with a single notice line instead of an error.
    """
    table = lookup(kind, revision)
    if table is None:
        message = f"Unsupported descriptor: {kind.value} is not implemented for UAC {int(revision)}"
        return DecodeResult(
            title=kind.value,
            outcome=DecodeOutcome.UNSUPPORTED_REVISION,
            lines=[indent_text(message, indent)],
            message=message,
        )
    return decode(table, data, indent, strings)
