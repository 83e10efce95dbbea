"""
Text report generation for audio class descriptors.

This module renders parsed class-specific descriptors in the layout lsusb
uses: a heading per descriptor, the three header fields, then the decoded
fields one indentation level deeper.
"""

from typing import Optional

from .formatting import format_field_line, indent_text
from .interpreter import StringLookup, decode_descriptor
from .model import DecodeOutcome, DecodeResult
from .parser import AudioDescriptor, AudioInterface, format_type


def render_descriptor(descriptor: AudioDescriptor, strings: Optional[StringLookup] = None,
                      indent: int = 1) -> str:
    """
    Render one class-specific descriptor.

    Args:
        descriptor: The descriptor and the interface it belongs to
        strings: Optional string descriptor lookup
        indent: Indentation level of the heading

    Returns:
        Formatted descriptor dump
    """
    lines, _ = _render_descriptor_lines(descriptor, strings, indent)
    return "\n".join(lines)


def _render_descriptor_lines(descriptor: AudioDescriptor, strings: Optional[StringLookup],
                             indent: int) -> tuple[list[str], Optional[DecodeResult]]:
    raw = descriptor.raw
    lines = [indent_text(descriptor.heading, indent)]
    body = indent + 1

    lines.append(format_field_line("bLength", str(raw.length), indent=body))
    lines.append(format_field_line("bDescriptorType", str(raw.descriptor_type), indent=body))

    if raw.subtype is None:
        lines.append(indent_text("Warning: Descriptor too short to have a subtype.", body))
        return lines, None

    kind = descriptor.kind
    format_code = format_type(descriptor.interface, raw)
    if kind:
        subtype_name = f"({kind.value})"
    elif format_code is not None and descriptor.revision is not None:
        subtype_name = "(Format Type)"
    else:
        subtype_name = "(unknown)"
    lines.append(format_field_line("bDescriptorSubtype", str(raw.subtype), subtype_name, body))

    # Subtype numbering depends on the revision, so nothing is known without one
    revision = descriptor.revision
    if revision is None:
        lines.append(indent_text(
            f"Unsupported descriptor: unknown audio protocol 0x{descriptor.interface.protocol:02x}",
            body))
        return lines, None

    if kind is None:
        if format_code is not None:
            lines.append(format_field_line("bFormatType", str(format_code), indent=body))
            lines.append(indent_text(
                f"No table for format type {format_code}; raw bytes:", body))
        else:
            lines.append(indent_text("Unknown descriptor subtype; raw bytes:", body))
        lines.append(indent_text(raw.data.hex(" "), body + 1))
        return lines, None

    result = decode_descriptor(kind, revision, raw.payload, indent=body, strings=strings)
    lines.extend(result.lines)
    return lines, result


def render_interface(interface: AudioInterface) -> str:
    """Render the heading of an audio interface."""
    revision = f"UAC {int(interface.revision)}" if interface.revision else (
        f"protocol 0x{interface.protocol:02x}")
    return (f"Interface {interface.interface_number} "
            f"(alternate {interface.alternate_setting}): {interface.name}, {revision}")


def render_configuration(descriptors: list[AudioDescriptor],
                         strings: Optional[StringLookup] = None) -> str:
    """
    Render every audio class descriptor of a configuration.

    Args:
        descriptors: Descriptors from parse_configuration()
        strings: Optional string descriptor lookup

    Returns:
        Formatted dump, grouped under interface headings
    """
    lines = []
    current = None
    outcomes: dict[DecodeOutcome, int] = {}
    undecoded = 0

    for descriptor in descriptors:
        if descriptor.interface is not current:
            current = descriptor.interface
            if lines:
                lines.append("")
            lines.append(render_interface(current))

        descriptor_lines, result = _render_descriptor_lines(descriptor, strings, indent=1)
        lines.extend(descriptor_lines)
        if result is not None:
            outcomes[result.outcome] = outcomes.get(result.outcome, 0) + 1
        else:
            undecoded += 1

    if not descriptors:
        lines.append("No audio class descriptors found.")
    else:
        lines.append("")
        lines.append(render_summary(len(descriptors), outcomes, undecoded))

    return "\n".join(lines)


def render_summary(total: int, outcomes: dict[DecodeOutcome, int], undecoded: int = 0) -> str:
    """
    Render a one-line count of descriptors by decode outcome.

    Descriptors that never reached the interpreter (unknown subtype, format
    type or protocol) are counted as undecoded.
    """
    parts = [f"{total} descriptor(s)"]
    for outcome in DecodeOutcome:
        count = outcomes.get(outcome, 0)
        if count:
            parts.append(f"{count} {outcome.value.replace('_', ' ')}")
    if undecoded:
        parts.append(f"{undecoded} undecoded")
    return ", ".join(parts)
