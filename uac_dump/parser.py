"""
Parser for raw USB configuration descriptor data.

This module splits a descriptor stream into length-prefixed descriptors,
tracks which audio interface each class-specific descriptor belongs to, and
works out the descriptor kind and UAC revision needed to decode it.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from .model import DescriptorKind, Revision

_logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Exception raised when descriptor input cannot be read."""
    pass


# Standard descriptor types
INTERFACE = 0x04
ENDPOINT = 0x05
# Class-specific descriptor types
CS_INTERFACE = 0x24
CS_ENDPOINT = 0x25

# Interface class codes
AUDIO_CLASS = 0x01
AUDIO_CONTROL_SUBCLASS = 0x01
AUDIO_STREAMING_SUBCLASS = 0x02
MIDI_STREAMING_SUBCLASS = 0x03

# bInterfaceProtocol of audio interfaces
PROTOCOL_REVISIONS: dict[int, Revision] = {
    0x00: Revision.UAC_1,
    0x20: Revision.UAC_2,
    0x30: Revision.UAC_3,
}

SUBCLASS_NAMES: dict[int, str] = {
    AUDIO_CONTROL_SUBCLASS: "AudioControl",
    AUDIO_STREAMING_SUBCLASS: "AudioStreaming",
    MIDI_STREAMING_SUBCLASS: "MIDIStreaming",
}

# Audio Control descriptor subtypes (UAC 1.0)
UAC1_AC_SUBTYPES: dict[int, DescriptorKind] = {
    0x01: DescriptorKind.AC_HEADER,
    0x02: DescriptorKind.AC_INPUT_TERMINAL,
    0x03: DescriptorKind.AC_OUTPUT_TERMINAL,
    0x04: DescriptorKind.AC_MIXER_UNIT,
    0x05: DescriptorKind.AC_SELECTOR_UNIT,
    0x06: DescriptorKind.AC_FEATURE_UNIT,
    0x07: DescriptorKind.AC_PROCESSING_UNIT,
    0x08: DescriptorKind.AC_EXTENSION_UNIT,
}

# UAC 2.0 inserts the effect unit at 0x07 and adds clock entities
UAC2_AC_SUBTYPES: dict[int, DescriptorKind] = {
    0x01: DescriptorKind.AC_HEADER,
    0x02: DescriptorKind.AC_INPUT_TERMINAL,
    0x03: DescriptorKind.AC_OUTPUT_TERMINAL,
    0x04: DescriptorKind.AC_MIXER_UNIT,
    0x05: DescriptorKind.AC_SELECTOR_UNIT,
    0x06: DescriptorKind.AC_FEATURE_UNIT,
    0x07: DescriptorKind.AC_EFFECT_UNIT,
    0x08: DescriptorKind.AC_PROCESSING_UNIT,
    0x09: DescriptorKind.AC_EXTENSION_UNIT,
    0x0A: DescriptorKind.AC_CLOCK_SOURCE,
    0x0B: DescriptorKind.AC_CLOCK_SELECTOR,
    0x0C: DescriptorKind.AC_CLOCK_MULTIPLIER,
    0x0D: DescriptorKind.AC_SAMPLE_RATE_CONVERTER,
}

# UAC 3.0 adds the extended terminal at 0x04; connectors and power domains
# (0x0F, 0x10) have no kind here
UAC3_AC_SUBTYPES: dict[int, DescriptorKind] = {
    0x01: DescriptorKind.AC_HEADER,
    0x02: DescriptorKind.AC_INPUT_TERMINAL,
    0x03: DescriptorKind.AC_OUTPUT_TERMINAL,
    0x05: DescriptorKind.AC_MIXER_UNIT,
    0x06: DescriptorKind.AC_SELECTOR_UNIT,
    0x07: DescriptorKind.AC_FEATURE_UNIT,
    0x08: DescriptorKind.AC_EFFECT_UNIT,
    0x09: DescriptorKind.AC_PROCESSING_UNIT,
    0x0A: DescriptorKind.AC_EXTENSION_UNIT,
    0x0B: DescriptorKind.AC_CLOCK_SOURCE,
    0x0C: DescriptorKind.AC_CLOCK_SELECTOR,
    0x0D: DescriptorKind.AC_CLOCK_MULTIPLIER,
    0x0E: DescriptorKind.AC_SAMPLE_RATE_CONVERTER,
}

AC_SUBTYPES: dict[Revision, dict[int, DescriptorKind]] = {
    Revision.UAC_1: UAC1_AC_SUBTYPES,
    Revision.UAC_2: UAC2_AC_SUBTYPES,
    Revision.UAC_3: UAC3_AC_SUBTYPES,
}

# Audio Streaming descriptor subtypes
AS_GENERAL = 0x01
AS_FORMAT_TYPE = 0x02
EP_GENERAL = 0x01

FORMAT_TYPE_I = 0x01


def parse_hex(text: str) -> bytes:
    """
    Parse hex dump text into bytes.

    Accepts bytes separated by whitespace, commas or colons, with or without
    a 0x prefix, and ignores '#' comments.

    Raises:
        ParseError: If a token is not a hex byte
    """
    data = bytearray()
    for line_number, line in enumerate(text.splitlines(), 1):
        line = line.split("#", 1)[0]
        for token in re.split(r"[\s,:]+", line.strip()):
            if not token:
                continue
            match = re.fullmatch(r"(?:0[xX])?([0-9a-fA-F]{1,2})", token)
            if not match:
                raise ParseError(f"line {line_number}: {token!r} is not a hex byte")
            data.append(int(match.group(1), 16))
    return bytes(data)


@dataclass
class RawDescriptor:
    """One length-prefixed descriptor as found in the stream."""
    offset: int
    length: int  # bLength as reported by the device
    descriptor_type: int
    data: bytes  # bytes actually available, header included

    @property
    def truncated(self) -> bool:
        """Check if the stream ended before bLength bytes were available."""
        return len(self.data) < self.length

    @property
    def subtype(self) -> Optional[int]:
        """Get bDescriptorSubtype, if the descriptor is long enough to have one."""
        return self.data[2] if len(self.data) > 2 else None

    @property
    def payload(self) -> bytes:
        """Get the bytes after bLength, bDescriptorType and bDescriptorSubtype."""
        return self.data[3:]


def iter_descriptors(data: bytes) -> Iterator[RawDescriptor]:
    """
    Split a descriptor stream using each descriptor's bLength.

    A bLength below 2 cannot advance the walk and ends it; a bLength past
    the end of the stream yields what is left, marked truncated.
    """
    offset = 0
    while offset < len(data):
        length = data[offset]
        if length < 2:
            _logger.warning("Invalid bLength %d at offset %d; stopping", length, offset)
            return
        chunk = data[offset:offset + length]
        if len(chunk) < 2:
            _logger.warning("Descriptor at offset %d has no bDescriptorType; stopping", offset)
            return
        descriptor = RawDescriptor(offset=offset, length=length,
                                   descriptor_type=chunk[1], data=bytes(chunk))
        if descriptor.truncated:
            _logger.warning("Descriptor at offset %d claims %d bytes, only %d available",
                            offset, length, len(chunk))
        yield descriptor
        offset += length


@dataclass
class AudioInterface:
    """Standard interface descriptor fields that select how to decode."""
    interface_number: int = 0
    alternate_setting: int = 0
    subclass: int = 0
    protocol: int = 0

    @property
    def name(self) -> str:
        """Get the interface subclass name, e.g. 'AudioControl'."""
        return SUBCLASS_NAMES.get(self.subclass, f"Audio subclass 0x{self.subclass:02x}")

    @property
    def revision(self) -> Optional[Revision]:
        """Get the UAC revision implied by bInterfaceProtocol."""
        return PROTOCOL_REVISIONS.get(self.protocol)

    @property
    def is_control(self) -> bool:
        return self.subclass == AUDIO_CONTROL_SUBCLASS

    @property
    def is_streaming(self) -> bool:
        return self.subclass == AUDIO_STREAMING_SUBCLASS


@dataclass
class AudioDescriptor:
    """A class-specific descriptor of an audio interface."""
    raw: RawDescriptor
    interface: AudioInterface
    kind: Optional[DescriptorKind] = None

    @property
    def revision(self) -> Optional[Revision]:
        return self.interface.revision

    @property
    def heading(self) -> str:
        """Get the heading lsusb uses for this descriptor."""
        if self.raw.descriptor_type == CS_ENDPOINT:
            return f"{self.interface.name} Endpoint Descriptor:"
        return f"{self.interface.name} Interface Descriptor:"


def descriptor_kind(interface: AudioInterface, raw: RawDescriptor) -> Optional[DescriptorKind]:
    """
    Work out the kind of a class-specific descriptor.

    Args:
        interface: The audio interface the descriptor belongs to
        raw: The descriptor

    Returns:
        The descriptor kind, or None for subtypes without a kind
    """
    subtype = raw.subtype
    revision = interface.revision
    if subtype is None or revision is None:
        return None

    if raw.descriptor_type == CS_INTERFACE:
        if interface.is_control:
            return AC_SUBTYPES[revision].get(subtype)
        if interface.is_streaming:
            if subtype == AS_GENERAL:
                return DescriptorKind.AS_INTERFACE
            if subtype == AS_FORMAT_TYPE and raw.payload[:1] == bytes([FORMAT_TYPE_I]):
                return DescriptorKind.AS_FORMAT_TYPE_I
    elif raw.descriptor_type == CS_ENDPOINT:
        if interface.is_streaming and subtype == EP_GENERAL:
            return DescriptorKind.AS_ISOCHRONOUS_ENDPOINT
    return None


def format_type(interface: AudioInterface, raw: RawDescriptor) -> Optional[int]:
    """Get bFormatType if the descriptor is an AS format type descriptor."""
    if (raw.descriptor_type == CS_INTERFACE and interface.is_streaming
            and raw.subtype == AS_FORMAT_TYPE and raw.payload):
        return raw.payload[0]
    return None


class ConfigurationParser:
    """Walks a configuration descriptor and collects audio class descriptors."""

    def __init__(self, data: bytes, interface: Optional[AudioInterface] = None):
        """
        Initialize the parser.

        Args:
            data: Raw configuration descriptor bytes
            interface: Audio interface to assume until the first interface
                descriptor, for streams holding only class-specific descriptors
        """
        self.descriptors = list(iter_descriptors(data))
        self.pos = 0
        self.interface = interface

    def _current(self) -> Optional[RawDescriptor]:
        """Get current descriptor or None if at end."""
        if self.pos < len(self.descriptors):
            return self.descriptors[self.pos]
        return None

    def _advance(self) -> Optional[RawDescriptor]:
        """Advance to next descriptor and return it."""
        self.pos += 1
        return self._current()

    def parse(self) -> list[AudioDescriptor]:
        """Parse the stream and return its audio class-specific descriptors."""
        found = []

        while self._current():
            raw = self._current()

            if raw.descriptor_type == INTERFACE:
                self.interface = self._parse_interface_descriptor(raw)
            elif raw.descriptor_type in (CS_INTERFACE, CS_ENDPOINT) and self.interface:
                found.append(AudioDescriptor(raw=raw, interface=self.interface,
                                             kind=descriptor_kind(self.interface, raw)))
            else:
                _logger.debug("Skipping descriptor type 0x%02x at offset %d",
                              raw.descriptor_type, raw.offset)
            self._advance()

        return found

    def _parse_interface_descriptor(self, raw: RawDescriptor) -> Optional[AudioInterface]:
        """Parse a standard Interface Descriptor; None if it is not audio."""
        if len(raw.data) < 9:
            _logger.warning("Interface descriptor at offset %d is too short", raw.offset)
            return None
        if raw.data[5] != AUDIO_CLASS:
            return None
        return AudioInterface(
            interface_number=raw.data[2],
            alternate_setting=raw.data[3],
            subclass=raw.data[6],
            protocol=raw.data[7],
        )


def parse_configuration(data: bytes,
                        interface: Optional[AudioInterface] = None) -> list[AudioDescriptor]:
    """
    Parse a configuration descriptor and return its audio class descriptors.

    Args:
        data: Raw configuration descriptor bytes
        interface: Audio interface to assume before the first interface descriptor

    Returns:
        Class-specific descriptors of audio interfaces, in stream order
    """
    parser = ConfigurationParser(data, interface)
    return parser.parse()
