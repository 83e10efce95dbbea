"""
USB Audio Class Descriptor Decoder

A Python tool to decode class-specific USB Audio Class 1.0 and 2.0
descriptors from raw bytes into lsusb-style text.
"""

__version__ = "0.1.0"

from .model import (
    Revision,
    DescriptorKind,
    DescriptorTable,
    DecodeOutcome,
    DecodeResult,
    DecodedField,
    SchemaError,
    SchemaDependencyError,
)
from .registry import REGISTRY, lookup, supported_kinds
from .interpreter import decode, decode_descriptor, control_states, channel_names
from .parser import ParseError, parse_hex, parse_configuration
from .render import render_descriptor, render_configuration

__all__ = [
    "Revision",
    "DescriptorKind",
    "DescriptorTable",
    "DecodeOutcome",
    "DecodeResult",
    "DecodedField",
    "SchemaError",
    "SchemaDependencyError",
    "REGISTRY",
    "lookup",
    "supported_kinds",
    "decode",
    "decode_descriptor",
    "control_states",
    "channel_names",
    "ParseError",
    "parse_hex",
    "parse_configuration",
    "render_descriptor",
    "render_configuration",
]
