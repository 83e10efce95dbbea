"""
Command-line interface for the USB Audio Class descriptor decoder.

Usage:
    uac-dump [options] [file]
    cat descriptors.hex | uac-dump [options]
"""

import argparse
import logging
import sys
from typing import Optional

from .interpreter import decode_descriptor
from .model import DescriptorKind
from .parser import (
    AUDIO_CONTROL_SUBCLASS,
    AUDIO_STREAMING_SUBCLASS,
    AudioInterface,
    ParseError,
    parse_configuration,
    parse_hex,
)
from .render import render_configuration

REVISION_PROTOCOLS = {1: 0x00, 2: 0x20, 3: 0x30}

INTERFACE_SUBCLASSES = {
    "control": AUDIO_CONTROL_SUBCLASS,
    "streaming": AUDIO_STREAMING_SUBCLASS,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="uac-dump",
        description="Decode USB Audio Class descriptors from a hex dump.",
        epilog="Example: uac-dump --binary /sys/bus/usb/devices/1-1/descriptors",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Input file containing descriptor bytes (default: stdin)",
    )

    parser.add_argument(
        "-k", "--kind",
        choices=[kind.name.lower() for kind in DescriptorKind],
        help="Decode the input as a single descriptor of this kind, "
             "header bytes already stripped",
    )

    parser.add_argument(
        "-r", "--revision",
        type=int,
        choices=sorted(REVISION_PROTOCOLS),
        default=1,
        help="UAC revision for --kind, or for descriptors before the first "
             "interface descriptor (default: 1)",
    )

    parser.add_argument(
        "-i", "--interface",
        choices=sorted(INTERFACE_SUBCLASSES),
        help="Audio interface the input starts in, for streams holding only "
             "class-specific descriptors",
    )

    parser.add_argument(
        "-S", "--string",
        action="append",
        default=[],
        metavar="INDEX=TEXT",
        help="Text of a string descriptor (may be repeated)",
    )

    parser.add_argument(
        "--binary",
        action="store_true",
        help="Read raw bytes instead of hex text",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress warnings and non-essential output",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debugging information",
    )

    parser.add_argument(
        "-v", "--version",
        action="store_true",
        help="Show version and exit",
    )

    return parser


def read_input(file_path: Optional[str], binary: bool) -> bytes:
    """Read descriptor bytes from file or stdin."""
    if file_path:
        try:
            with open(file_path, "rb") as f:
                content = f.read()
        except FileNotFoundError:
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            sys.exit(1)
        except IOError as e:
            print(f"Error reading file: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        # Check if stdin has data
        if sys.stdin.isatty():
            print("Error: No input provided. Pipe a hex dump or specify a file.",
                  file=sys.stderr)
            print("Usage: cat descriptors.hex | uac-dump", file=sys.stderr)
            print("       uac-dump --binary descriptors", file=sys.stderr)
            sys.exit(1)
        content = sys.stdin.buffer.read()

    if binary:
        return content
    return parse_hex(content.decode("ascii", errors="replace"))


def parse_strings(entries: list[str]) -> dict[int, str]:
    """Parse INDEX=TEXT string descriptor options."""
    strings = {}
    for entry in entries:
        index, sep, text = entry.partition("=")
        if not sep or not index.strip().isdigit():
            raise ParseError(f"bad string descriptor {entry!r}, expected INDEX=TEXT")
        strings[int(index)] = text
    return strings


def configure_logging(quiet: bool, debug: bool) -> None:
    """Set up logging to stderr."""
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"uac-dump {__version__}")
        return 0

    configure_logging(args.quiet, args.debug)

    # Read input
    try:
        data = read_input(args.file, args.binary)
        strings = parse_strings(args.string)
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1

    if not data:
        print("Error: Empty input", file=sys.stderr)
        return 1

    if args.kind:
        kind = DescriptorKind[args.kind.upper()]
        result = decode_descriptor(kind, args.revision, data, strings=strings.get)
        print(result.report)
        return 0

    interface = None
    if args.interface:
        interface = AudioInterface(
            subclass=INTERFACE_SUBCLASSES[args.interface],
            protocol=REVISION_PROTOCOLS[args.revision],
        )

    descriptors = parse_configuration(data, interface)
    if not descriptors and not args.quiet:
        print("Warning: No USB Audio Class descriptors found in input.",
              file=sys.stderr)
        print("Make sure the input is from a USB audio device.",
              file=sys.stderr)

    print(render_configuration(descriptors, strings=strings.get))
    return 0


if __name__ == "__main__":
    sys.exit(main())
