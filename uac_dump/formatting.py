"""Line layout shared by the field interpreter and the report renderer."""

INDENT = "  "
LABEL_WIDTH = 20
VALUE_WIDTH = 5


def indent_text(text: str, level: int) -> str:
    """Prefix text with ``level`` indentation steps."""
    return f"{INDENT * level}{text}"


def format_field_line(label: str, text: str, annotation: str = "", indent: int = 0) -> str:
    """
    Format one 'label  value annotation' line.

    Args:
        label: Field label, padded to the label column
        text: Primary value, right-aligned in the value column
        annotation: Optional text after the value
        indent: Indentation level

    Returns:
        The formatted line without trailing whitespace
    """
    line = f"{label:<{LABEL_WIDTH}} {text:>{VALUE_WIDTH}}"
    if annotation:
        line += f" {annotation}"
    return indent_text(line, indent).rstrip()


def format_hex(value: int, size: int) -> str:
    """Format a value as zero-padded hex, two digits per byte."""
    return f"0x{value:0{max(size, 1) * 2}x}"


def format_bcd(value: int) -> str:
    """Format a two-byte BCD release number, e.g. 0x0200 -> '2.00'."""
    return f"{(value >> 8) & 0xFF:x}.{value & 0xFF:02x}"
