"""
Schema model for USB Audio Class descriptors.

This module defines the declarative pieces used to describe class-specific
descriptors for UAC 1.0 and UAC 2.0 (field specifications grouped into
descriptor tables), and the dataclasses produced when a table is decoded.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, Mapping, Optional, Sequence


class SchemaError(Exception):
    """Exception raised when a descriptor table is inconsistent."""
    pass


class SchemaDependencyError(SchemaError):
    """Exception raised when a field depends on a value that was never decoded."""

    def __init__(self, table: str, field_name: str, dependency: str):
        self.table = table
        self.field_name = field_name
        self.dependency = dependency
        super().__init__(
            f"{table}: field {field_name!r} depends on {dependency!r}, "
            f"which has not been decoded"
        )


class Revision(IntEnum):
    """USB Audio Class specification revision."""
    UAC_1 = 1
    UAC_2 = 2
    UAC_3 = 3


class DescriptorKind(Enum):
    """Structural role of a class-specific audio descriptor."""
    AC_HEADER = "Header"
    AC_INPUT_TERMINAL = "Input Terminal"
    AC_OUTPUT_TERMINAL = "Output Terminal"
    AC_MIXER_UNIT = "Mixer Unit"
    AC_SELECTOR_UNIT = "Selector Unit"
    AC_FEATURE_UNIT = "Feature Unit"
    AC_EFFECT_UNIT = "Effect Unit"
    AC_PROCESSING_UNIT = "Processing Unit"
    AC_EXTENSION_UNIT = "Extension Unit"
    AC_CLOCK_SOURCE = "Clock Source"
    AC_CLOCK_SELECTOR = "Clock Selector"
    AC_CLOCK_MULTIPLIER = "Clock Multiplier"
    AC_SAMPLE_RATE_CONVERTER = "Sample Rate Converter"
    AS_INTERFACE = "AS General"
    AS_FORMAT_TYPE_I = "Format Type I"
    AS_ISOCHRONOUS_ENDPOINT = "Isochronous Audio Data Endpoint"


# ============================================================================
# Field Specifications
# ============================================================================

@dataclass(frozen=True)
class ArraySpec:
    """
    Repetition of a field.

    With only ``length_field`` the field repeats that many times. Without a
    length field it repeats to fill the payload left over once the fixed-size
    fields after it are accounted for. With ``bits_per_cell`` the field is a
    bit-packed matrix of ``length_field`` rows by ``second_length_field``
    columns.
    """
    length_field: Optional[str] = None
    second_length_field: Optional[str] = None
    bits_per_cell: Optional[int] = None

    @property
    def is_matrix(self) -> bool:
        return self.bits_per_cell is not None


@dataclass(frozen=True)
class FieldSpec:
    """One field of a descriptor table."""
    name: str
    size: int = 1
    size_field: Optional[str] = None  # name of a prior field holding the width
    array: Optional[ArraySpec] = None

    @property
    def dependencies(self) -> list[str]:
        """Names of prior fields this field needs before it can be read."""
        names = []
        if self.size_field:
            names.append(self.size_field)
        if self.array:
            if self.array.length_field:
                names.append(self.array.length_field)
            if self.array.second_length_field:
                names.append(self.array.second_length_field)
        return names

    @property
    def is_fixed_size(self) -> bool:
        """Check if the field always occupies the same number of bytes."""
        return self.size_field is None and self.array is None


@dataclass(frozen=True)
class NumberField(FieldSpec):
    """Plain unsigned integer, rendered in decimal."""


@dataclass(frozen=True)
class BCDField(FieldSpec):
    """Binary-coded decimal release number, rendered as major.minor."""


@dataclass(frozen=True)
class ConstantField(FieldSpec):
    """Value defined by the specification with no device-specific meaning."""


@dataclass(frozen=True)
class BitmapField(FieldSpec):
    """Bitmap whose set bits are looked up in a sparse bit -> name table."""
    names: Optional[Mapping[int, str]] = None


@dataclass(frozen=True)
class ChannelConfigField(FieldSpec):
    """Spatial channel configuration; bit N names channel position N."""
    channels: Sequence[str] = ()


@dataclass(frozen=True)
class ControlBitmapField(FieldSpec):
    """
    Control support bitmap.

    UAC 1.0 uses one bit per control (present or not), UAC 2.0 two bits
    (not present, read-only, reserved, read/write). The control names are
    the same for both revisions; the table revision picks the width.
    """
    controls: Sequence[str] = ()


@dataclass(frozen=True)
class StringIndexField(FieldSpec):
    """Index of a string descriptor."""


@dataclass(frozen=True)
class NumberSuffixField(FieldSpec):
    """Integer followed by a fixed unit, e.g. ``3 frames``."""
    suffix: str = ""


@dataclass(frozen=True)
class NumberStringsField(FieldSpec):
    """Integer looked up in a flat table of names."""
    strings: Sequence[str] = ()


@dataclass(frozen=True)
class TerminalTypeField(FieldSpec):
    """Terminal type code."""


# Callback for fields that need custom rendering: takes the raw value and
# returns the text for the value line plus any extra lines beneath it.
CustomRenderer = Callable[[int], tuple[str, list[str]]]


@dataclass(frozen=True)
class CustomField(FieldSpec):
    """Field with irregular encoding, rendered by a dedicated callback."""
    render: Optional[CustomRenderer] = None


# ============================================================================
# Descriptor Tables
# ============================================================================

@dataclass(frozen=True)
class DescriptorTable:
    """Ordered field layout of one descriptor kind for one revision."""
    kind: DescriptorKind
    revision: Revision
    fields: tuple[FieldSpec, ...]

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        self._validate()

    @property
    def name(self) -> str:
        """Get a display name such as 'UAC2 Input Terminal'."""
        return f"UAC{int(self.revision)} {self.kind.value}"

    @property
    def fixed_size(self) -> int:
        """Sum of the widths of all fields whose size does not depend on data."""
        return sum(spec.size for spec in self.fields if spec.is_fixed_size)

    def _validate(self) -> None:
        """Check that every dependency names a scalar field decoded earlier."""
        scalars: set[str] = set()
        for spec in self.fields:
            for dependency in spec.dependencies:
                if dependency not in scalars:
                    raise SchemaError(
                        f"{self.name}: field {spec.name!r} depends on "
                        f"{dependency!r}, which is not a scalar field before it"
                    )
            if spec.array and spec.array.is_matrix:
                if not (spec.array.length_field and spec.array.second_length_field):
                    raise SchemaError(
                        f"{self.name}: bit matrix {spec.name!r} needs row and column fields"
                    )
            if isinstance(spec, CustomField) and spec.render is None:
                raise SchemaError(f"{self.name}: custom field {spec.name!r} has no renderer")
            if spec.array is None:
                scalars.add(spec.name)


# ============================================================================
# Decoding
# ============================================================================

class DecodeOutcome(Enum):
    """How far decoding of one descriptor got."""
    COMPLETE = "complete"
    TRUNCATED = "truncated"
    UNSUPPORTED_REVISION = "unsupported_revision"
    SCHEMA_ERROR = "schema_error"


@dataclass
class DecodeContext:
    """Cursor and already-decoded values for one descriptor decode."""
    data: bytes
    offset: int = 0
    values: dict[str, int] = field(default_factory=dict)

    @property
    def remaining(self) -> int:
        """Get the number of unread bytes."""
        return max(len(self.data) - self.offset, 0)

    def read(self, size: int) -> int:
        """Read a little-endian unsigned integer of ``size`` bytes."""
        value = int.from_bytes(self.data[self.offset:self.offset + size], "little")
        self.offset += size
        return value

    def read_bytes(self, size: int) -> bytes:
        """Read ``size`` raw bytes."""
        chunk = bytes(self.data[self.offset:self.offset + size])
        self.offset += size
        return chunk


@dataclass
class DecodedField:
    """One rendered field (or one element of an array field)."""
    label: str
    value: int
    size: int
    text: str
    annotation: str = ""
    details: list[str] = field(default_factory=list)


@dataclass
class DecodeResult:
    """Rendered report of one descriptor and how decoding ended."""
    title: str
    outcome: DecodeOutcome = DecodeOutcome.COMPLETE
    fields: list[DecodedField] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def report(self) -> str:
        """Get the report as text."""
        return "\n".join(self.lines)

    @property
    def is_complete(self) -> bool:
        """Check if every field of the table was decoded."""
        return self.outcome == DecodeOutcome.COMPLETE

    def get_field(self, label: str) -> Optional[DecodedField]:
        """Look up a decoded field by its label, e.g. 'baSourceID(1)'."""
        for decoded in self.fields:
            if decoded.label == label:
                return decoded
        return None
