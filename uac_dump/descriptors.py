"""
Descriptor tables for USB Audio Class class-specific descriptors.

Each table lists the fields that follow the bLength, bDescriptorType and
bDescriptorSubtype header, in wire order. Section and table numbers refer to
the USB Device Class Definition for Audio Devices, release 1.0 and 2.0.
"""

from .model import (
    ArraySpec,
    BCDField,
    BitmapField,
    ChannelConfigField,
    ConstantField,
    ControlBitmapField,
    CustomField,
    DescriptorKind,
    DescriptorTable,
    NumberField,
    NumberStringsField,
    NumberSuffixField,
    Revision,
    StringIndexField,
    TerminalTypeField,
)
from .tables import (
    AS_ENDPOINT_CONTROLS,
    AS_INTERFACE_CONTROLS,
    CLOCK_MULTIPLIER_CONTROLS,
    CLOCK_SELECTOR_CONTROLS,
    CLOCK_SOURCE_CONTROLS,
    CLOCK_SOURCE_TYPES,
    CLOCK_SYNCED_TO_SOF,
    EXTENSION_UNIT_CONTROLS,
    FEATURE_UNIT_CONTROLS,
    FORMAT_TAG_TABLES,
    HEADER_CONTROLS,
    INPUT_TERMINAL_CONTROLS,
    LOCK_DELAY_UNITS,
    MIXER_UNIT_CONTROLS,
    OUTPUT_TERMINAL_CONTROLS,
    SELECTOR_UNIT_CONTROLS,
    UAC1_CHANNEL_NAMES,
    UAC1_ENDPOINT_ATTRIBUTES,
    UAC2_CHANNEL_NAMES,
    UAC2_ENDPOINT_ATTRIBUTES,
    UAC2_TYPE_I_FORMAT_BITS,
    UNDEFINED,
)


# ============================================================================
# Custom Renderers
# ============================================================================

def render_clock_source_attributes(value: int) -> tuple[str, list[str]]:
    """Render UAC 2.0 Clock Source bmAttributes (clock type and SOF sync)."""
    text = f"{CLOCK_SOURCE_TYPES[value & 0x03]} clock"
    if value & 0x04:
        text += f" {CLOCK_SYNCED_TO_SOF}"
    return text, []


def format_tag_name(value: int) -> str:
    """Get the name of a UAC 1.0 wFormatTag (0xTNNN, T = format type)."""
    names = FORMAT_TAG_TABLES.get(value >> 12)
    code = value & 0x0FFF
    if names is None or code >= len(names):
        return UNDEFINED
    return names[code]


def render_format_tag(value: int) -> tuple[str, list[str]]:
    """Render UAC 1.0 AS interface wFormatTag."""
    return format_tag_name(value), []


def render_uac2_formats(value: int) -> tuple[str, list[str]]:
    """Render UAC 2.0 AS interface bmFormats, one line per Type I format."""
    formats = [name for bit, name in sorted(UAC2_TYPE_I_FORMAT_BITS.items())
               if value & (1 << bit)]
    if not formats:
        return "none", []
    return "", formats


# ============================================================================
# Audio Control Interface Descriptors
# ============================================================================

# UAC1: 4.3.2 Class-Specific AC Interface Header Descriptor; Table 4-2
UAC1_AC_HEADER = DescriptorTable(DescriptorKind.AC_HEADER, Revision.UAC_1, (
    BCDField("bcdADC", size=2),
    ConstantField("wTotalLength", size=2),
    NumberField("bInCollection"),
    NumberField("baInterfaceNr", array=ArraySpec(length_field="bInCollection")),
))

# UAC2: 4.7.2 Class-Specific AC Interface Header Descriptor; Table 4-5
UAC2_AC_HEADER = DescriptorTable(DescriptorKind.AC_HEADER, Revision.UAC_2, (
    BCDField("bcdADC", size=2),
    ConstantField("bCategory"),
    NumberField("wTotalLength", size=2),
    ControlBitmapField("bmControls", controls=HEADER_CONTROLS),
))

# UAC1: 4.3.2.1 Input Terminal Descriptor; Table 4-3
UAC1_AC_INPUT_TERMINAL = DescriptorTable(DescriptorKind.AC_INPUT_TERMINAL, Revision.UAC_1, (
    NumberField("bTerminalID"),
    TerminalTypeField("wTerminalType", size=2),
    ConstantField("bAssocTerminal"),
    NumberField("bNrChannels"),
    ChannelConfigField("wChannelConfig", size=2, channels=UAC1_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    StringIndexField("iTerminal"),
))

# UAC2: 4.7.2.4 Input Terminal Descriptor; Table 4-9
UAC2_AC_INPUT_TERMINAL = DescriptorTable(DescriptorKind.AC_INPUT_TERMINAL, Revision.UAC_2, (
    NumberField("bTerminalID"),
    TerminalTypeField("wTerminalType", size=2),
    ConstantField("bAssocTerminal"),
    ConstantField("bCSourceID"),
    NumberField("bNrChannels"),
    ChannelConfigField("bmChannelConfig", size=4, channels=UAC2_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    ControlBitmapField("bmControls", size=2, controls=INPUT_TERMINAL_CONTROLS),
    StringIndexField("iTerminal"),
))

# UAC1: 4.3.2.2 Output Terminal Descriptor; Table 4-4
UAC1_AC_OUTPUT_TERMINAL = DescriptorTable(DescriptorKind.AC_OUTPUT_TERMINAL, Revision.UAC_1, (
    NumberField("bTerminalID"),
    TerminalTypeField("wTerminalType", size=2),
    NumberField("bAssocTerminal"),
    NumberField("bSourceID"),
    StringIndexField("iTerminal"),
))

# UAC2: 4.7.2.5 Output Terminal Descriptor; Table 4-10
UAC2_AC_OUTPUT_TERMINAL = DescriptorTable(DescriptorKind.AC_OUTPUT_TERMINAL, Revision.UAC_2, (
    NumberField("bTerminalID"),
    TerminalTypeField("wTerminalType", size=2),
    NumberField("bAssocTerminal"),
    NumberField("bSourceID"),
    NumberField("bCSourceID"),
    ControlBitmapField("bmControls", size=2, controls=OUTPUT_TERMINAL_CONTROLS),
    StringIndexField("iTerminal"),
))

# UAC1: 4.3.2.3 Mixer Unit Descriptor; Table 4-5
UAC1_AC_MIXER_UNIT = DescriptorTable(DescriptorKind.AC_MIXER_UNIT, Revision.UAC_1, (
    NumberField("bUnitID"),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    NumberField("bNrChannels"),
    ChannelConfigField("wChannelConfig", size=2, channels=UAC1_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    BitmapField("bmControls", array=ArraySpec(
        length_field="bNrInPins", second_length_field="bNrChannels", bits_per_cell=1)),
    StringIndexField("iMixer"),
))

# UAC2: 4.7.2.6 Mixer Unit Descriptor; Table 4-11
UAC2_AC_MIXER_UNIT = DescriptorTable(DescriptorKind.AC_MIXER_UNIT, Revision.UAC_2, (
    NumberField("bUnitID"),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    NumberField("bNrChannels"),
    ChannelConfigField("bmChannelConfig", size=4, channels=UAC2_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    BitmapField("bmMixerControls", array=ArraySpec(
        length_field="bNrInPins", second_length_field="bNrChannels", bits_per_cell=1)),
    ControlBitmapField("bmControls", controls=MIXER_UNIT_CONTROLS),
    StringIndexField("iMixer"),
))

# UAC1: 4.3.2.4 Selector Unit Descriptor; Table 4-6
UAC1_AC_SELECTOR_UNIT = DescriptorTable(DescriptorKind.AC_SELECTOR_UNIT, Revision.UAC_1, (
    NumberField("bUnitID"),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    StringIndexField("iSelector"),
))

# UAC2: 4.7.2.7 Selector Unit Descriptor; Table 4-12
UAC2_AC_SELECTOR_UNIT = DescriptorTable(DescriptorKind.AC_SELECTOR_UNIT, Revision.UAC_2, (
    NumberField("bUnitID"),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    ControlBitmapField("bmControls", controls=SELECTOR_UNIT_CONTROLS),
    StringIndexField("iSelector"),
))

# UAC1: 4.3.2.5 Feature Unit Descriptor; Table 4-7
# One bmaControls entry for the master channel plus one per logical channel.
UAC1_AC_FEATURE_UNIT = DescriptorTable(DescriptorKind.AC_FEATURE_UNIT, Revision.UAC_1, (
    NumberField("bUnitID"),
    ConstantField("bSourceID"),
    NumberField("bControlSize"),
    ControlBitmapField("bmaControls", size_field="bControlSize",
                       controls=FEATURE_UNIT_CONTROLS, array=ArraySpec()),
    StringIndexField("iFeature"),
))

# UAC2: 4.7.2.8 Feature Unit Descriptor; Table 4-13
UAC2_AC_FEATURE_UNIT = DescriptorTable(DescriptorKind.AC_FEATURE_UNIT, Revision.UAC_2, (
    NumberField("bUnitID"),
    ConstantField("bSourceID"),
    ControlBitmapField("bmaControls", size=4, controls=FEATURE_UNIT_CONTROLS,
                       array=ArraySpec()),
    StringIndexField("iFeature"),
))

# UAC2: 4.7.2.10 Effect Unit Descriptor; Table 4-15
UAC2_AC_EFFECT_UNIT = DescriptorTable(DescriptorKind.AC_EFFECT_UNIT, Revision.UAC_2, (
    NumberField("bUnitID"),
    ConstantField("wEffectType", size=2),
    ConstantField("bSourceID"),
    BitmapField("bmaControls", size=4, array=ArraySpec()),
    StringIndexField("iEffects"),
))

# UAC1: 4.3.2.6 Processing Unit Descriptor; Table 4-8
UAC1_AC_PROCESSING_UNIT = DescriptorTable(DescriptorKind.AC_PROCESSING_UNIT, Revision.UAC_1, (
    NumberField("bUnitID"),
    ConstantField("wProcessType", size=2),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    NumberField("bNrChannels"),
    ChannelConfigField("wChannelConfig", size=2, channels=UAC1_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    NumberField("bControlSize"),
    BitmapField("bmControls", array=ArraySpec(length_field="bControlSize")),
    StringIndexField("iProcessing"),
    BitmapField("Process-specific", array=ArraySpec()),
))

# UAC2: 4.7.2.11 Processing Unit Descriptor; Table 4-20
UAC2_AC_PROCESSING_UNIT = DescriptorTable(DescriptorKind.AC_PROCESSING_UNIT, Revision.UAC_2, (
    NumberField("bUnitID"),
    ConstantField("wProcessType", size=2),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    NumberField("bNrChannels"),
    ChannelConfigField("bmChannelConfig", size=4, channels=UAC2_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    BitmapField("bmControls", size=2),
    StringIndexField("iProcessing"),
    BitmapField("Process-specific", array=ArraySpec()),
))

# UAC1: 4.3.2.7 Extension Unit Descriptor; Table 4-15
UAC1_AC_EXTENSION_UNIT = DescriptorTable(DescriptorKind.AC_EXTENSION_UNIT, Revision.UAC_1, (
    NumberField("bUnitID"),
    ConstantField("wExtensionCode", size=2),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    NumberField("bNrChannels"),
    ChannelConfigField("wChannelConfig", size=2, channels=UAC1_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    NumberField("bControlSize"),
    BitmapField("bmControls", array=ArraySpec(length_field="bControlSize")),
    StringIndexField("iExtension"),
))

# UAC2: 4.7.2.12 Extension Unit Descriptor; Table 4-24
UAC2_AC_EXTENSION_UNIT = DescriptorTable(DescriptorKind.AC_EXTENSION_UNIT, Revision.UAC_2, (
    NumberField("bUnitID"),
    ConstantField("wExtensionCode", size=2),
    NumberField("bNrInPins"),
    NumberField("baSourceID", array=ArraySpec(length_field="bNrInPins")),
    NumberField("bNrChannels"),
    ChannelConfigField("bmChannelConfig", size=4, channels=UAC2_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
    ControlBitmapField("bmControls", controls=EXTENSION_UNIT_CONTROLS),
    StringIndexField("iExtension"),
))

# ============================================================================
# UAC 2.0 Clock Entities
# ============================================================================

# UAC2: 4.7.2.1 Clock Source Descriptor; Table 4-6
UAC2_AC_CLOCK_SOURCE = DescriptorTable(DescriptorKind.AC_CLOCK_SOURCE, Revision.UAC_2, (
    ConstantField("bClockID"),
    CustomField("bmAttributes", render=render_clock_source_attributes),
    ControlBitmapField("bmControls", controls=CLOCK_SOURCE_CONTROLS),
    ConstantField("bAssocTerminal"),
    StringIndexField("iClockSource"),
))

# UAC2: 4.7.2.2 Clock Selector Descriptor; Table 4-7
UAC2_AC_CLOCK_SELECTOR = DescriptorTable(DescriptorKind.AC_CLOCK_SELECTOR, Revision.UAC_2, (
    NumberField("bClockID"),
    NumberField("bNrInPins"),
    NumberField("baCSourceID", array=ArraySpec(length_field="bNrInPins")),
    ControlBitmapField("bmControls", controls=CLOCK_SELECTOR_CONTROLS),
    StringIndexField("iClockSelector"),
))

# UAC2: 4.7.2.3 Clock Multiplier Descriptor; Table 4-8
UAC2_AC_CLOCK_MULTIPLIER = DescriptorTable(DescriptorKind.AC_CLOCK_MULTIPLIER, Revision.UAC_2, (
    ConstantField("bClockID"),
    NumberField("bCSourceID"),
    ControlBitmapField("bmControls", controls=CLOCK_MULTIPLIER_CONTROLS),
    StringIndexField("iClockMultiplier"),
))

# UAC2: 4.7.2.9 Sampling Rate Converter Descriptor; Table 4-14
UAC2_AC_SAMPLE_RATE_CONVERTER = DescriptorTable(
    DescriptorKind.AC_SAMPLE_RATE_CONVERTER, Revision.UAC_2, (
        ConstantField("bUnitID"),
        ConstantField("bSourceID"),
        ConstantField("bCSourceInID"),
        ConstantField("bCSourceOutID"),
        StringIndexField("iSRC"),
    ))

# ============================================================================
# Audio Streaming Interface Descriptors
# ============================================================================

# UAC1: 4.5.2 Class-Specific AS Interface Descriptor; Table 4-19
UAC1_AS_INTERFACE = DescriptorTable(DescriptorKind.AS_INTERFACE, Revision.UAC_1, (
    ConstantField("bTerminalLink"),
    NumberSuffixField("bDelay", suffix="frames"),
    CustomField("wFormatTag", size=2, render=render_format_tag),
))

# UAC2: 4.9.2 Class-Specific AS Interface Descriptor; Table 4-27
UAC2_AS_INTERFACE = DescriptorTable(DescriptorKind.AS_INTERFACE, Revision.UAC_2, (
    NumberField("bTerminalLink"),
    ControlBitmapField("bmControls", controls=AS_INTERFACE_CONTROLS),
    ConstantField("bFormatType"),
    CustomField("bmFormats", size=4, render=render_uac2_formats),
    NumberField("bNrChannels"),
    ChannelConfigField("bmChannelConfig", size=4, channels=UAC2_CHANNEL_NAMES),
    StringIndexField("iChannelNames"),
))

# Audio Data Formats 1.0: 2.2.5 Type I Format Type Descriptor; Table 2-1.
# bSamFreqType 0 means a continuous range (lower and upper bound follow).
UAC1_AS_FORMAT_TYPE_I = DescriptorTable(DescriptorKind.AS_FORMAT_TYPE_I, Revision.UAC_1, (
    ConstantField("bFormatType"),
    NumberField("bNrChannels"),
    NumberField("bSubframeSize"),
    NumberField("bBitResolution"),
    NumberField("bSamFreqType"),
    NumberSuffixField("tSamFreq", size=3, suffix="Hz", array=ArraySpec()),
))

# Audio Data Formats 2.0: 2.3.1.6 Type I Format Type Descriptor; Table 2-2
UAC2_AS_FORMAT_TYPE_I = DescriptorTable(DescriptorKind.AS_FORMAT_TYPE_I, Revision.UAC_2, (
    ConstantField("bFormatType"),
    NumberField("bSubslotSize"),
    NumberField("bBitResolution"),
))

# UAC1: 4.6.1.2 Class-Specific AS Isochronous Audio Data Endpoint; Table 4-21
UAC1_AS_ISOCHRONOUS_ENDPOINT = DescriptorTable(
    DescriptorKind.AS_ISOCHRONOUS_ENDPOINT, Revision.UAC_1, (
        BitmapField("bmAttributes", names=UAC1_ENDPOINT_ATTRIBUTES),
        NumberStringsField("bLockDelayUnits", strings=LOCK_DELAY_UNITS),
        NumberField("wLockDelay", size=2),
    ))

# UAC2: 4.10.1.2 Class-Specific AS Isochronous Audio Data Endpoint; Table 4-34
UAC2_AS_ISOCHRONOUS_ENDPOINT = DescriptorTable(
    DescriptorKind.AS_ISOCHRONOUS_ENDPOINT, Revision.UAC_2, (
        BitmapField("bmAttributes", names=UAC2_ENDPOINT_ATTRIBUTES),
        ControlBitmapField("bmControls", controls=AS_ENDPOINT_CONTROLS),
        NumberStringsField("bLockDelayUnits", strings=LOCK_DELAY_UNITS),
        NumberField("wLockDelay", size=2),
    ))

ALL_TABLES: tuple[DescriptorTable, ...] = (
    UAC1_AC_HEADER,
    UAC2_AC_HEADER,
    UAC1_AC_INPUT_TERMINAL,
    UAC2_AC_INPUT_TERMINAL,
    UAC1_AC_OUTPUT_TERMINAL,
    UAC2_AC_OUTPUT_TERMINAL,
    UAC1_AC_MIXER_UNIT,
    UAC2_AC_MIXER_UNIT,
    UAC1_AC_SELECTOR_UNIT,
    UAC2_AC_SELECTOR_UNIT,
    UAC1_AC_FEATURE_UNIT,
    UAC2_AC_FEATURE_UNIT,
    UAC2_AC_EFFECT_UNIT,
    UAC1_AC_PROCESSING_UNIT,
    UAC2_AC_PROCESSING_UNIT,
    UAC1_AC_EXTENSION_UNIT,
    UAC2_AC_EXTENSION_UNIT,
    UAC2_AC_CLOCK_SOURCE,
    UAC2_AC_CLOCK_SELECTOR,
    UAC2_AC_CLOCK_MULTIPLIER,
    UAC2_AC_SAMPLE_RATE_CONVERTER,
    UAC1_AS_INTERFACE,
    UAC2_AS_INTERFACE,
    UAC1_AS_FORMAT_TYPE_I,
    UAC2_AS_FORMAT_TYPE_I,
    UAC1_AS_ISOCHRONOUS_ENDPOINT,
    UAC2_AS_ISOCHRONOUS_ENDPOINT,
)
