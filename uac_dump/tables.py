"""
Name tables for USB Audio Class descriptor fields.

Bit positions and small integer codes mapped to human-readable labels. Order
matters in every sequence below: the index is the bit position or code.
"""

# UAC 1.0 wChannelConfig bit meanings (Table 3-1)
UAC1_CHANNEL_NAMES: tuple[str, ...] = (
    "Left Front (L)",
    "Right Front (R)",
    "Center Front (C)",
    "Low Frequency Enhancement (LFE)",
    "Left Surround (LS)",
    "Right Surround (RS)",
    "Left of Center (LC)",
    "Right of Center (RC)",
    "Surround (S)",
    "Side Left (SL)",
    "Side Right (SR)",
    "Top (T)",
)

# UAC 2.0 bmChannelConfig bit meanings (Table 4-1); bits 26 and up are not named
UAC2_CHANNEL_NAMES: tuple[str, ...] = (
    "Front Left (FL)",
    "Front Right (FR)",
    "Front Center (FC)",
    "Low Frequency Effects (LFE)",
    "Back Left (BL)",
    "Back Right (BR)",
    "Front Left of Center (FLC)",
    "Front Right of Center (FRC)",
    "Back Center (BC)",
    "Side Left (SL)",
    "Side Right (SR)",
    "Top Center (TC)",
    "Top Front Left (TFL)",
    "Top Front Center (TFC)",
    "Top Front Right (TFR)",
    "Top Back Left (TBL)",
    "Top Back Center (TBC)",
    "Top Back Right (TBR)",
    "Top Front Left of Center (TFLC)",
    "Top Front Right of Center (TFRC)",
    "Left Low Frequency Effects (LLFE)",
    "Right Low Frequency Effects (RLFE)",
    "Top Side Left (TSL)",
    "Top Side Right (TSR)",
    "Bottom Center (BC)",
    "Back Left of Center (BLC)",
)

# ============================================================================
# Control names, one entry per control (1 bit in UAC 1.0, 2 bits in UAC 2.0)
# ============================================================================

HEADER_CONTROLS: tuple[str, ...] = ("Latency",)

INPUT_TERMINAL_CONTROLS: tuple[str, ...] = (
    "Copy Protect",
    "Connector",
    "Overload",
    "Cluster",
    "Underflow",
    "Overflow",
)

OUTPUT_TERMINAL_CONTROLS: tuple[str, ...] = (
    "Copy Protect",
    "Connector",
    "Overload",
    "Underflow",
    "Overflow",
)

MIXER_UNIT_CONTROLS: tuple[str, ...] = ("Cluster", "Underflow", "Overflow")

SELECTOR_UNIT_CONTROLS: tuple[str, ...] = ("Selector",)

# Shared by both revisions; UAC 1.0 stops at bit 12 of bmaControls
FEATURE_UNIT_CONTROLS: tuple[str, ...] = (
    "Mute",
    "Volume",
    "Bass",
    "Mid",
    "Treble",
    "Graphic Equalizer",
    "Automatic Gain",
    "Delay",
    "Bass Boost",
    "Loudness",
    "Input Gain",
    "Input Gain Pad",
    "Phase Inverter",
)

EXTENSION_UNIT_CONTROLS: tuple[str, ...] = (
    "Enable",
    "Cluster",
    "Underflow",
    "Overflow",
)

CLOCK_SOURCE_CONTROLS: tuple[str, ...] = ("Clock Frequency", "Clock Validity")

CLOCK_SELECTOR_CONTROLS: tuple[str, ...] = ("Clock Selector",)

CLOCK_MULTIPLIER_CONTROLS: tuple[str, ...] = ("Clock Numerator", "Clock Denominator")

AS_INTERFACE_CONTROLS: tuple[str, ...] = (
    "Active Alternate Setting",
    "Valid Alternate Setting",
)

AS_ENDPOINT_CONTROLS: tuple[str, ...] = ("Pitch", "Data Overrun", "Data Underrun")

# Two-bit control states (UAC 2.0 section 4.1), indexed by the field value
CONTROL_STATES: tuple[str, ...] = ("not present", "read-only", "reserved", "read/write")

# One-bit control states (UAC 1.0)
CONTROL_PRESENCE: tuple[str, ...] = ("not present", "present")

# ============================================================================
# Clock sources
# ============================================================================

CLOCK_SOURCE_TYPES: tuple[str, ...] = (
    "External",
    "Internal fixed",
    "Internal variable",
    "Internal programmable",
)

CLOCK_SYNCED_TO_SOF = "(synchronized to SOF)"

# ============================================================================
# Audio data formats (Audio Data Formats 1.0, Appendix A.1)
# ============================================================================

FORMAT_TYPE_I_NAMES: tuple[str, ...] = (
    "TYPE_I_UNDEFINED",
    "PCM",
    "PCM8",
    "IEEE_FLOAT",
    "ALAW",
    "MULAW",
)

FORMAT_TYPE_II_NAMES: tuple[str, ...] = (
    "TYPE_II_UNDEFINED",
    "MPEG",
    "AC-3",
)

FORMAT_TYPE_III_NAMES: tuple[str, ...] = (
    "TYPE_III_UNDEFINED",
    "IEC1937_AC-3",
    "IEC1937_MPEG-1_Layer1",
    "IEC1937_MPEG-Layer2/3/NOEXT",
    "IEC1937_MPEG-2_EXT",
    "IEC1937_MPEG-2_Layer1_LS",
    "IEC1937_MPEG-2_Layer2/3_LS",
)

# wFormatTag is 0xTNNN: T selects the table, NNN indexes it
FORMAT_TAG_TABLES: dict[int, tuple[str, ...]] = {
    0x0: FORMAT_TYPE_I_NAMES,
    0x1: FORMAT_TYPE_II_NAMES,
    0x2: FORMAT_TYPE_III_NAMES,
}

# UAC 2.0 bmFormats for Type I (Audio Data Formats 2.0, Table A-2)
UAC2_TYPE_I_FORMAT_BITS: dict[int, str] = {
    0: "PCM",
    1: "PCM8",
    2: "IEEE_FLOAT",
    3: "ALAW",
    4: "MULAW",
    31: "TYPE_I_RAW_DATA",
}

# ============================================================================
# Isochronous audio data endpoints
# ============================================================================

UAC1_ENDPOINT_ATTRIBUTES: dict[int, str] = {
    0: "Sampling Frequency",
    1: "Pitch",
    2: "Audio Data Format Control",
    7: "MaxPacketsOnly",
}

UAC2_ENDPOINT_ATTRIBUTES: dict[int, str] = {
    7: "MaxPacketsOnly",
}

LOCK_DELAY_UNITS: tuple[str, ...] = (
    "Undefined",
    "Milliseconds",
    "Decoded PCM samples",
)

# ============================================================================
# Terminal types (Universal Serial Bus Device Class Definition for Terminal
# Types)
# ============================================================================

TERMINAL_TYPE_NAMES: dict[int, str] = {
    0x0100: "USB Undefined",
    0x0101: "USB Streaming",
    0x01FF: "USB Vendor Specific",
    0x0200: "Input Undefined",
    0x0201: "Microphone",
    0x0202: "Desktop Microphone",
    0x0203: "Personal Microphone",
    0x0204: "Omni-directional Microphone",
    0x0205: "Microphone Array",
    0x0206: "Processing Microphone Array",
    0x0300: "Output Undefined",
    0x0301: "Speaker",
    0x0302: "Headphones",
    0x0303: "Head Mounted Display Audio",
    0x0304: "Desktop Speaker",
    0x0305: "Room Speaker",
    0x0306: "Communication Speaker",
    0x0307: "Low Frequency Effects Speaker",
    0x0400: "Bi-directional Undefined",
    0x0401: "Handset",
    0x0402: "Headset",
    0x0403: "Speakerphone (no echo reduction)",
    0x0404: "Echo-suppressing Speakerphone",
    0x0405: "Echo-canceling Speakerphone",
    0x0500: "Telephony Undefined",
    0x0501: "Phone Line",
    0x0502: "Telephone",
    0x0503: "Down Line Phone",
    0x0600: "External Undefined",
    0x0601: "Analog Connector",
    0x0602: "Digital Audio Interface",
    0x0603: "Line Connector",
    0x0604: "Legacy Audio Connector",
    0x0605: "S/PDIF Interface",
    0x0606: "1394 DA Stream",
    0x0607: "1394 DV Stream",
    0x0700: "Embedded Undefined",
    0x0701: "Level Calibration Noise Source",
    0x0702: "Equalization Noise",
    0x0703: "CD Player",
    0x0704: "DAT",
    0x0705: "DCC",
    0x0706: "MiniDisk",
    0x0707: "Analog Tape",
    0x0708: "Phonograph",
    0x0709: "VCR Audio",
    0x070A: "Video Disc Audio",
    0x070B: "DVD Audio",
    0x070C: "TV Tuner Audio",
    0x070D: "Satellite Receiver Audio",
    0x070E: "Cable Tuner Audio",
    0x070F: "DSS Audio",
    0x0710: "Radio Receiver",
    0x0711: "Radio Transmitter",
    0x0712: "Multi-track Recorder",
    0x0713: "Synthesizer",
    0x0714: "Piano",
    0x0715: "Guitar",
    0x0716: "Drums/Rhythm",
    0x0717: "Other Musical Instrument",
}

UNDEFINED = "undefined"


def get_terminal_type_name(type_code: int) -> str:
    """Get human-readable name for a terminal type code."""
    return TERMINAL_TYPE_NAMES.get(type_code, UNDEFINED)
