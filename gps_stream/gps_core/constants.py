"""GPS/NMEA protocol constants and configuration defaults."""

# Sentence framing
START_MARKER = b"$"
CHECKSUM_MARKER = "*"
FIELD_DELIMITER = ","
CR = 0x0D
LF = 0x0A

# NMEA 0183 caps a sentence at 82 characters; u-blox and MediaTek receivers
# exceed that with proprietary and GSV extensions, so allow some headroom.
MAX_SENTENCE_LENGTH = 128

# "$" + 5 character address + terminator
MIN_SENTENCE_LENGTH = 8

# Accept a bare LF as a terminator when the receiver omits the CR.
ALLOW_BARE_LF = True

# Reject sentences that carry no "*HH" suffix.
REQUIRE_CHECKSUM = True

# Two-digit years at or above the pivot belong to the 1900s (RMC "230394"
# is 1994-03-23); anything below lands in the 2000s. Not Y2.1K-safe.
CENTURY_PIVOT = 80

# Speed conversion factors
KMH_PER_KNOT = 1.852
MPH_PER_KNOT = 1.15077945

# Fix mode mapping (from NMEA GSA sentence)
FIX_MODE_MAP = {
    1: "No fix",
    2: "2D",
    3: "3D",
}

# Default serial configuration
DEFAULT_SERIAL_PORT = "/dev/serial0"
DEFAULT_BAUD_RATE = 9600
DEFAULT_BYTESIZE = 8
DEFAULT_PARITY = "N"
DEFAULT_STOPBITS = 1
DEFAULT_READ_TIMEOUT = 1.0
DEFAULT_RECONNECT_DELAY = 3.0

# Framer / reader loop
DEFAULT_READ_SIZE = 256
DEFAULT_POLL_INTERVAL = 0.05
