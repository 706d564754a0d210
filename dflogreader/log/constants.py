"""DataFlash log format constants and magic numbers."""

# Record preamble: two sync bytes followed by the message type id
HEAD_BYTE1 = 0xA3
HEAD_BYTE2 = 0x95
PREAMBLE_SIZE = 3

# Field index capacity per format
MAX_FIELDS = 30

# Historical "field not present" offset. No real field can sit here while
# the preamble is non-empty.
OFFSET_ABSENT = 0

# Per-axis suffixes for vector fields (GyrX, GyrY, GyrZ)
AXES = "XYZ"

# The FMT record that declares every other format
FMT_TYPE = 128
FMT_NAME = "FMT"

# Fixed-length text fields in FMT records, plus room for the terminator
FMT_NAME_BUFLEN = 5
FMT_FORMAT_BUFLEN = 17
FMT_LABELS_BUFLEN = 65

# Scaling of the integer-encoded GPS ground vector
GROUND_SPEED_SCALE = 0.01   # cm/s -> m/s
GROUND_COURSE_SCALE = 0.01  # centidegrees -> degrees
