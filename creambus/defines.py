"""Sizes and limits shared by the bus and its buffers."""

LENGTH_SIZE = 4
"""Width in bytes of length and count fields in the built-in protocols."""

PAYLOAD_SIZE = 28
"""Number of bytes available for data inside one message."""

MESSAGE_SIZE = 32
"""Exact size in bytes of every message on the bus."""

USIZE_MAX = 2**64 - 1
ISIZE_MAX = 2**63 - 1

TARGET_ALIGN = 64
MAX_SIZE = ISIZE_MAX - TARGET_ALIGN
KB = 1024
MB = KB * KB
DEFAULT_SLICES = 256
DEFAULT_SLICE_SIZE = KB * 512
METADATA = 64
SPECIAL_DATA_OFFSET = 64