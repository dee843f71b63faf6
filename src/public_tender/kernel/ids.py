"""
Identifiers for events, commands and event streams

Events and commands get time-ordered UUIDv7-style ids so the log sorts
naturally. Tenders themselves are numbered 1, 2, 3... and each tender owns
one event stream named after its number.
"""

import secrets
import time

ACCESS_CONTROL_STREAM = "access-control"
TENDER_STREAM_PREFIX = "tender-"


def generate_id() -> str:
    """
    Generate a UUIDv7-like identifier (time-ordered UUID)

    First 48 bits carry the Unix timestamp in milliseconds, the rest is
    random apart from the version and variant nibbles.

    Returns:
        Sortable UUID string (e.g., "01908e9a-3b87-7000-8000-123456789abc")
    """
    timestamp_48 = int(time.time() * 1000) & 0xFFFFFFFFFFFF
    rand_12 = secrets.randbits(12)
    rand_62 = secrets.randbits(62)

    time_high = (timestamp_48 >> 32) & 0xFFFF
    time_mid = (timestamp_48 >> 16) & 0xFFFF
    time_low = timestamp_48 & 0xFFFF
    version_and_rand = 0x7000 | rand_12
    clock_seq_and_variant = 0x8000 | ((rand_62 >> 48) & 0x3FFF)
    node = rand_62 & 0xFFFFFFFFFFFF

    return (
        f"{time_high:04x}{time_mid:04x}-"
        f"{time_low:04x}-"
        f"{version_and_rand:04x}-"
        f"{clock_seq_and_variant:04x}-"
        f"{node:012x}"
    )


def tender_stream_id(tender_id: int) -> str:
    """Event stream holding a tender and all of its offers"""
    return f"{TENDER_STREAM_PREFIX}{tender_id}"
