"""Library for reading TZif zone data files.

The TZif format (rfc8536) is used by the system zoneinfo database and the
tzdata python package. A file has a version 1 header and data block with
32-bit times, followed for version 2+ by a second header and data block
with 64-bit times and a footer holding a POSIX TZ string that describes
transitions after the last one in the data block.
"""

from __future__ import annotations

import enum
import io
import logging
import struct
from dataclasses import dataclass
from functools import cache

from .model import LeapSecond, LocalTimeType, TransitionRecord, TzifData
from .tz_rule import parse_tz_rule

__all__ = ["read_tzif"]

_LOGGER = logging.getLogger(__name__)

# Records specifying the local time type
_LOCAL_TIME_TYPE_STRUCT_FORMAT = "".join(
    [
        ">",  # Use standard size of packed value bytes
        "l",  # utoff (4 bytes): Number of seconds to add to UTC to determine local time
        "?",  # dst (1 byte): Indicates the time is DST (1) or standard (0)
        "B",  # idx (1 byte): Offset index into the time zone designation octets
    ]
)
_LOCAL_TIME_RECORD_SIZE = 6


class _TZifVersion(enum.Enum):
    """Defines the size of time values for each data block version."""

    V1 = (b"\x00", 4, "l")  # 32-bit in v1
    V2 = (b"2", 8, "q")  # 64-bit in v2+

    def __init__(self, version: bytes, time_size: int, time_format: str):
        self.version = version
        self.time_size = time_size
        self.time_format = time_format


@dataclass
class _Header:
    """TZif header information, counts of each record in the data block."""

    SIZE = 44  # Total size of the header to read
    STRUCT_FORMAT = "".join(
        [
            ">",  # Use standard size of packed value bytes
            "4s",  # magic (4 bytes)
            "c",  # version (1 byte)
            "15x",  # unused
            "6l",  # isutccnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt
        ]
    )
    MAGIC = b"TZif"

    version: bytes
    isutccnt: int
    isstdcnt: int
    leapcnt: int
    timecnt: int
    typecnt: int
    charcnt: int

    @classmethod
    def read(cls, buf: io.BytesIO) -> _Header:
        """Read and validate a header from the buffer."""
        header_bytes = buf.read(cls.SIZE)
        if len(header_bytes) != cls.SIZE:
            raise ValueError("zoneinfo file header was truncated")
        (magic, version, *counts) = struct.unpack(cls.STRUCT_FORMAT, header_bytes)
        if magic != cls.MAGIC:
            raise ValueError("zoneinfo file did not contain magic header")
        header = cls(version, *counts)
        if header.isutccnt not in (0, header.typecnt):
            raise ValueError(
                f"UTC/local indicators in datablock mismatched ({header.isutccnt}, {header.typecnt})"
            )
        if header.isstdcnt not in (0, header.typecnt):
            raise ValueError(
                f"standard/wall indicators in datablock mismatched ({header.isstdcnt}, {header.typecnt})"
            )
        return header

    def verify_records(self) -> None:
        """Verify the data block has the records needed to compute local time."""
        if self.typecnt == 0:
            raise ValueError("Local time records in block is zero")
        if self.charcnt == 0:
            raise ValueError("Total number of octets is zero")


def _read_indicators(buf: io.BytesIO, count: int) -> list[bool]:
    """Read a series of one byte boolean indicators."""
    if not count:
        return []
    return list(struct.unpack(f">{count}?", buf.read(count)))


def _read_datablock(header: _Header, version: _TZifVersion, buf: io.BytesIO) -> TzifData:
    """Read the records of a data block from the buffer."""
    # A series of transition times in ascending order
    transition_times = struct.unpack(
        f">{header.timecnt}{version.time_format}",
        buf.read(header.timecnt * version.time_size),
    )

    # Indexes into the local time type records for each transition time
    transition_types = struct.unpack(f">{header.timecnt}B", buf.read(header.timecnt))

    raw_types = [
        struct.unpack(_LOCAL_TIME_TYPE_STRUCT_FORMAT, buf.read(_LOCAL_TIME_RECORD_SIZE))
        for _ in range(header.typecnt)
    ]

    # An array of NUL-terminated time zone designation strings
    tz_designations = buf.read(header.charcnt)

    @cache
    def get_tz_designation(idx: int) -> str:
        """Find the null terminated string starting at the specified index."""
        end = tz_designations.find(b"\x00", idx)
        return tz_designations[idx:end].decode("UTF-8")

    local_time_types = [
        LocalTimeType(utoff, dst, get_tz_designation(idx)) for (utoff, dst, idx) in raw_types
    ]

    leap_seconds = [
        LeapSecond._make(
            struct.unpack(
                f">{version.time_format}l",
                buf.read(version.time_size + 4),  # occur + corr
            )
        )
        for _ in range(header.leapcnt)
    ]

    # The standard/wall and UTC/local indicators are indexed by local time
    # type and describe how the transition times were originally specified.
    isstd = _read_indicators(buf, header.isstdcnt) or [False] * header.typecnt
    isut = _read_indicators(buf, header.isutccnt) or [False] * header.typecnt

    transitions = []
    for transition_time, type_index in zip(transition_times, transition_types):
        if type_index >= len(local_time_types):
            raise ValueError(
                f"transition_type out of bounds {type_index} >= {len(local_time_types)}"
            )
        if isut[type_index] and not isstd[type_index]:
            raise ValueError("isutccnt was True but isstdcnt was False")
        transitions.append(
            TransitionRecord(
                transition_time,
                local_time_types[type_index],
                isstd[type_index],
                isut[type_index],
            )
        )
    return TzifData(transitions, local_time_types, leap_seconds)


def read_tzif(content: bytes) -> TzifData:
    """Read the TZif file and parse and return the zone records."""
    buf = io.BytesIO(content)

    header = _Header.read(buf)
    if header.version == _TZifVersion.V1.version:
        header.verify_records()
        return _read_datablock(header, _TZifVersion.V1, buf)

    # Skip the v1 data block, the v2+ block has the same records with 64-bit times
    _read_datablock(header, _TZifVersion.V1, buf)
    header = _Header.read(buf)
    header.verify_records()
    data = _read_datablock(header, _TZifVersion.V2, buf)

    # V2+ footer holds a TZ string between two newlines
    parts = buf.read().decode("UTF-8").split("\n")
    if len(parts) != 3:
        raise ValueError("Failed to read TZ footer")
    if parts[1]:
        _LOGGER.debug("Parsing TZ footer rule: %s", parts[1])
        data.rule = parse_tz_rule(parts[1])
    return data
