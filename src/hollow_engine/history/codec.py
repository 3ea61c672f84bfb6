"""Binary framing for version-log records.

Each record is a fixed header followed by a zlib-compressed UTF-8 payload::

    magic(4) | timestamp_ms(int64) | word_count(uint32) | payload_len(uint32) | crc32(uint32)

All integers are big-endian. The magic doubles as a resync marker: when a
record fails to decode, the scanner searches forward for the next magic so a
damaged record never hides the ones after it.
"""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from hollow_engine.errors import VersionRecordCorrupt

MAGIC = b"HVR1"
HEADER = struct.Struct(">4sqIII")


@dataclass(frozen=True, slots=True)
class RawRecord:
    offset: int
    timestamp_ms: int
    word_count: int
    payload: bytes

    @property
    def size(self) -> int:
        return HEADER.size + len(self.payload)


def compress(content: str) -> bytes:
    return zlib.compress(content.encode("utf-8"))


def decompress(payload: bytes, *, offset: Optional[int] = None) -> str:
    try:
        return zlib.decompress(payload).decode("utf-8")
    except (zlib.error, UnicodeDecodeError) as exc:
        raise VersionRecordCorrupt(f"payload does not decode ({exc})", offset=offset) from exc


def encode_record(timestamp_ms: int, word_count: int, content: str) -> bytes:
    payload = compress(content)
    header = HEADER.pack(MAGIC, timestamp_ms, word_count, len(payload), zlib.crc32(payload))
    return header + payload


def encode_raw(record: RawRecord) -> bytes:
    header = HEADER.pack(
        MAGIC,
        record.timestamp_ms,
        record.word_count,
        len(record.payload),
        zlib.crc32(record.payload),
    )
    return header + record.payload


def decode_at(data: bytes, offset: int) -> RawRecord:
    """Decode the record starting at ``offset`` or raise ``VersionRecordCorrupt``."""

    end_of_header = offset + HEADER.size
    if end_of_header > len(data):
        raise VersionRecordCorrupt("truncated header", offset=offset)
    magic, timestamp_ms, word_count, length, checksum = HEADER.unpack_from(data, offset)
    if magic != MAGIC:
        raise VersionRecordCorrupt("bad magic", offset=offset)
    payload = data[end_of_header : end_of_header + length]
    if len(payload) != length:
        raise VersionRecordCorrupt("truncated payload", offset=offset)
    if zlib.crc32(payload) != checksum:
        raise VersionRecordCorrupt("checksum mismatch", offset=offset)
    return RawRecord(
        offset=offset, timestamp_ms=timestamp_ms, word_count=word_count, payload=payload
    )


def scan(
    data: bytes,
    *,
    on_corrupt: Optional[Callable[[VersionRecordCorrupt], None]] = None,
) -> Iterator[RawRecord]:
    """Yield every readable record, skipping damaged spans."""

    offset = 0
    while offset < len(data):
        try:
            record = decode_at(data, offset)
        except VersionRecordCorrupt as exc:
            if on_corrupt is not None:
                on_corrupt(exc)
            following = data.find(MAGIC, offset + 1)
            if following == -1:
                return
            offset = following
            continue
        yield record
        offset += record.size


__all__ = [
    "HEADER",
    "MAGIC",
    "RawRecord",
    "compress",
    "decode_at",
    "decompress",
    "encode_raw",
    "encode_record",
    "scan",
]
