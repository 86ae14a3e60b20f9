"""
Register the MessagePack timestamp extension (id -1) for datetime values.

Run from repo root: PYTHONPATH=src python examples/timestamp_extension.py
"""

import os
import struct
import sys
from datetime import datetime, timedelta, timezone

if getattr(sys, "frozen", False) is False:
    _root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    _src = os.path.join(_root, "src")
    if _src not in sys.path:
        sys.path.insert(0, _src)

from picopack import Extension, decode, encode, register_extension

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def serialize(dt: datetime, _ext_id: int) -> bytes:
    delta = dt - EPOCH
    seconds = delta.days * 86400 + delta.seconds
    nanoseconds = delta.microseconds * 1000
    if seconds >> 34 == 0:
        packed = (nanoseconds << 34) | seconds
        if packed <= 0xFFFFFFFF:
            return struct.pack(">I", packed)  # timestamp 32
        return struct.pack(">Q", packed)  # timestamp 64
    return struct.pack(">Iq", nanoseconds, seconds)  # timestamp 96


def deserialize(payload: bytes, _ext_id: int) -> datetime:
    if len(payload) == 4:
        (seconds,) = struct.unpack(">I", payload)
        nanoseconds = 0
    elif len(payload) == 8:
        (packed,) = struct.unpack(">Q", payload)
        nanoseconds, seconds = packed >> 34, packed & 0x3FFFFFFFF
    else:
        nanoseconds, seconds = struct.unpack(">Iq", payload)
    return EPOCH + timedelta(seconds=seconds, microseconds=nanoseconds // 1000)


register_extension(Extension(-1, serialize, deserialize, type=datetime))

now = datetime.now(timezone.utc)
far_future = datetime(2600, 1, 1, tzinfo=timezone.utc)
for dt in (EPOCH + timedelta(seconds=1), now, far_future):
    wire = encode({"at": dt})
    back, _ = decode(wire)
    print(f"{dt.isoformat():<34} {len(wire):>3} bytes  {wire.hex()}")
    assert back["at"] == dt
