"""
Encode and decode plain Python values.

Run from repo root: PYTHONPATH=src python examples/basic.py
"""

import os
import sys

if getattr(sys, "frozen", False) is False:
    _root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    _src = os.path.join(_root, "src")
    if _src not in sys.path:
        sys.path.insert(0, _src)

from picopack import DecodeError, decode, decode_many, encode, encode_many

message = {"id": 7, "name": "sensor-a", "values": [1.5, 0.1, -3], "raw": b"\x00\xff"}
wire = encode(message)
print("encoded  :", wire.hex())

value, end = decode(wire)
print("decoded  :", value)
print("consumed :", end, "of", len(wire), "bytes")

# Several values back to back in one buffer
stream = encode_many("header", 1, 2, 3)
print("stream   :", decode_many(stream))

# A truncated buffer fails cleanly
try:
    decode(wire[:-1])
except DecodeError as exc:
    print("truncated:", exc)
