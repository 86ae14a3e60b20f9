"""
MessagePack tag bytes. Fix-forms pack the value or length into the low bits
of the tag; everything else is followed by a big-endian length or payload.
"""

from __future__ import annotations

POSITIVE_FIXINT_MAX = 0x7F
FIXMAP = 0x80
FIXMAP_MAX = 0x8F
FIXARRAY = 0x90
FIXARRAY_MAX = 0x9F
FIXSTR = 0xA0
FIXSTR_MAX = 0xBF
NIL = 0xC0
# 0xc1 is never used
FALSE = 0xC2
TRUE = 0xC3
BIN8 = 0xC4
BIN16 = 0xC5
BIN32 = 0xC6
EXT8 = 0xC7
EXT16 = 0xC8
EXT32 = 0xC9
FLOAT32 = 0xCA
FLOAT64 = 0xCB
UINT8 = 0xCC
UINT16 = 0xCD
UINT32 = 0xCE
UINT64 = 0xCF
INT8 = 0xD0
INT16 = 0xD1
INT32 = 0xD2
INT64 = 0xD3
FIXEXT1 = 0xD4
FIXEXT2 = 0xD5
FIXEXT4 = 0xD6
FIXEXT8 = 0xD7
FIXEXT16 = 0xD8
STR8 = 0xD9
STR16 = 0xDA
STR32 = 0xDB
ARRAY16 = 0xDC
ARRAY32 = 0xDD
MAP16 = 0xDE
MAP32 = 0xDF
NEGATIVE_FIXINT = 0xE0

# payload width -> fixext tag
FIXEXT_BY_WIDTH = {1: FIXEXT1, 2: FIXEXT2, 4: FIXEXT4, 8: FIXEXT8, 16: FIXEXT16}
WIDTH_BY_FIXEXT = {tag: width for width, tag in FIXEXT_BY_WIDTH.items()}

UINT64_MAX = 0xFFFFFFFFFFFFFFFF
INT64_MIN = -0x8000000000000000
UINT32_MAX = 0xFFFFFFFF

DEFAULT_MAX_DEPTH = 128
