from __future__ import annotations

# Unsigned LEB128-style varint, 7 bit per byte, LSB group first.


def enc_varint(n: int) -> bytes:
    if n < 0:
        raise ValueError("varint: n < 0")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            break
    return bytes(out)


def dec_varint(buf: bytes, idx: int) -> tuple[int, int]:
    """Decode one varint at ``buf[idx]``. Return (value, next_idx)."""
    n = 0
    shift = 0
    while True:
        if idx >= len(buf):
            raise ValueError("varint: buffer troncato")
        b = buf[idx]
        idx += 1
        n |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            return n, idx
        shift += 7
        if shift > 63:
            raise ValueError("varint: overflow")
