"""HFK container (v1): header + Huffman bitstream.

Layout:
  [MAGIC(3)="HFK" | VER(1) | FLAGS(1) | N(varint) | NUM_USED(varint)
   | (DELTA_SYM(varint) FREQ(varint)) * NUM_USED
   | SHA256(32) if FLAGS & FLAG_SHA256
   | BITSTREAM(...) to EOF]

Frequencies are stored sorted by symbol with delta-coded symbols, so the
decoder can rebuild exactly the same tree (deterministic build) and stop
after N symbols, ignoring the zero padding of the last byte.
"""

from __future__ import annotations

from dataclasses import dataclass

from huffkit.core.frequency import freq_to_used, used_to_freq
from huffkit.core.varint import dec_varint, enc_varint
from huffkit.errors import BadMagic, CorruptPayload, UnsupportedVersion

MAGIC = b"HFK"
VERSION_V1 = 1

FLAG_SHA256 = 0x01
_KNOWN_FLAGS = FLAG_SHA256

SHA256_LEN = 32

# Worst case: fixed part + N + NUM_USED + 256 * (sym + freq) + sha256
HEADER_MAX = 3 + 1 + 1 + 10 + 3 + 256 * (2 + 10) + SHA256_LEN


@dataclass(frozen=True)
class ContainerHeader:
    n: int
    freq: dict[int, int]
    sha256: bytes | None
    header_len: int = 0


def pack_header(n: int, freq: dict[int, int], sha256: bytes | None = None) -> bytes:
    used = freq_to_used(freq)
    if sum(f for _, f in used) != n:
        raise ValueError("somma frequenze != N")
    if sha256 is not None and len(sha256) != SHA256_LEN:
        raise ValueError("sha256: lunghezza non valida")

    flags = FLAG_SHA256 if sha256 is not None else 0

    out = bytearray()
    out += MAGIC
    out.append(VERSION_V1)
    out.append(flags)
    out += enc_varint(n)
    out += enc_varint(len(used))
    prev = 0
    for sym, f in used:
        out += enc_varint(sym - prev)
        out += enc_varint(f)
        prev = sym
    if sha256 is not None:
        out += sha256
    return bytes(out)


def unpack_header(blob: bytes) -> ContainerHeader:
    """Parse the header at the start of ``blob``.

    ``blob`` may hold the whole file or just its first HEADER_MAX bytes.
    """
    if len(blob) < len(MAGIC) + 2:
        if blob[: len(MAGIC)] != MAGIC[: len(blob)]:
            raise BadMagic("magic non valido")
        raise CorruptPayload("header troncato")
    if blob[: len(MAGIC)] != MAGIC:
        raise BadMagic(f"magic non valido: {blob[:len(MAGIC)]!r}")

    idx = len(MAGIC)
    ver = blob[idx]
    idx += 1
    if ver != VERSION_V1:
        raise UnsupportedVersion(f"versione container non supportata: {ver}")

    flags = blob[idx]
    idx += 1
    if flags & ~_KNOWN_FLAGS:
        raise CorruptPayload(f"flags sconosciuti: 0x{flags:02x}")

    try:
        n, idx = dec_varint(blob, idx)
        num_used, idx = dec_varint(blob, idx)
        if num_used > 256:
            raise CorruptPayload(f"NUM_USED fuori range: {num_used}")
        used: list[tuple[int, int]] = []
        sym = 0
        for i in range(num_used):
            delta, idx = dec_varint(blob, idx)
            if i > 0 and delta == 0:
                raise CorruptPayload("simboli non strettamente crescenti")
            sym += delta
            f, idx = dec_varint(blob, idx)
            if f == 0:
                raise CorruptPayload(f"frequenza nulla per simbolo {sym}")
            used.append((sym, f))
        freq = used_to_freq(used)
    except CorruptPayload:
        raise
    except ValueError as err:
        raise CorruptPayload(f"header: {err}") from err

    if sum(freq.values()) != n:
        raise CorruptPayload(f"somma frequenze ({sum(freq.values())}) != N ({n})")

    sha256: bytes | None = None
    if flags & FLAG_SHA256:
        if idx + SHA256_LEN > len(blob):
            raise CorruptPayload("header troncato (sha256)")
        sha256 = bytes(blob[idx : idx + SHA256_LEN])
        idx += SHA256_LEN

    return ContainerHeader(n=n, freq=freq, sha256=sha256, header_len=idx)
