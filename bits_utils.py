import math
from typing import Iterable, List, Tuple


def pack_bits(bits: Iterable[int]) -> Tuple[bytes, int]:
    """
    Pack a 0/1 sequence MSB-first into bytes.
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for bit in bits:
        if bit not in (0, 1):
            raise ValueError(f"bits must be 0 or 1, got {bit!r}")
        acc = (acc << 1) | int(bit)
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        out.append((acc << pad_bits) & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int = 0) -> List[int]:
    if not 0 <= pad_bits <= 7:
        raise ValueError(f"pad_bits must be in 0..7, got {pad_bits}")
    if pad_bits and not packed:
        raise ValueError("pad_bits given for an empty buffer")

    out = []
    for byte in packed:
        for i in range(7, -1, -1):
            out.append((byte >> i) & 1)
    if pad_bits:
        del out[-pad_bits:]
    return out


def shannon_entropy(counts: Iterable[int]) -> float:
    """Entropy in bits/symbol of a count distribution: the lower bound on average code length."""
    counts = [c for c in counts if c > 0]
    total = sum(counts)
    if total == 0:
        return 0.0
    return -sum((c / total) * math.log2(c / total) for c in counts)
