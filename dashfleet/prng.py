"""
Seeded pseudo-random helpers.

Everything here works on unsigned 32-bit integers with explicit wraparound so
that the same seed reproduces the same sequence on every run and platform:

- hash_to_seed: FNV-1a over the string's UTF-16 code units
- prng: Mulberry32 generator returning floats in [0, 1)
- shuffle_deterministic: Fisher-Yates driven by a seeded generator
"""

import math
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def hash_to_seed(s: str) -> int:
    h = FNV_OFFSET_BASIS
    data = s.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h ^ unit) * FNV_PRIME) & UINT32_MASK
    return h


def identity_seed(vehicle_id: int, name: str, *salt: str) -> int:
    """Seed for a vehicle's identity, optionally salted per derived metric."""
    key = f"{vehicle_id}|{name}"
    for part in salt:
        key += f"|{part}"
    return hash_to_seed(key)


def prng(seed: int) -> Callable[[], float]:
    """Mulberry32. Same seed and call count always give the same output."""
    state = seed & UINT32_MASK

    def next_float() -> float:
        nonlocal state
        state = (state + MULBERRY_INCREMENT) & UINT32_MASK
        t = state
        t = ((t ^ (t >> 15)) * (t | 1)) & UINT32_MASK
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & UINT32_MASK)) & UINT32_MASK
        return ((t ^ (t >> 14)) & UINT32_MASK) / TWO_POW_32

    return next_float


def shuffle_with(items: Sequence[T], rand: Callable[[], float]) -> List[T]:
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = math.floor(rand() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out


def shuffle_deterministic(items: Sequence[T], seed: int) -> List[T]:
    """Permuted copy of ``items``; the input is never mutated."""
    return shuffle_with(items, prng(seed))


def round_half_up(x: float) -> int:
    # round() is banker's rounding; displayed numbers round .5 upward
    return math.floor(x + 0.5)


def rand_between(rand: Callable[[], float], lo: int, hi: int) -> int:
    """Inclusive-bounds integer; a degenerate range consumes no draw."""
    if lo == hi:
        return lo
    return round_half_up(lo + rand() * (hi - lo))
