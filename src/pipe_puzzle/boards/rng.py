"""Deterministic seed hashing and the mulberry32 stream used by the generator."""

from __future__ import annotations

MASK_32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
_MULBERRY_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


def hash_string_to_int(text: str) -> int:
    """Fold a string into an unsigned 32-bit FNV-1a hash over its UTF-16 code units."""

    data = text.encode("utf-16-le", "surrogatepass")
    h = FNV_OFFSET_BASIS
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, FNV_PRIME)
    return h & MASK_32


class Mulberry32:
    """Small stateful PRNG; the same seed always yields the same stream."""

    def __init__(self, seed: int):
        self.state = int(seed) & MASK_32

    def random(self) -> float:
        self.state = (self.state + _MULBERRY_INCREMENT) & MASK_32
        x = self.state
        x = _imul(x ^ (x >> 15), x | 1)
        x ^= (x + _imul(x ^ (x >> 7), x | 61)) & MASK_32
        return ((x ^ (x >> 14)) & MASK_32) / _TWO_POW_32

    def randrange(self, n: int) -> int:
        """Uniform integer in [0, n)."""

        return int(self.random() * n)

    def choice(self, items):
        return items[self.randrange(len(items))]

    def shuffle_step(self, items: list, i: int) -> None:
        """Swap items[i] with a random item at or after it (one Fisher-Yates step)."""

        j = i + self.randrange(len(items) - i)
        items[i], items[j] = items[j], items[i]

    def shuffle(self, items: list) -> None:
        for i in range(len(items)):
            self.shuffle_step(items, i)


__all__ = ["MASK_32", "Mulberry32", "hash_string_to_int"]
