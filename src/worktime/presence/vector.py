"""Fixed-length presence bit-vectors and their OR-combine.

A :class:`PresenceVector` holds one boolean per time-of-day bucket of a
single calendar date.  Vectors are immutable; merging two vectors builds
a new one.  The combine operator is bucket-wise logical OR, which is
associative, commutative and idempotent with the all-false vector as
its identity, so same-day vectors can be merged in any order.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Iterator, Sequence

from worktime.core.defaults import ACTIVE_CHAR, INACTIVE_CHAR


@dataclass(frozen=True)
class PresenceVector:
    """Ordered per-bucket presence flags for one day."""

    bits: tuple[bool, ...]

    @classmethod
    def empty(cls, length: int) -> PresenceVector:
        """The all-false vector, identity of :func:`combine`."""
        if length <= 0:
            raise ValueError(f"length must be positive, got {length}")
        return cls((False,) * length)

    @classmethod
    def from_span(cls, length: int, first: int, last: int) -> PresenceVector:
        """Vector with buckets ``first..last`` (inclusive) set."""
        if not 0 <= first <= last < length:
            raise ValueError(
                f"bucket span [{first}, {last}] outside [0, {length - 1}]"
            )
        return cls(tuple(first <= i <= last for i in range(length)))

    @classmethod
    def from_indices(cls, length: int, indices: Iterable[int]) -> PresenceVector:
        active = set(indices)
        bad = [i for i in active if not 0 <= i < length]
        if bad:
            raise ValueError(f"bucket indices {sorted(bad)} outside [0, {length - 1}]")
        return cls(tuple(i in active for i in range(length)))

    def __len__(self) -> int:
        return len(self.bits)

    def __iter__(self) -> Iterator[bool]:
        return iter(self.bits)

    def __getitem__(self, index: int) -> bool:
        return self.bits[index]

    def __or__(self, other: PresenceVector) -> PresenceVector:
        if not isinstance(other, PresenceVector):
            return NotImplemented
        return combine(self, other)

    @property
    def worked_buckets(self) -> int:
        return sum(self.bits)

    @property
    def active_indices(self) -> list[int]:
        return [i for i, bit in enumerate(self.bits) if bit]

    def render(self, active: str = ACTIVE_CHAR, inactive: str = INACTIVE_CHAR) -> str:
        """One character per bucket, chronological left to right."""
        return "".join(active if bit else inactive for bit in self.bits)


def combine(left: PresenceVector, right: PresenceVector) -> PresenceVector:
    """Bucket-wise OR of two equal-length vectors.

    Raises:
        ValueError: If the vectors differ in length.
    """
    if len(left) != len(right):
        raise ValueError(
            f"Cannot combine vectors of length {len(left)} and {len(right)}"
        )
    return PresenceVector(tuple(a or b for a, b in zip(left.bits, right.bits)))


def combine_all(vectors: Iterable[PresenceVector], length: int) -> PresenceVector:
    """Fold *vectors* with :func:`combine`, starting from the empty vector."""
    return reduce(combine, vectors, PresenceVector.empty(length))


def parse_rendering(text: Sequence[str], active: str = ACTIVE_CHAR) -> PresenceVector:
    """Inverse of :meth:`PresenceVector.render` for exported reports."""
    return PresenceVector(tuple(ch == active for ch in text))
