"""
Permutations of row and column indices.

A permutation p of size n sends element i to position p[i]. It can be
converted to an inversion sequence, a list of pairwise swaps that applies
the same reordering in place: for each i in order, swap positions i and
inv[i] whenever they differ.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from pylinalg.core.exceptions import ValidationError
from pylinalg.core.validation import check_not_none


class Permutation:
    """
    Immutable permutation of 0..n-1.

    Args:
        indices: indices[i] is the position element i moves to

    Raises:
        ValidationError: If indices is not a permutation of 0..n-1
    """

    def __init__(self, indices: Iterable[int]):
        check_not_none(indices, "indices")
        values = np.asarray(list(indices))
        if values.ndim != 1 or values.size == 0:
            raise ValidationError("indices: expected a non-empty 1-D sequence of integers")
        if not np.issubdtype(values.dtype, np.integer):
            raise ValidationError(f"indices: expected integers, got dtype {values.dtype}")
        if not np.array_equal(np.sort(values), np.arange(values.size)):
            raise ValidationError(
                f"indices: not a permutation of 0..{values.size - 1}: {values.tolist()}"
            )
        self._indices = tuple(int(v) for v in values)

    @property
    def dimension(self) -> int:
        return len(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def __getitem__(self, index: int) -> int:
        return self._indices[index]

    def __iter__(self):
        return iter(self._indices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._indices == other._indices

    def __hash__(self) -> int:
        return hash(self._indices)

    def __repr__(self) -> str:
        return f"Permutation({list(self._indices)})"

    def inverse(self) -> Permutation:
        """The permutation undoing this one."""
        inverse = [0] * self.dimension
        for i, target in enumerate(self._indices):
            inverse[target] = i
        return Permutation(inverse)

    def to_inversions(self) -> list[int]:
        """
        Inversion sequence equivalent to this permutation.

        Applying swap(i, inv[i]) for i = 0..n-1 moves element i to p[i].
        """
        idx = list(self._indices)
        for i in range(len(idx)):
            if idx[i] != i:
                q = next(k for k in range(i + 1, len(idx)) if idx[k] == i)
                idx[i], idx[q] = q, idx[i]
        return idx

    @classmethod
    def from_inversions(cls, inversions: Sequence[int]) -> Permutation:
        """
        Rebuild a permutation from its inversion sequence.

        Raises:
            ValidationError: If an entry is out of range
        """
        check_not_none(inversions, "inversions")
        n = len(inversions)
        positions = list(range(n))
        for i in reversed(range(n)):
            k = inversions[i]
            if not 0 <= k < n:
                raise ValidationError(f"inversions: entry {k} at {i} out of range [0, {n})")
            positions[i], positions[k] = positions[k], positions[i]
        return cls(positions)

    def to_array(self) -> NDArray[np.intp]:
        return np.asarray(self._indices, dtype=np.intp)
