"""Complex 2x2 matrix used to compose transfer matrices."""

from __future__ import annotations

import numbers
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ComplexMatrix2x2:
    """Immutable row-major 2x2 complex matrix.

    ``@`` is the matrix product; ``*`` and ``/`` scale every entry by a
    scalar. Entries are read with ``m[row, col]``.

    Examples:
        >>> m = ComplexMatrix2x2(1, 2, 3, 4)
        >>> (m @ ComplexMatrix2x2.identity()) == m
        True
        >>> (m / 2)[1, 0]
        (1.5+0j)
    """

    a00: complex = 1
    a01: complex = 0
    a10: complex = 0
    a11: complex = 1

    def __post_init__(self):
        for name in ("a00", "a01", "a10", "a11"):
            object.__setattr__(self, name, complex(getattr(self, name)))

    @classmethod
    def identity(cls) -> ComplexMatrix2x2:
        return cls(1, 0, 0, 1)

    @classmethod
    def diagonal(cls, d0: complex, d1: complex) -> ComplexMatrix2x2:
        return cls(d0, 0, 0, d1)

    def __getitem__(self, index: tuple[int, int]) -> complex:
        row, col = index
        if row not in (0, 1) or col not in (0, 1):
            raise IndexError(f"index {index} out of range for a 2x2 matrix")
        return (self.a00, self.a01, self.a10, self.a11)[2 * row + col]

    def __matmul__(self, other):
        if not isinstance(other, ComplexMatrix2x2):
            return NotImplemented
        return ComplexMatrix2x2(
            self.a00 * other.a00 + self.a01 * other.a10,
            self.a00 * other.a01 + self.a01 * other.a11,
            self.a10 * other.a00 + self.a11 * other.a10,
            self.a10 * other.a01 + self.a11 * other.a11,
        )

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return ComplexMatrix2x2(
            self.a00 * scalar,
            self.a01 * scalar,
            self.a10 * scalar,
            self.a11 * scalar,
        )

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        if not isinstance(scalar, numbers.Number):
            return NotImplemented
        return ComplexMatrix2x2(
            self.a00 / scalar,
            self.a01 / scalar,
            self.a10 / scalar,
            self.a11 / scalar,
        )

    def to_array(self) -> np.ndarray:
        """Entries as a (2, 2) complex128 array."""
        return np.array([[self.a00, self.a01], [self.a10, self.a11]], dtype=complex)
