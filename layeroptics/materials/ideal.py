"""Ideal Material Module

Constant-index material: the same complex refractive index at
every wavelength.
"""

from __future__ import annotations

from .base import BaseMaterial


class IdealMaterial(BaseMaterial):
    """A material with a wavelength-independent refractive index.

    Args:
        n (float): Real part of the refractive index.
        k (float, optional): Extinction coefficient. Negative values describe
            a medium with gain. Defaults to 0.
        name (str, optional): Label for the material.
    """

    def __init__(self, n: float, k: float = 0.0, name: str | None = None):
        super().__init__(name)
        self.index = float(n)
        self.absorp = float(k)

    def n(self, wavelength_um):
        return self.index

    def k(self, wavelength_um):
        return self.absorp

    def to_dict(self):
        data = super().to_dict()
        data.update({"n": self.index, "k": self.absorp})
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(data["n"], data.get("k", 0.0), data.get("name"))

    def __repr__(self):
        if self.absorp:
            return f"IdealMaterial(n={self.index}, k={self.absorp})"
        return f"IdealMaterial(n={self.index})"
