"""Tabulated Material Module

Refractive index from measured (wavelength, n, k) samples, linearly
interpolated between table points.
"""

from __future__ import annotations

import numpy as np
from scipy.interpolate import interp1d

from .base import BaseMaterial


class TabulatedMaterial(BaseMaterial):
    """Material defined by a table of optical constants.

    Args:
        wavelength_um (array_like): Strictly increasing wavelengths in microns.
        n (array_like): Real part of the index at each wavelength.
        k (array_like, optional): Extinction coefficient at each wavelength.
            Defaults to zeros.
        name (str, optional): Label for the material.

    Raises:
        ValueError: If the table has fewer than two points, mismatched
            lengths, or wavelengths that are not strictly increasing.
    """

    def __init__(self, wavelength_um, n, k=None, name: str | None = None):
        super().__init__(name)
        wl = np.asarray(wavelength_um, dtype=np.float64)
        n = np.asarray(n, dtype=np.float64)
        k = np.zeros_like(n) if k is None else np.asarray(k, dtype=np.float64)

        if wl.ndim != 1 or wl.size < 2:
            raise ValueError("Tabulated data needs at least two wavelengths")
        if n.shape != wl.shape or k.shape != wl.shape:
            raise ValueError("wavelength, n and k must have the same length")
        if np.any(np.diff(wl) <= 0):
            raise ValueError("Tabulated wavelengths must be strictly increasing")

        self.wavelength = wl
        self.n_values = n
        self.k_values = k
        self._n_interp = interp1d(wl, n, kind="linear")
        self._k_interp = interp1d(wl, k, kind="linear")

    def _check_range(self, wavelength_um):
        wl = np.atleast_1d(wavelength_um)
        if np.any(wl < self.wavelength[0]) or np.any(wl > self.wavelength[-1]):
            raise ValueError(
                f"Wavelength {wavelength_um} µm is outside the tabulated range "
                f"[{self.wavelength[0]}, {self.wavelength[-1]}] µm"
            )

    def n(self, wavelength_um):
        self._check_range(wavelength_um)
        return self._n_interp(wavelength_um)

    def k(self, wavelength_um):
        self._check_range(wavelength_um)
        return self._k_interp(wavelength_um)

    def to_dict(self):
        data = super().to_dict()
        data.update(
            {
                "wavelength_um": self.wavelength.tolist(),
                "n": self.n_values.tolist(),
                "k": self.k_values.tolist(),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(data["wavelength_um"], data["n"], data.get("k"), data.get("name"))
