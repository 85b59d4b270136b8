"""Function Material Module

Wraps a plain callable as a refractive index provider, so dispersion models
living outside this package can be plugged into a stack without subclassing.
"""

from __future__ import annotations

from typing import Callable

from .base import BaseMaterial


class FunctionMaterial(BaseMaterial):
    """Material whose complex index is given by ``func(wavelength_um)``.

    The callable must be side-effect free; it may be invoked from several
    threads at once when the material is shared.

    Args:
        func (Callable[[float], complex]): Returns n + ik for a wavelength in
            microns.
        name (str, optional): Label for the material.

    Examples:
        >>> cauchy = FunctionMaterial(lambda wl: 1.45 + 0.0036 / wl**2, "SiO2")
        >>> round(cauchy.n(0.6), 3)
        1.46
    """

    def __init__(self, func: Callable[[float], complex], name: str | None = None):
        if not callable(func):
            raise TypeError("func must be callable")
        super().__init__(name)
        self.func = func

    def complex_index(self, wavelength_um: float) -> complex:
        return complex(self.func(wavelength_um))

    def n(self, wavelength_um):
        return self.complex_index(wavelength_um).real

    def k(self, wavelength_um):
        return self.complex_index(wavelength_um).imag

    def to_dict(self):
        raise TypeError("FunctionMaterial cannot be serialized")
