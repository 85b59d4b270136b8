from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .core import phase_thickness

if TYPE_CHECKING:
    from layeroptics.materials import BaseMaterial


@dataclass(frozen=True)
class Layer:
    """Represents one layer of a thin-film stack.

    The first and last layers of a stack are the semi-infinite incident and
    exit media and carry ``thickness_um = inf``; every other layer is a film
    of finite thickness.

    Parameters
    ----------
    material : BaseMaterial
        Refractive index provider. May be shared with other layers and stacks.
    thickness_um : float
        Layer thickness in microns (µm), or ``math.inf`` for a boundary medium.
    name : str | None
        Optional label for display.

    Examples
    --------
    >>> from layeroptics.materials import IdealMaterial
    >>> from layeroptics.thin_film import Layer
    >>> sio2 = IdealMaterial(1.46)
    >>> layer = Layer(sio2, thickness_um=0.1, name="SiO2 100 nm")
    """

    material: BaseMaterial
    thickness_um: float
    name: str | None = None

    @property
    def is_semi_infinite(self) -> bool:
        return math.isinf(self.thickness_um)

    def n_complex(self, wavelength_um: float) -> complex:
        """Complex index n~ = n + i k at a single wavelength."""
        return self.material.complex_index(wavelength_um)

    def phase_thickness(self, wavelength_um, n_complex_l, cos_theta_l):
        """Phase δ = 2π/λ·n·d·cos(θ_l)

        Inputs must be broadcastable over wavelength and AOI grids.
        """
        return phase_thickness(
            wavelength_um, n_complex_l, self.thickness_um, cos_theta_l
        )
