"""Thin-film multilayer calculations (coherent Transfer Matrix Method).

Public API:
- ``Layer``: one layer (material + thickness)
- ``ThinFilmStack``: ordered layers and coherent TMM evaluation (r, t, R, T, A)
- ``SpectralAnalyzer``: wavelength / angle sweeps and plots
- ``is_forward_angle``, ``list_snell``, ``coherent_tmm``: the functional core
- warning categories for non-fatal numerical conditions

Units: wavelength in µm, thickness in µm (nm helpers), AOI in radians (deg helpers).
"""

from __future__ import annotations

from .analysis import SpectralAnalyzer
from .core import Polarization, coherent_tmm, is_forward_angle, list_snell
from .diagnostics import (
    AmbiguousForwardDirectionWarning,
    GainMediumWarning,
    InvalidIncidenceAngleWarning,
    OpaqueLayerWarning,
    ThinFilmWarning,
)
from .layer import Layer
from .matrix import ComplexMatrix2x2
from .stack import ThinFilmStack

__all__ = [
    "Layer",
    "ThinFilmStack",
    "SpectralAnalyzer",
    "ComplexMatrix2x2",
    "Polarization",
    "coherent_tmm",
    "is_forward_angle",
    "list_snell",
    "ThinFilmWarning",
    "InvalidIncidenceAngleWarning",
    "AmbiguousForwardDirectionWarning",
    "GainMediumWarning",
    "OpaqueLayerWarning",
]
