"""Thin film spectral analysis.

Sweeps a :class:`ThinFilmStack` over wavelength and/or angle of incidence and
plots the resulting R, T and A with matplotlib. Spectral axes can be given in
several units; everything is converted to microns before reaching the solver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, TypeAlias

import matplotlib.pyplot as plt
import numpy as np

if TYPE_CHECKING:
    from .stack import ThinFilmStack

# Physical constants
SPEED_OF_LIGHT = 299792458.0  # m/s
PLANCK_CONSTANT = 6.62607015e-34  # J⋅s
ELEMENTARY_CHARGE = 1.602176634e-19  # C
PLANCK_EV = PLANCK_CONSTANT / ELEMENTARY_CHARGE  # eV⋅s

Pol = Literal["s", "p", "u"]
PlotType = Literal["R", "T", "A"]
Array: TypeAlias = Any  # np.ndarray
WavelengthUnit = Literal[
    "um", "nm", "frequency", "energy", "wavenumber", "relative_wavenumber"
]
AngleUnit = Literal["deg", "rad"]

_AXIS_LABELS = {
    "um": r"$\lambda$ ($\mu$m)",
    "nm": r"$\lambda$ (nm)",
    "frequency": r"$\nu$ (Hz)",
    "energy": r"$E$ (eV)",
    "wavenumber": r"$k$ (cm$^{-1}$)",
    "relative_wavenumber": r"$k/k_{\mathrm{ref}}$",
}

# Every non-linear unit here is reciprocal in wavelength, so the same map
# converts both ways: value = scale / λ_um  <=>  λ_um = scale / value
_RECIPROCAL_SCALE = {
    "frequency": SPEED_OF_LIGHT * 1e6,  # Hz·µm
    "energy": PLANCK_EV * SPEED_OF_LIGHT * 1e6,  # eV·µm
    "wavenumber": 1e4,  # cm⁻¹·µm
}

_QUANTITIES = ("R", "T", "A")


class SpectralAnalyzer:
    """Analyzes the optical response (R/T/A) of a thin film stack.

    Attributes:
        stack (ThinFilmStack): The thin film stack to be analyzed.
    """

    def __init__(self, stack: ThinFilmStack) -> None:
        self.stack = stack

    def _reciprocal_scale(self, unit: WavelengthUnit) -> float:
        if unit == "relative_wavenumber":
            if self.stack.reference_wl_um is None:
                raise ValueError("reference_wl_um must be set for relative_wavenumber")
            return self.stack.reference_wl_um
        if unit not in _RECIPROCAL_SCALE:
            raise ValueError(f"Unknown wavelength unit: {unit}")
        return _RECIPROCAL_SCALE[unit]

    def _convert_to_wavelength_um(
        self, values: float | Array, unit: WavelengthUnit
    ) -> Array:
        """Convert spectral values in ``unit`` to wavelength in microns.

        Raises:
            ValueError: Unknown unit, or relative wavenumber without a
                reference wavelength on the stack.
        """
        values = np.atleast_1d(np.asarray(values, dtype=float))
        if unit == "um":
            return values
        if unit == "nm":
            return values / 1000.0
        return self._reciprocal_scale(unit) / values

    def _convert_wavelength_for_plotting(
        self, wavelength_um: Array, unit: WavelengthUnit
    ) -> Array:
        """Convert wavelength in microns back to ``unit`` for an x axis."""
        wavelength_um = np.atleast_1d(wavelength_um)
        if unit == "um":
            return wavelength_um
        if unit == "nm":
            return wavelength_um * 1000.0
        return self._reciprocal_scale(unit) / wavelength_um

    def _get_wavelength_axis_label(self, unit: WavelengthUnit) -> str:
        return _AXIS_LABELS[unit]

    def _convert_angle_to_radians(self, angles: float | Array, unit: AngleUnit):
        angles = np.atleast_1d(angles)
        if unit == "rad":
            return angles
        if unit == "deg":
            return np.deg2rad(angles)
        raise ValueError(f"Unknown angle unit: {unit}")

    @staticmethod
    def _quantities(to_plot: PlotType | list[PlotType]) -> list[str]:
        quantities = [to_plot] if isinstance(to_plot, str) else list(to_plot)
        if not quantities or any(q not in _QUANTITIES for q in quantities):
            raise ValueError("to_plot must be 'R', 'T', 'A' or a list of these")
        return quantities

    @staticmethod
    def _decorate(ax, xlabel: str, x_values: Array) -> None:
        ax.set_xlabel(xlabel)
        ax.set_ylabel("Power fraction")
        ax.set_xlim(float(np.min(x_values)), float(np.max(x_values)))
        ax.set_ylim(0, 1)
        ax.grid(True, alpha=0.3)
        ax.legend()

    def wavelength_view(
        self,
        wavelength_values: Array,
        wavelength_unit: WavelengthUnit = "um",
        aoi: float = 0.0,
        aoi_unit: AngleUnit = "deg",
        polarization: Pol = "u",
        to_plot: PlotType | list[PlotType] = "R",
        ax: plt.Axes = None,
    ) -> tuple[plt.Figure, plt.Axes]:
        """Plot R/T/A against wavelength (or an equivalent spectral unit).

        Args:
            wavelength_values: Spectral values in ``wavelength_unit``.
            wavelength_unit: 'um', 'nm', 'frequency', 'energy', 'wavenumber'
                or 'relative_wavenumber'.
            aoi: Angle of incidence (scalar).
            aoi_unit: 'deg' or 'rad'.
            polarization: 's', 'p' or 'u'.
            to_plot: Quantity or list of quantities to plot.
            ax: Optional matplotlib Axes.

        Returns:
            Tuple of (figure, axes).
        """
        quantities = self._quantities(to_plot)
        wl_um = self._convert_to_wavelength_um(wavelength_values, wavelength_unit)
        aoi_rad = self._convert_angle_to_radians(aoi, aoi_unit)
        data = self.stack.compute_rtRTA(wl_um, aoi_rad, polarization)
        x_values = self._convert_wavelength_for_plotting(wl_um, wavelength_unit)

        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure

        for quantity in quantities:
            ax.plot(
                x_values,
                data[quantity][:, 0],
                label=f"{quantity}, {polarization}-pol, AOI={aoi}{aoi_unit}",
            )
        self._decorate(ax, self._get_wavelength_axis_label(wavelength_unit), x_values)
        return fig, ax

    def angular_view(
        self,
        aoi_values: Array,
        aoi_unit: AngleUnit = "deg",
        wavelength: float = 0.55,
        wavelength_unit: WavelengthUnit = "um",
        polarization: Pol = "u",
        to_plot: PlotType | list[PlotType] = "R",
        ax: plt.Axes = None,
    ) -> tuple[plt.Figure, plt.Axes]:
        """Plot R/T/A against angle of incidence at one wavelength.

        Returns:
            Tuple of (figure, axes).
        """
        quantities = self._quantities(to_plot)
        aoi_rad = self._convert_angle_to_radians(aoi_values, aoi_unit)
        wl_um = self._convert_to_wavelength_um(wavelength, wavelength_unit)
        data = self.stack.compute_rtRTA(wl_um, aoi_rad, polarization)
        x_values = np.atleast_1d(aoi_values)

        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure

        for quantity in quantities:
            ax.plot(
                x_values,
                data[quantity][0, :],
                label=f"{quantity}, {polarization}-pol, {wavelength}{wavelength_unit}",
            )
        xlabel = "AOI (°)" if aoi_unit == "deg" else "AOI (rad)"
        self._decorate(ax, xlabel, x_values)
        return fig, ax

    def map_view(
        self,
        wavelength_values: float | Array,
        wavelength_unit: WavelengthUnit = "um",
        aoi_values: float | Array = None,
        aoi_unit: AngleUnit = "deg",
        polarization: Pol = "u",
        to_plot: PlotType | list[PlotType] = "R",
    ) -> tuple[plt.Figure, plt.Axes | list[plt.Axes]]:
        """Plot 2D maps of R/T/A over wavelength and angle of incidence.

        Returns:
            Tuple of (figure, axes), or (figure, list of axes) when several
            quantities are requested.
        """
        quantities = self._quantities(to_plot)
        if aoi_values is None:
            aoi_values = np.linspace(0, 80, 81)
            if aoi_unit == "rad":
                aoi_values = np.deg2rad(aoi_values)

        wl_um = self._convert_to_wavelength_um(wavelength_values, wavelength_unit)
        aoi_rad = self._convert_angle_to_radians(aoi_values, aoi_unit)
        data = self.stack.compute_rtRTA(wl_um, aoi_rad, polarization)

        wl_plot = self._convert_wavelength_for_plotting(wl_um, wavelength_unit)
        WL, AOI = np.meshgrid(wl_plot, np.atleast_1d(aoi_values), indexing="ij")

        fig, axs = plt.subplots(
            len(quantities), 1, figsize=(8, 4 * len(quantities)), squeeze=False
        )
        axs = list(axs[:, 0])
        ylabel = "AOI (°)" if aoi_unit == "deg" else "AOI (rad)"
        for ax_i, quantity in zip(axs, quantities):
            im = ax_i.pcolormesh(WL, AOI, data[quantity], shading="auto", vmin=0, vmax=1)
            ax_i.set_xlabel(self._get_wavelength_axis_label(wavelength_unit))
            ax_i.set_ylabel(ylabel)
            ax_i.set_title(f"{quantity}, {polarization}-pol")
            fig.colorbar(im, ax=ax_i, label="Power fraction")
        fig.tight_layout()

        return fig, axs[0] if len(axs) == 1 else axs
