from __future__ import annotations

import math
import warnings
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

import numpy as np

from .core import OPACITY_MESSAGE, coherent_tmm
from .diagnostics import OpaqueLayerWarning
from .layer import Layer

if TYPE_CHECKING:
    from collections.abc import Iterable

    from layeroptics.materials import BaseMaterial

Pol = Literal["s", "p", "u"]
Array: TypeAlias = Any  # np.ndarray


class ThinFilmStack:
    """Multilayer thin-film stack evaluated with the coherent TMM.

    The stack is one ordered sequence of :class:`Layer` records, from the
    incident medium down to the substrate. Both boundary media are
    semi-infinite; everything in between is a film of finite thickness.
    New films are inserted directly above the substrate, so the order of
    insertion is the deposition order seen from the incident side.

    Each stack keeps its own "opacity already reported" flag, so independent
    stacks can be evaluated from separate threads.

    Units and conventions:
    - Wavelength and thickness in microns (µm); helpers accept nm.
    - AOI in radians; helpers accept degrees.

    Parameters
    ----------
    incident_material : BaseMaterial
        Incident medium (e.g., air).
    substrate_material : BaseMaterial
        Exit medium (e.g., glass).
    reference_wl_um : float | None, optional
        Reference wavelength for quarter-wave thicknesses, by default None.
    reference_AOI_deg : float | None, optional
        Reference angle of incidence in degrees for quarter-wave thicknesses,
        by default 0 (normal incidence).

    Examples
    --------
    >>> from layeroptics.materials import IdealMaterial
    >>> from layeroptics.thin_film import ThinFilmStack
    >>> air, glass = IdealMaterial(1.0), IdealMaterial(1.52)
    >>> tf = ThinFilmStack(air, glass)
    >>> tf.insert_layer(IdealMaterial(1.38, name="MgF2"), 0.1)
    ThinFilmStack(3 layers: incident -> MgF2 -> substrate)
    >>> R, T = tf.coherent_tmm("s", 0.0, 0.55)
    """

    def __init__(
        self,
        incident_material: BaseMaterial,
        substrate_material: BaseMaterial,
        reference_wl_um: float | None = None,
        reference_AOI_deg: float | None = 0,
    ):
        self._layers = [
            Layer(incident_material, math.inf, "incident"),
            Layer(substrate_material, math.inf, "substrate"),
        ]
        self.reference_wl_um = reference_wl_um
        self.reference_AOI_deg = reference_AOI_deg
        self._opacity_warned = False

    @classmethod
    def from_layers(cls, layers: Iterable[Layer], **kwargs) -> ThinFilmStack:
        """Build a stack from a complete, ordered layer sequence.

        Args:
            layers: Incident medium, films, then exit medium.
            **kwargs: Passed on to the constructor.

        Raises:
            ValueError: Fewer than two layers, or boundary/film thicknesses
                that break the semi-infinite/finite layout.
        """
        layers = list(layers)
        if len(layers) < 2:
            raise ValueError("A stack needs at least an incident and an exit medium")
        first, *films, last = layers
        if not (first.is_semi_infinite and last.is_semi_infinite):
            raise ValueError("First and last layers must have infinite thickness")
        stack = cls(first.material, last.material, **kwargs)
        if first.name is not None:
            stack._layers[0] = Layer(first.material, math.inf, first.name)
        if last.name is not None:
            stack._layers[-1] = Layer(last.material, math.inf, last.name)
        for layer in films:
            stack.insert_layer(layer.material, layer.thickness_um, layer.name)
        return stack

    # ----- structure -----
    @property
    def layers(self) -> tuple[Layer, ...]:
        """All layers, incident medium first and substrate last."""
        return tuple(self._layers)

    @property
    def films(self) -> tuple[Layer, ...]:
        """The finite-thickness layers between the two media."""
        return tuple(self._layers[1:-1])

    @property
    def incident_material(self) -> BaseMaterial:
        return self._layers[0].material

    @property
    def substrate_material(self) -> BaseMaterial:
        return self._layers[-1].material

    def insert_layer(
        self, material: BaseMaterial, thickness_um: float, name: str | None = None
    ) -> ThinFilmStack:
        """Insert a film directly above the substrate.

        ::

            ----------------- incident
            ----------------- 1st film
            ...
            ----------------- <- new film goes here
            ----------------- substrate

        Args:
            material: Refractive index provider, may be shared.
            thickness_um: Thickness in microns, finite and >= 0.
            name: Optional label.

        Returns:
            self for chaining.

        Raises:
            TypeError: If ``material`` has no ``complex_index``.
            ValueError: If the thickness is negative, infinite or NaN.
        """
        if not callable(getattr(material, "complex_index", None)):
            raise TypeError("material must provide complex_index(wavelength_um)")
        thickness_um = float(thickness_um)
        if not math.isfinite(thickness_um) or thickness_um < 0:
            raise ValueError(
                f"Film thickness must be finite and >= 0, got {thickness_um}"
            )
        self._layers.insert(len(self._layers) - 1, Layer(material, thickness_um, name))
        return self

    def add_layer(
        self, material: BaseMaterial, thickness_um: float, name: str | None = None
    ) -> ThinFilmStack:
        """Alias of :meth:`insert_layer`."""
        return self.insert_layer(material, thickness_um, name)

    def add_layer_nm(
        self, material: BaseMaterial, thickness_nm: float, name: str | None = None
    ) -> ThinFilmStack:
        """Insert a film, thickness in nm."""
        return self.insert_layer(material, thickness_nm / 1000.0, name)

    def add_layer_qwot(
        self,
        material: BaseMaterial,
        qwot_thickness: float = 1.0,
        name: str | None = None,
    ) -> ThinFilmStack:
        """Insert a film of given quarter-wave optical thickness (QWOT) at the
        reference wavelength and angle of incidence.

        Raises:
            ValueError: If reference_wl_um is not set, or light is evanescent
                in the film at the reference angle.
        """
        if self.reference_wl_um is None:
            raise ValueError("reference_wl_um must be set for adding QWOT layer")
        wl_um = self.reference_wl_um
        th_rad = math.radians(self.reference_AOI_deg or 0.0)
        n0 = float(np.atleast_1d(self.incident_material.n(wl_um))[0])
        n = float(np.atleast_1d(material.n(wl_um))[0])
        sin_l = n0 * math.sin(th_rad) / n
        if abs(sin_l) >= 1:
            raise ValueError("Light does not propagate in the layer at this angle")
        cos_l = math.sqrt(1 - sin_l**2)
        thickness_um = qwot_thickness * wl_um / (4 * n * cos_l)
        return self.insert_layer(material, thickness_um, name)

    # ----- evaluation -----
    def coherent_result(
        self, polarization, th_0: complex, wavelength_um: float
    ) -> dict[str, Any]:
        """Full coherent TMM output for one polarization, angle, wavelength.

        See :func:`layeroptics.thin_film.core.coherent_tmm` for the keys.
        """
        n_list = [layer.n_complex(wavelength_um) for layer in self._layers]
        d_list = [layer.thickness_um for layer in self._layers]
        result = coherent_tmm(
            polarization,
            n_list,
            d_list,
            th_0,
            wavelength_um,
            warn_opacity=False,
        )
        if result["opacity_clamped"] and not self._opacity_warned:
            self._opacity_warned = True
            # the stack id keeps the default filter from merging stacks
            warnings.warn(
                f"{OPACITY_MESSAGE} This warning will not be shown again for "
                f"{self!r} at 0x{id(self):x}.",
                OpaqueLayerWarning,
                stacklevel=2,
            )
        return result

    def coherent_tmm(
        self, polarization, th_0: complex, wavelength_um: float
    ) -> tuple[float, float]:
        """Reflectance and transmittance of the stack.

        Args:
            polarization: 's' or 'p'.
            th_0: Angle of incidence in radians (complex for an absorbing
                incident medium).
            wavelength_um: Vacuum wavelength in microns.

        Returns:
            (R, T) as floats.
        """
        result = self.coherent_result(polarization, th_0, wavelength_um)
        return result["R"], result["T"]

    def _grid(self, wl: Array, th: Array, pol: str):
        shape = (wl.size, th.size)
        r = np.empty(shape, dtype=complex)
        t = np.empty(shape, dtype=complex)
        R = np.empty(shape)
        T = np.empty(shape)
        for i, wavelength in enumerate(wl):
            for j, aoi in enumerate(th):
                out = self.coherent_result(pol, aoi, wavelength)
                r[i, j], t[i, j], R[i, j], T[i, j] = (
                    out["r"],
                    out["t"],
                    out["R"],
                    out["T"],
                )
        return r, t, R, T

    def compute_rtRTA(
        self,
        wavelength_um: float | Array,
        aoi_rad: float | Array = 0.0,
        polarization: Pol = "u",
    ) -> dict[str, Array]:
        """Compute complex and power coefficients over λ×θ grids.

        Args:
            wavelength_um: Wavelength(s) in microns (scalar or array).
            aoi_rad: Angle(s) of incidence in radians (scalar or array).
            polarization: 's', 'p' or 'u' (unpolarized averages powers of s
                and p), default 'u'.

        Returns:
            Dict with keys 'r','t','R','T','A'. Shapes are (Nλ, Nθ). For 'u'
            the amplitudes are the s ones.
        """
        wl = np.atleast_1d(np.asarray(wavelength_um, dtype=float)).ravel()
        th = np.atleast_1d(aoi_rad).ravel()
        if polarization in ("s", "p"):
            r, t, R, T = self._grid(wl, th, polarization)
        elif polarization == "u":
            r, t, Rs, Ts = self._grid(wl, th, "s")
            _, _, Rp, Tp = self._grid(wl, th, "p")
            R = 0.5 * (Rs + Rp)
            T = 0.5 * (Ts + Tp)
        else:
            raise ValueError("polarization must be 's', 'p' or 'u'")
        return {"r": r, "t": t, "R": R, "T": T, "A": 1 - R - T}

    def coefficients_nm_deg(
        self,
        wavelength_nm: float | Array,
        aoi_deg: float | Array = 0.0,
        polarization: Pol = "u",
    ) -> dict[str, Array]:
        """Same as compute_rtRTA() but inputs in nm and degrees."""
        return self.compute_rtRTA(
            np.atleast_1d(wavelength_nm) / 1000.0,
            np.deg2rad(np.atleast_1d(aoi_deg)),
            polarization,
        )

    def reflectance(self, wavelength_um, aoi_rad=0.0, polarization: Pol = "u"):
        return self.compute_rtRTA(wavelength_um, aoi_rad, polarization)["R"]

    def transmittance(self, wavelength_um, aoi_rad=0.0, polarization: Pol = "u"):
        return self.compute_rtRTA(wavelength_um, aoi_rad, polarization)["T"]

    def absorptance(self, wavelength_um, aoi_rad=0.0, polarization: Pol = "u"):
        return self.compute_rtRTA(wavelength_um, aoi_rad, polarization)["A"]

    def RTA(self, wavelength_um, aoi_rad=0.0, polarization: Pol = "u"):
        """Return (R, T, A) for wavelength(s) in µm and AOI(s) in radians."""
        data = self.compute_rtRTA(wavelength_um, aoi_rad, polarization)
        return data["R"], data["T"], data["A"]

    def RTA_nm_deg(self, wavelength_nm, aoi_deg=0.0, polarization: Pol = "u"):
        """Return (R, T, A) for wavelength(s) in nm and AOI(s) in degrees."""
        data = self.coefficients_nm_deg(wavelength_nm, aoi_deg, polarization)
        return data["R"], data["T"], data["A"]

    # ----- inspection -----
    def layer_table(self, wavelength_um: float) -> str:
        """Index and thickness of every layer at one wavelength."""
        rule = "-" * 60
        lines = [rule]
        for i, layer in enumerate(self._layers):
            n = layer.n_complex(wavelength_um)
            d = "inf" if layer.is_semi_infinite else f"{layer.thickness_um * 1e3:.2f}"
            label = layer.name or getattr(layer.material, "name", None) or ""
            lines.append(
                f"{i:<3d} {label:<14s} n_i = {n.real:.6f}{n.imag:+.6f}j"
                f"   d_i = {d} (nm)"
            )
            lines.append(rule)
        return "\n".join(lines)

    def print_layers(self, wavelength_um: float) -> None:
        print(self.layer_table(wavelength_um))

    def __len__(self):
        return len(self._layers)

    def __repr__(self):
        parts = [
            layer.name or getattr(layer.material, "name", None) or f"Layer({i})"
            for i, layer in enumerate(self._layers)
        ]
        return f"ThinFilmStack({len(self)} layers: " + " -> ".join(parts) + ")"
