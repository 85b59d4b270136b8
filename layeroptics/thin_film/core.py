"""Thin film optics core functions.

Coherent transfer matrix method (TMM) for a planar multilayer: complex Snell
angles, forward-wave selection, Fresnel interface coefficients and the
composition of per-layer transfer matrices into net r, t, R and T.

Conventions follow S. J. Byrnes, "Multilayer optical calculations",
arXiv:1603.02720: the complex index is n + ik with k > 0 for absorption,
layer 0 is the semi-infinite medium the light comes from and the last layer
is the semi-infinite medium it exits into.

All functions here work on one wavelength and one angle at a time. Stack-level
sweeps live in :mod:`layeroptics.thin_film.stack`.
"""

from __future__ import annotations

import warnings
from enum import Enum
from typing import Any

import numpy as np

from .diagnostics import (
    AmbiguousForwardDirectionWarning,
    GainMediumWarning,
    InvalidIncidenceAngleWarning,
    OpaqueLayerWarning,
)
from .matrix import ComplexMatrix2x2

EPSILON = np.finfo(np.float64).eps
TOLERANCE = 100 * EPSILON
# imag(delta) > 35 means single-pass transmission below 1e-30
OPACITY_LIMIT = 35.0
OPACITY_MESSAGE = (
    "Layers that are almost perfectly opaque are modified to be slightly "
    "transmissive, allowing 1 photon in 10^30 to pass through, for numerical "
    "stability."
)


class Polarization(str, Enum):
    """Light polarization relative to the plane of incidence."""

    S = "s"
    P = "p"


def _check_polarization(pol) -> Polarization:
    try:
        return Polarization(pol)
    except ValueError:
        raise ValueError(f"polarization must be 's' or 'p', got {pol!r}") from None


def _fmt(z: complex) -> str:
    return f"{z.real:.3e}{z.imag:+.3e}i"


def is_forward_angle(n: complex, theta: complex) -> bool:
    """Whether the wave at angle ``theta`` in a medium of index ``n`` is the
    forward-traveling one.

    Forward means going from the front to the back of the stack, like the
    incoming and outgoing waves and unlike the reflected wave. For real n and
    theta this is simply -pi/2 < theta < pi/2. If theta is the forward angle,
    pi - theta is the backward angle and vice versa.

    A decaying wave is forward. When the decay is negligible the wave with the
    positive Poynting vector is forward.

    Args:
        n (complex): Refractive index of the medium.
        theta (complex): Propagation angle, possibly complex.

    Returns:
        bool: True for the forward-traveling wave.

    Warns:
        GainMediumWarning: The medium has gain (``n.real * n.imag < 0``).
        AmbiguousForwardDirectionWarning: The answer is not consistent
            across the decay and Poynting criteria.
    """
    n = complex(n)
    theta = complex(theta)
    if n.real * n.imag < 0:
        warnings.warn(
            "For materials with gain, it's ambiguous which beam is incoming "
            "vs outgoing. See arXiv:1603.02720 Appendix C. "
            f"n: {_fmt(n)}  angle: {_fmt(theta)}",
            GainMediumWarning,
            stacklevel=2,
        )

    ncostheta = n * np.cos(theta)
    if abs(ncostheta.imag) > TOLERANCE:
        # Either evanescent decay or lossy medium
        answer = bool(ncostheta.imag > 0)
    else:
        # Poynting vector is Re[n cos(theta)] for s and Re[n cos(theta*)] for
        # p; both are checked below
        answer = bool(ncostheta.real > 0)

    poynting_p = (n * np.cos(theta.conjugate())).real
    if answer:
        consistent = (
            ncostheta.imag > -TOLERANCE
            and ncostheta.real > -TOLERANCE
            and poynting_p > -TOLERANCE
        )
    else:
        consistent = (
            ncostheta.imag < TOLERANCE
            and ncostheta.real < TOLERANCE
            and poynting_p < TOLERANCE
        )
    if not consistent:
        warnings.warn(
            "It's not clear which beam is incoming vs outgoing. Weird index "
            f"maybe? n: {_fmt(n)}  angle: {_fmt(theta)}",
            AmbiguousForwardDirectionWarning,
            stacklevel=2,
        )
    return answer


def list_snell(n_list, th_0: complex) -> np.ndarray:
    """Propagation angle in each layer from the angle ``th_0`` in layer 0.

    The angles may be complex. Only the first and last entries are forced to
    the forward-angle convention; the interior layers don't affect the final
    answer (arXiv:1603.02720 Section 5).

    Args:
        n_list (array_like): Complex index of each layer, front to back.
        th_0 (complex): Angle of incidence in layer 0.

    Returns:
        np.ndarray: Complex angle in each layer.
    """
    n_list = np.asarray(n_list, dtype=complex)
    angles = np.arcsin(n_list[0] * np.sin(complex(th_0)) / n_list)
    if not is_forward_angle(n_list[0], angles[0]):
        angles[0] = np.pi - angles[0]
    if not is_forward_angle(n_list[-1], angles[-1]):
        angles[-1] = np.pi - angles[-1]
    return angles


def interface_r(polarization, n_i, n_f, th_i, th_f) -> complex:
    """Reflection amplitude going from medium i into medium f."""
    pol = _check_polarization(polarization)
    cos_i = np.cos(th_i)
    cos_f = np.cos(th_f)
    if pol is Polarization.S:
        return (n_i * cos_i - n_f * cos_f) / (n_i * cos_i + n_f * cos_f)
    return (n_f * cos_i - n_i * cos_f) / (n_f * cos_i + n_i * cos_f)


def interface_t(polarization, n_i, n_f, th_i, th_f) -> complex:
    """Transmission amplitude going from medium i into medium f."""
    pol = _check_polarization(polarization)
    cos_i = np.cos(th_i)
    cos_f = np.cos(th_f)
    if pol is Polarization.S:
        return 2 * n_i * cos_i / (n_i * cos_i + n_f * cos_f)
    return 2 * n_i * cos_i / (n_f * cos_i + n_i * cos_f)


def R_from_r(r: complex) -> float:
    """Reflected power from the reflection amplitude."""
    return float(abs(r) ** 2)


def T_from_t(polarization, t, n_i, n_f, th_i, th_f) -> float:
    """Transmitted power from the transmission amplitude.

    The exit and incidence admittances use ``cos(theta)`` for s and
    ``conj(cos(theta))`` for p.
    """
    pol = _check_polarization(polarization)
    if pol is Polarization.S:
        num = (n_f * np.cos(th_f)).real
        den = (n_i * np.cos(th_i)).real
    else:
        num = (n_f * np.conj(np.cos(th_f))).real
        den = (n_i * np.conj(np.cos(th_i))).real
    return float(abs(t) ** 2 * num / den)


def phase_thickness(lam_vac, n, d, cos_theta):
    """Phase δ = 2π/λ·n·d·cos(θ) accrued in one pass through a film.

    Works elementwise on broadcastable inputs.
    """
    return 2 * np.pi / lam_vac * n * d * cos_theta


def _check_structure(n_list, d_list) -> tuple[np.ndarray, np.ndarray]:
    n_list = np.asarray(n_list, dtype=complex)
    d_list = np.asarray(d_list, dtype=float)
    if n_list.ndim != 1 or d_list.ndim != 1 or n_list.size != d_list.size:
        raise ValueError("n_list and d_list must be 1D sequences of equal length")
    if n_list.size < 2:
        raise ValueError("A stack needs at least an incident and an exit medium")
    if not (np.isinf(d_list[0]) and np.isinf(d_list[-1])):
        raise ValueError("d_list must start and end with inf")
    interior = d_list[1:-1]
    if not np.all(np.isfinite(interior)) or np.any(interior < 0):
        raise ValueError("Interior layer thicknesses must be finite and >= 0")
    return n_list, d_list


def coherent_tmm(
    polarization,
    n_list,
    d_list,
    th_0: complex,
    lam_vac: float,
    warn_opacity: bool = True,
) -> dict[str, Any]:
    """Main coherent transfer matrix calculation.

    Args:
        polarization: 's' or 'p' (or a :class:`Polarization`).
        n_list (array_like): Complex index of each layer in the order the
            light passes through them. The first and last entries are the
            semi-infinite incident and exit media.
        d_list (array_like): Thickness of each layer, same length as
            ``n_list``; the first and last entries must be ``inf``.
        th_0 (complex): Angle of incidence, 0 for normal and pi/2 for
            glancing. For an absorbing incident medium th_0 should be complex
            so that n0·sin(th0) is real.
        lam_vac (float): Vacuum wavelength, same unit as ``d_list``.
        warn_opacity (bool): Emit :class:`OpaqueLayerWarning` when a layer
            phase is clamped. The caller owns the "warn only once" state and
            uses ``opacity_clamped`` in the result to update it.

    Returns:
        dict: ``r``, ``t`` (net amplitudes), ``R``, ``T`` (powers),
        ``n_list``, ``d_list``, ``th_list``, ``kz_list``, ``pol``,
        ``lam_vac``, ``th_0`` and ``opacity_clamped``.

    Raises:
        ValueError: Malformed stack, polarization, or non-scalar th_0/lam_vac.

    Warns:
        InvalidIncidenceAngleWarning: n0·sin(th0) is not real or th0 is not
            the forward angle. The calculation proceeds with th0 as given.
        OpaqueLayerWarning: A layer was nearly opaque and got clamped.
    """
    pol = _check_polarization(polarization)
    n_list, d_list = _check_structure(n_list, d_list)
    if np.ndim(th_0) != 0 or np.ndim(lam_vac) != 0:
        raise ValueError("th_0 and lam_vac must be scalars")
    th_0 = complex(th_0)
    lam_vac = float(lam_vac)
    num_layers = n_list.size

    if abs((n_list[0] * np.sin(th_0)).imag) >= TOLERANCE or not is_forward_angle(
        n_list[0], th_0
    ):
        warnings.warn(
            f"Error in n0 or th0! n0: {_fmt(n_list[0])}  th0: {_fmt(th_0)}",
            InvalidIncidenceAngleWarning,
            stacklevel=2,
        )

    th_list = list_snell(n_list, th_0)

    # z-component of the forward wavevector; positive imaginary part decays
    kz_list = 2 * np.pi * n_list * np.cos(th_list) / lam_vac

    # phase accrued across each film; the semi-infinite media carry none
    delta = np.zeros(num_layers, dtype=complex)
    delta[1:-1] = phase_thickness(
        lam_vac, n_list[1:-1], d_list[1:-1], np.cos(th_list[1:-1])
    )

    opaque = delta.imag > OPACITY_LIMIT
    opacity_clamped = bool(np.any(opaque))
    if opacity_clamped:
        delta[opaque] = delta.real[opaque] + 1j * OPACITY_LIMIT
        if warn_opacity:
            warnings.warn(OPACITY_MESSAGE, OpaqueLayerWarning, stacklevel=2)

    # r_list[i], t_list[i]: amplitudes going from layer i into layer i+1
    t_list = np.empty(num_layers - 1, dtype=complex)
    r_list = np.empty(num_layers - 1, dtype=complex)
    for i in range(num_layers - 1):
        args = (pol, n_list[i], n_list[i + 1], th_list[i], th_list[i + 1])
        t_list[i] = interface_t(*args)
        r_list[i] = interface_r(*args)

    # (v_i, w_i) = M_i (v_{i+1}, w_{i+1}) with v forward and w backward
    # amplitudes on the far side of interface i
    Mtilde = ComplexMatrix2x2.identity()
    for i in range(1, num_layers - 1):
        propagation = ComplexMatrix2x2.diagonal(
            np.exp(-1j * delta[i]), np.exp(1j * delta[i])
        )
        interface = ComplexMatrix2x2(1, r_list[i], r_list[i], 1)
        Mtilde = Mtilde @ ((propagation @ interface) / t_list[i])
    Mtilde = (ComplexMatrix2x2(1, r_list[0], r_list[0], 1) / t_list[0]) @ Mtilde

    r = Mtilde[1, 0] / Mtilde[0, 0]
    t = 1 / Mtilde[0, 0]

    R = R_from_r(r)
    T = T_from_t(pol, t, n_list[0], n_list[-1], th_0, th_list[-1])

    return {
        "r": r,
        "t": t,
        "R": R,
        "T": T,
        "kz_list": kz_list,
        "th_list": th_list,
        "n_list": n_list,
        "d_list": d_list,
        "pol": pol.value,
        "lam_vac": lam_vac,
        "th_0": th_0,
        "opacity_clamped": opacity_clamped,
    }

