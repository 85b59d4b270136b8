import warnings

import numpy as np
import pytest

from layeroptics.thin_film import (
    AmbiguousForwardDirectionWarning,
    GainMediumWarning,
    InvalidIncidenceAngleWarning,
    OpaqueLayerWarning,
    Polarization,
    ThinFilmWarning,
    coherent_tmm,
    is_forward_angle,
    list_snell,
)
from layeroptics.thin_film.core import (
    OPACITY_LIMIT,
    R_from_r,
    T_from_t,
    interface_r,
    interface_t,
)
from .utils import assert_allclose

inf = np.inf


class TestIsForwardAngle:
    """Forward/backward wave classification."""

    @pytest.mark.parametrize("theta", np.linspace(-1.5, 1.5, 13))
    def test_lossless_forward_inside_half_plane(self, theta):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert is_forward_angle(1.5, theta)

    @pytest.mark.parametrize(
        "theta", np.concatenate([np.linspace(1.7, 3.1, 5), np.linspace(-3.1, -1.7, 5)])
    )
    def test_lossless_backward_outside_half_plane(self, theta):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert not is_forward_angle(1.5, theta)

    def test_complementary_angle_flips_answer(self):
        theta = 0.4
        assert is_forward_angle(1.2, theta) != is_forward_angle(1.2, np.pi - theta)

    def test_evanescent_decaying_wave_is_forward(self):
        assert is_forward_angle(1.0, np.pi / 2 - 0.5j)
        assert not is_forward_angle(1.0, np.pi / 2 + 0.5j)

    def test_lossy_medium(self):
        n = 1.5 + 0.1j
        assert is_forward_angle(n, 0.0)
        assert not is_forward_angle(n, np.pi)

    def test_gain_medium_warns(self):
        with pytest.warns(GainMediumWarning, match="gain"):
            is_forward_angle(1.5 - 0.1j, 0.0)

    def test_inconsistent_direction_warns_and_keeps_heuristic(self):
        # n·cos(theta) = -0.5 + 0.5j: decays forward but flows backward
        n = 1 + 0.5j
        theta = np.arccos(-0.2 + 0.6j)
        with pytest.warns(AmbiguousForwardDirectionWarning):
            assert is_forward_angle(n, theta)

    def test_warnings_share_base_class(self):
        assert issubclass(GainMediumWarning, ThinFilmWarning)
        assert issubclass(AmbiguousForwardDirectionWarning, ThinFilmWarning)
        assert issubclass(ThinFilmWarning, UserWarning)


class TestListSnell:
    def test_normal_incidence(self):
        angles = list_snell([1.0, 1.5, 2.0, 1.52], 0.0)
        assert_allclose(angles, np.zeros(4), atol=1e-15)

    def test_snell_invariant(self):
        n_list = np.array([1.0, 2.3, 1.46 + 0.01j, 1.52])
        th_0 = 0.6
        angles = list_snell(n_list, th_0)
        assert_allclose(n_list * np.sin(angles), np.sin(th_0), rtol=1e-12)

    def test_real_angles_in_lossless_stack(self):
        angles = list_snell([1.0, 1.38, 1.52], np.deg2rad(30))
        assert_allclose(angles.imag, 0, atol=1e-15)
        assert_allclose(angles[-1].real, np.arcsin(np.sin(np.deg2rad(30)) / 1.52))

    @pytest.mark.parametrize("n_last", [1.52 + 0.3j, 3.5 + 2.0j, 1.0])
    def test_exit_angle_is_forward(self, n_last):
        # includes total internal reflection for n_last = 1.0
        n_list = [1.5, 1.8, n_last]
        angles = list_snell(n_list, 1.0)
        assert is_forward_angle(n_list[0], angles[0])
        assert is_forward_angle(n_list[-1], angles[-1])
        assert_allclose(
            np.asarray(n_list) * np.sin(angles), 1.5 * np.sin(1.0), rtol=1e-12
        )


class TestInterfaceCoefficients:
    @pytest.mark.parametrize("pol", ["s", "p"])
    def test_normal_incidence_fresnel(self, pol):
        r = interface_r(pol, 1.0, 1.5, 0.0, 0.0)
        t = interface_t(pol, 1.0, 1.5, 0.0, 0.0)
        assert_allclose(R_from_r(r), 0.04)
        assert_allclose(T_from_t(pol, t, 1.0, 1.5, 0.0, 0.0), 0.96)

    def test_brewster_angle_p_reflection_vanishes(self):
        th_b = np.arctan(1.5)
        th_f = np.arcsin(np.sin(th_b) / 1.5)
        assert abs(interface_r("p", 1.0, 1.5, th_b, th_f)) < 1e-12
        assert abs(interface_r("s", 1.0, 1.5, th_b, th_f)) > 0.1

    def test_invalid_polarization(self):
        with pytest.raises(ValueError, match="polarization must be"):
            interface_r("x", 1.0, 1.5, 0.0, 0.0)

    def test_enum_polarization(self):
        assert interface_r(Polarization.S, 1, 2, 0, 0) == interface_r("s", 1, 2, 0, 0)


class TestCoherentTMM:
    def test_single_interface_fresnel(self):
        for pol in ("s", "p"):
            out = coherent_tmm(pol, [1.0, 1.5], [inf, inf], 0.0, 0.55)
            assert_allclose(out["R"], 0.04)
            assert_allclose(out["T"], 0.96)

    def test_result_keys(self):
        out = coherent_tmm("s", [1.0, 1.4, 1.5], [inf, 0.1, inf], 0.2, 0.55)
        for key in ("r", "t", "R", "T", "kz_list", "th_list", "n_list", "d_list"):
            assert key in out
        assert out["pol"] == "s"
        assert out["opacity_clamped"] is False
        assert out["kz_list"].shape == (3,)

    def test_matches_airy_formula_for_single_absorbing_film(self):
        n_list = np.array([1.0, 2.0 + 0.3j, 1.52])
        d_list = [inf, 0.12, inf]
        th_0, lam = 0.5, 0.6
        for pol in ("s", "p"):
            out = coherent_tmm(pol, n_list, d_list, th_0, lam)
            th = out["th_list"]
            r01 = interface_r(pol, n_list[0], n_list[1], th[0], th[1])
            r12 = interface_r(pol, n_list[1], n_list[2], th[1], th[2])
            phase = np.exp(2j * out["kz_list"][1] * d_list[1])
            r_airy = (r01 + r12 * phase) / (1 + r01 * r12 * phase)
            assert_allclose(out["r"], r_airy, rtol=1e-10)

    @pytest.mark.parametrize("pol", ["s", "p"])
    @pytest.mark.parametrize("th_0", [0.0, 0.3, 0.8, 1.3])
    def test_energy_conservation_lossless(self, pol, th_0):
        n_list = [1.0, 2.3, 1.46, 2.3, 1.38, 1.52]
        d_list = [inf, 0.061, 0.095, 0.2, 0.033, inf]
        out = coherent_tmm(pol, n_list, d_list, th_0, 0.55)
        assert_allclose(out["R"] + out["T"], 1.0, atol=1e-9)

    def test_total_internal_reflection(self):
        out = coherent_tmm("s", [1.5, 1.3, 1.0], [inf, 0.2, inf], 1.2, 0.55)
        assert_allclose(out["R"], 1.0, atol=1e-9)
        assert_allclose(out["T"], 0.0, atol=1e-9)

    def test_absorbing_film_absorbs(self):
        out = coherent_tmm("s", [1.0, 1.5 + 0.1j, 1.5], [inf, 0.3, inf], 0.0, 0.55)
        assert 0 < out["R"] + out["T"] < 1

    def test_opaque_layer_is_clamped(self):
        n_list = [1.0, 1.5 + 1.0j, 1.5]
        d_list = [inf, 10.0, inf]
        with pytest.warns(OpaqueLayerWarning):
            out = coherent_tmm("s", n_list, d_list, 0.0, 0.5)
        assert out["opacity_clamped"] is True
        assert np.isfinite(out["R"]) and np.isfinite(out["T"])
        assert 0 < out["T"] < 1e-28
        assert 0 < out["R"] < 1

    def test_opacity_warning_can_be_silenced(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            out = coherent_tmm(
                "p",
                [1.0, 1.5 + 1.0j, 1.5],
                [inf, 10.0, inf],
                0.0,
                0.5,
                warn_opacity=False,
            )
        assert out["opacity_clamped"] is True

    def test_clamp_limits_phase(self):
        n_list = [1.0, 1.5 + 1.0j, 1.5]
        thin = coherent_tmm("s", n_list, [inf, 10.0, inf], 0.0, 0.5, warn_opacity=False)
        thick = coherent_tmm(
            "s", n_list, [inf, 50.0, inf], 0.0, 0.5, warn_opacity=False
        )
        # beyond the limit transmission no longer depends on thickness
        assert_allclose(abs(thin["t"]), abs(thick["t"]), rtol=1e-9)
        assert abs(thin["t"]) < 10 * np.exp(-OPACITY_LIMIT)

    def test_invalid_incidence_angle_warns_but_computes(self):
        with pytest.warns(InvalidIncidenceAngleWarning):
            out = coherent_tmm("s", [1.5 + 0.1j, 1.0], [inf, inf], 0.5, 0.55)
        assert np.isfinite(out["R"])

    def test_backward_incidence_angle_warns(self):
        with pytest.warns(InvalidIncidenceAngleWarning):
            coherent_tmm("s", [1.0, 1.5], [inf, inf], np.pi - 0.2, 0.55)

    def test_complex_incidence_angle_for_lossy_ambient(self):
        n0 = 1.5 + 0.1j
        th_0 = np.arcsin(0.5 / n0)  # n0 sin(th0) real
        with warnings.catch_warnings():
            warnings.simplefilter("error", InvalidIncidenceAngleWarning)
            out = coherent_tmm("s", [n0, 1.0], [inf, inf], th_0, 0.55)
        assert np.isfinite(out["T"])

    @pytest.mark.parametrize(
        "n_list, d_list",
        [
            ([1.0], [inf]),
            ([1.0, 1.5], [inf]),
            ([1.0, 1.4, 1.5], [0.1, 0.1, inf]),
            ([1.0, 1.4, 1.5], [inf, inf, inf]),
            ([1.0, 1.4, 1.5], [inf, -0.1, inf]),
        ],
    )
    def test_structural_errors(self, n_list, d_list):
        with pytest.raises(ValueError):
            coherent_tmm("s", n_list, d_list, 0.0, 0.55)

    def test_invalid_polarization(self):
        with pytest.raises(ValueError, match="polarization must be"):
            coherent_tmm("u", [1.0, 1.5], [inf, inf], 0.0, 0.55)

    def test_non_scalar_inputs(self):
        with pytest.raises(ValueError, match="scalars"):
            coherent_tmm("s", [1.0, 1.5], [inf, inf], [0.0, 0.1], 0.55)
