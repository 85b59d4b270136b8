import matplotlib.pyplot as plt
import numpy as np
import pytest

from layeroptics.thin_film import SpectralAnalyzer, ThinFilmStack
from layeroptics.thin_film.analysis import PLANCK_EV, SPEED_OF_LIGHT
from .utils import assert_allclose


@pytest.fixture
def stack(air, glass, sio2):
    return ThinFilmStack(air, glass, reference_wl_um=0.55).add_layer_qwot(sio2)


@pytest.fixture
def analyzer(stack):
    return SpectralAnalyzer(stack)


class TestUnitConversions:
    def test_wavelength_units(self, analyzer):
        wl_um = 0.55
        cases = {
            "um": wl_um,
            "nm": 550.0,
            "frequency": SPEED_OF_LIGHT / (wl_um * 1e-6),
            "energy": PLANCK_EV * SPEED_OF_LIGHT / (wl_um * 1e-6),
            "wavenumber": 1e4 / wl_um,
            "relative_wavenumber": 1.0,
        }
        for unit, value in cases.items():
            assert_allclose(
                analyzer._convert_to_wavelength_um(value, unit), wl_um, rtol=1e-10
            )

    def test_plotting_conversion_inverts(self, analyzer):
        wl_um = np.array([0.5, 0.55, 0.6])
        for unit in ("um", "nm", "frequency", "energy", "wavenumber"):
            x = analyzer._convert_wavelength_for_plotting(wl_um, unit)
            assert_allclose(analyzer._convert_to_wavelength_um(x, unit), wl_um)

    def test_relative_wavenumber_needs_reference(self, air, glass):
        analyzer = SpectralAnalyzer(ThinFilmStack(air, glass))
        with pytest.raises(ValueError, match="reference_wl_um must be set"):
            analyzer._convert_to_wavelength_um(1.0, "relative_wavenumber")

    def test_unknown_units(self, analyzer):
        with pytest.raises(ValueError, match="Unknown wavelength unit"):
            analyzer._convert_to_wavelength_um(550.0, "furlong")
        with pytest.raises(ValueError, match="Unknown angle unit"):
            analyzer._convert_angle_to_radians(30.0, "grad")

    def test_angle_units(self, analyzer):
        assert_allclose(analyzer._convert_angle_to_radians(30.0, "deg"), np.pi / 6)
        assert_allclose(analyzer._convert_angle_to_radians(0.5, "rad"), 0.5)

    def test_axis_labels(self, analyzer):
        assert analyzer._get_wavelength_axis_label("nm") == r"$\lambda$ (nm)"
        assert analyzer._get_wavelength_axis_label("energy") == r"$E$ (eV)"


class TestViews:
    def test_wavelength_view(self, analyzer):
        fig, ax = analyzer.wavelength_view(np.linspace(0.4, 0.8, 10), to_plot="R")
        assert isinstance(fig, plt.Figure)
        assert isinstance(ax, plt.Axes)
        assert len(ax.get_lines()) == 1

    def test_wavelength_view_plots_solver_values(self, analyzer, stack):
        wl = np.linspace(400, 800, 6)
        _, ax = analyzer.wavelength_view(wl, wavelength_unit="nm", polarization="s")
        expected = stack.reflectance(wl / 1000.0, 0.0, "s")[:, 0]
        assert_allclose(ax.get_lines()[0].get_ydata(), expected)
        assert_allclose(ax.get_lines()[0].get_xdata(), wl)

    def test_multiple_quantities(self, analyzer):
        _, ax = analyzer.wavelength_view(
            np.linspace(0.4, 0.8, 10), to_plot=["R", "T", "A"]
        )
        assert len(ax.get_lines()) == 3

    def test_provided_ax(self, analyzer):
        fig, ax = plt.subplots()
        returned_fig, returned_ax = analyzer.wavelength_view(
            np.linspace(0.4, 0.8, 5), ax=ax
        )
        assert returned_fig is fig
        assert returned_ax is ax

    def test_energy_axis(self, analyzer):
        fig, _ = analyzer.wavelength_view(
            np.linspace(1.6, 3.0, 5), wavelength_unit="energy", to_plot="T"
        )
        assert isinstance(fig, plt.Figure)

    def test_angular_view(self, analyzer):
        fig, ax = analyzer.angular_view(
            np.linspace(0, 80, 9),
            wavelength=550.0,
            wavelength_unit="nm",
            to_plot=["R", "T"],
        )
        assert isinstance(fig, plt.Figure)
        assert len(ax.get_lines()) == 2
        assert ax.get_xlabel() == "AOI (°)"

    def test_map_view_single(self, analyzer):
        fig, ax = analyzer.map_view(
            np.linspace(0.4, 0.8, 5), aoi_values=np.linspace(0, 60, 4)
        )
        assert isinstance(fig, plt.Figure)
        assert isinstance(ax, plt.Axes)

    def test_map_view_multiple(self, analyzer):
        fig, axs = analyzer.map_view(
            np.linspace(0.4, 0.8, 3),
            aoi_values=np.linspace(0, 1, 3),
            aoi_unit="rad",
            to_plot=["R", "T"],
        )
        assert isinstance(axs, list)
        assert len(axs) == 2

    def test_invalid_quantity(self, analyzer):
        with pytest.raises(ValueError, match="to_plot must be"):
            analyzer.wavelength_view(np.linspace(0.4, 0.8, 5), to_plot="X")
