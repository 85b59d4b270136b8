import matplotlib
import pytest

matplotlib.use("Agg")  # non-interactive backend for testing

import matplotlib.pyplot as plt  # noqa: E402

from layeroptics.materials import IdealMaterial  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def air():
    return IdealMaterial(n=1.0, name="air")


@pytest.fixture
def glass():
    return IdealMaterial(n=1.52, name="glass")


@pytest.fixture
def sio2():
    return IdealMaterial(n=1.46, name="SiO2")


@pytest.fixture
def tio2():
    return IdealMaterial(n=2.3, name="TiO2")
