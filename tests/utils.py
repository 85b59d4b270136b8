import numpy as np


def assert_allclose(actual, desired, rtol=1e-7, atol=0.0, **kwargs):
    """numpy's assert_allclose on plain arrays or scalars."""
    np.testing.assert_allclose(
        np.asarray(actual), np.asarray(desired), rtol=rtol, atol=atol, **kwargs
    )
