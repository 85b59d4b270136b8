"""Thin film diagnostics.

Warning categories raised by the transfer matrix solver. None of them stop a
calculation: the solver always returns a number for a well-formed stack, and
the warning tells the caller the number sits on a physically delicate edge.
Use ``warnings.simplefilter("error", ThinFilmWarning)`` to make them fatal.
"""

from __future__ import annotations


class ThinFilmWarning(UserWarning):
    """Base class for all thin-film solver warnings."""


class InvalidIncidenceAngleWarning(ThinFilmWarning):
    """``n0·sin(th0)`` is not real, or ``th0`` is not the forward angle."""


class AmbiguousForwardDirectionWarning(ThinFilmWarning):
    """Forward/backward classification failed its consistency check."""


class GainMediumWarning(ThinFilmWarning):
    """The medium has gain, so incoming vs outgoing beams are ill-defined."""


class OpaqueLayerWarning(ThinFilmWarning):
    """A nearly opaque layer had its phase clamped for numerical stability."""
