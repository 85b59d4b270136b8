"""layeroptics

Coherent thin-film optics: refractive-index providers and a transfer-matrix
solver for planar multilayer stacks.
"""

__version__ = "0.1.0"
