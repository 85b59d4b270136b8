from .base import BaseMaterial
from .function import FunctionMaterial
from .ideal import IdealMaterial
from .tabulated import TabulatedMaterial

__all__ = ["BaseMaterial", "IdealMaterial", "FunctionMaterial", "TabulatedMaterial"]
