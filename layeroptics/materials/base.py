"""Base Material Module

Defines the refractive index capability consumed by the thin-film solver. A
material only has to answer "what is the complex index at this wavelength";
how it gets there (constant, table, dispersion formula) is up to the subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class BaseMaterial(ABC):
    """Base class for materials.

    Subclasses provide the real part ``n`` and the extinction coefficient ``k``
    of the refractive index. Instances are expected to be read-only once
    built, so a single material may be shared by several stacks.

    Attributes:
        name (str | None): Optional label used in reprs and layer dumps.
    """

    _registry = {}

    def __init__(self, name: str | None = None):
        self.name = name

    def __init_subclass__(cls, **kwargs):
        """Automatically register subclasses."""
        super().__init_subclass__(**kwargs)
        BaseMaterial._registry[cls.__name__] = cls

    @abstractmethod
    def n(self, wavelength_um):
        """Real part of the refractive index at ``wavelength_um``."""
        # pragma: no cover

    @abstractmethod
    def k(self, wavelength_um):
        """Extinction coefficient at ``wavelength_um``."""
        # pragma: no cover

    def complex_index(self, wavelength_um: float) -> complex:
        """Complex refractive index n + ik at a single wavelength.

        Args:
            wavelength_um (float): Vacuum wavelength in microns.

        Returns:
            complex: The complex refractive index.
        """
        n = np.asarray(self.n(wavelength_um), dtype=np.float64)
        k = np.asarray(self.k(wavelength_um), dtype=np.float64)
        return complex(n.item(), k.item())

    def to_dict(self):
        """Converts the material to a dictionary.

        Returns:
            dict: The dictionary representation of the material.
        """
        return {
            "type": self.__class__.__name__,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data):
        """Creates a material from a dictionary.

        Args:
            data (dict): The dictionary representation of the material.

        Returns:
            BaseMaterial: The material created from the dictionary.

        Raises:
            ValueError: If the material type is unknown.
            TypeError: If called on a subclass that cannot be built from a
                dictionary.
        """
        if cls is not BaseMaterial:
            raise TypeError(f"{cls.__name__} cannot be deserialized")
        material_type = data.get("type")
        if material_type not in cls._registry:
            raise ValueError(f"Unknown material type: {material_type}")
        return cls._registry[material_type].from_dict(data)

    def __repr__(self):
        label = f"'{self.name}'" if self.name else ""
        return f"{self.__class__.__name__}({label})"
