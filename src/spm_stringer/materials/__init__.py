"""Materials of a stringer cross-section."""

from spm_stringer.materials.concrete import (
    ConcreteParameters,
    ConstitutiveModel,
    UniaxialConcrete,
)
from spm_stringer.materials.reinforcement import SteelParameters, UniaxialReinforcement

__all__ = [
    "ConcreteParameters",
    "ConstitutiveModel",
    "UniaxialConcrete",
    "SteelParameters",
    "UniaxialReinforcement",
]
