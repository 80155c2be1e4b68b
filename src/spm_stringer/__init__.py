"""spm_stringer package (nonlinear RC stringers of stringer-panel models)."""

from .settings import StringerSettings, AnalysisSettings, DEFAULT_SETTINGS
from .materials import (
    ConcreteParameters,
    ConstitutiveModel,
    UniaxialConcrete,
    SteelParameters,
    UniaxialReinforcement,
)
from .integration_point import IntegrationPoint
from .section import SectionCapacities
from .root_solver import ForceStrainSolver
from .relations import StressStrainRelations, MCFTRelations, DSFMRelations, relations_for
from .geometry import CrossSection, StringerGeometry
from .events import ElementState, StateChange, EventLog
from .stringer import ForceState, Stringer, NonlinearStringer
from .monitor import StringerMonitor
from .analysis import StringerAnalysis

__all__ = [
    "StringerSettings", "AnalysisSettings", "DEFAULT_SETTINGS",
    "ConcreteParameters", "ConstitutiveModel", "UniaxialConcrete",
    "SteelParameters", "UniaxialReinforcement",
    "IntegrationPoint",
    "SectionCapacities",
    "ForceStrainSolver",
    "StressStrainRelations", "MCFTRelations", "DSFMRelations", "relations_for",
    "CrossSection", "StringerGeometry",
    "ElementState", "StateChange", "EventLog",
    "ForceState", "Stringer", "NonlinearStringer",
    "StringerMonitor",
    "StringerAnalysis",
]
