# scene_inject/__init__.py
try:
    from ._version import __version__
except Exception:
    __version__ = "0.0.0"

from .scene import Scene, NodeId
from .decorators import Inject, InjectFrom, inject, service, injectable, Injectable
from .analysis import InjectionPoint, injection_points
from .config import ResolverConfig
from .resolver import DependencyResolver, ScanResult, resolve_scene, resolve_subset
from .report import (
    ResolutionReport, Outcome, Injected, Unresolved, Ambiguous, AssignmentFailed, ConfigurationProblem,
)
from .exceptions import (
    SceneInjectError, SceneGraphError, ConfigurationError,
    UnresolvedDependencyError, AmbiguousServiceError, InjectionAssignmentError, InvalidInjectionError,
)

__all__ = [
    "__version__",
    "Scene",
    "NodeId",
    "Inject",
    "InjectFrom",
    "inject",
    "service",
    "injectable",
    "Injectable",
    "InjectionPoint",
    "injection_points",
    "ResolverConfig",
    "DependencyResolver",
    "ScanResult",
    "resolve_scene",
    "resolve_subset",
    "ResolutionReport",
    "Outcome",
    "Injected",
    "Unresolved",
    "Ambiguous",
    "AssignmentFailed",
    "ConfigurationProblem",
    "SceneInjectError",
    "SceneGraphError",
    "ConfigurationError",
    "UnresolvedDependencyError",
    "AmbiguousServiceError",
    "InjectionAssignmentError",
    "InvalidInjectionError",
]
