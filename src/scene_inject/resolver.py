"""Resolves injection points across a scene graph.

A pass scans the requested roots and their descendants, then assigns a value
to every reachable injection point. The nearest ancestor behavior of a
compatible type is used first. If there is none, the single compatible
service found in the scan is used. Failures are recorded in the returned
:class:`~scene_inject.report.ResolutionReport` and logged; they are never
raised.

Injected values may point at behaviors whose own injection points are
resolved later in the same pass. Read dependencies only after the pass
returns.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple, Union

from .analysis import InjectionPoint, injection_points
from .config import ResolverConfig
from .constants import LOGGER, SOURCE_HIERARCHY, SOURCE_SERVICE
from .decorators import is_injectable_marked, is_service
from .exceptions import ConfigurationError, InjectionAssignmentError
from .report import (
    Ambiguous,
    AssignmentFailed,
    ConfigurationProblem,
    Injected,
    Outcome,
    ResolutionReport,
    Unresolved,
    log_configuration_problem,
    log_outcome,
)
from .scene import NodeId, Scene


@dataclass
class ScanResult:
    injectables: List[Any] = field(default_factory=list)
    services: List[Any] = field(default_factory=list)
    configuration_errors: List[ConfigurationProblem] = field(default_factory=list)


class DependencyResolver:
    """Scans a :class:`~scene_inject.scene.Scene` and injects dependencies.

    Args:
        scene: The scene to resolve.
        config: Resolver switches; defaults to :class:`ResolverConfig()`.
        logger: Diagnostics sink; defaults to the ``scene_inject`` logger.
    """

    def __init__(self, scene: Scene, config: Optional[ResolverConfig] = None, logger: Optional[logging.Logger] = None) -> None:
        self.scene = scene
        self.config = config or ResolverConfig()
        self._logger = logger or LOGGER

    # ---------------- scanning ----------------

    def _points_of(self, behavior: Any, node: NodeId, scan: ScanResult) -> Tuple[InjectionPoint, ...]:
        if self.config.require_injectable_marker and not is_injectable_marked(behavior):
            return ()
        try:
            return injection_points(behavior)
        except ConfigurationError as e:
            problem = ConfigurationProblem(behavior, node, self.scene.name(node), e)
            scan.configuration_errors.append(problem)
            log_configuration_problem(self._logger, problem)
            return ()

    def find_objects(self, roots: Iterable[NodeId]) -> ScanResult:
        """Enumerate *roots* and their descendants for injectables and services.

        WARNING: proportional to the size of the scanned tree. Call it once
        per pass.
        """
        scan = ScanResult()
        for node in self.scene.walk(roots):
            for behavior in self.scene.behaviors(node):
                points = self._points_of(behavior, node, scan)
                if points:
                    scan.injectables.append(behavior)
                for p in points:
                    if p.public:
                        continue
                    err = ConfigurationError(
                        f"Injectable {p.category} '{p.name}' of {type(behavior).__name__} on node "
                        f"'{self.scene.name(node)}' is not public and cannot be injected."
                    )
                    problem = ConfigurationProblem(behavior, node, self.scene.name(node), err, point=p)
                    scan.configuration_errors.append(problem)
                    log_configuration_problem(self._logger, problem)
                if is_service(behavior):
                    scan.services.append(behavior)
        return scan

    # ---------------- matching ----------------

    def _ancestors(self, node: NodeId, boundary: Optional[set]) -> Iterable[NodeId]:
        for ancestor in self.scene.ancestors(node):
            if boundary is not None and ancestor not in boundary:
                return
            yield ancestor

    def _find_in_hierarchy(self, point: InjectionPoint, node: NodeId, boundary: Optional[set]) -> Tuple[Any, Optional[NodeId]]:
        for ancestor in self._ancestors(node, boundary):
            for candidate in self.scene.behaviors(ancestor):
                if point.accepts(candidate):
                    return candidate, ancestor
        return None, None

    # ---------------- resolution ----------------

    def _inject(self, behavior: Any, point: InjectionPoint, node: NodeId, value: Any, source: str, provider: Optional[NodeId]) -> Outcome:
        name = self.scene.name(node)
        try:
            point.set_value(behavior, value)
        except InjectionAssignmentError as e:
            return AssignmentFailed(behavior, point, node, name, value=value, cause=e)
        return Injected(behavior, point, node, name, value=value, source=source, provider_node=provider)

    def _resolve_point(self, behavior: Any, point: InjectionPoint, node: NodeId, services: List[Any], boundary: Optional[set]) -> Outcome:
        name = self.scene.name(node)

        if point.is_collection:
            matches = [s for s in services if point.accepts(s)]
            if not matches:
                return Unresolved(behavior, point, node, name)
            return self._inject(behavior, point, node, point.container(matches), SOURCE_SERVICE, None)

        found, provider = self._find_in_hierarchy(point, node, boundary)
        if found is not None:
            return self._inject(behavior, point, node, found, SOURCE_HIERARCHY, provider)

        matches = [s for s in services if point.accepts(s)]
        if len(matches) == 1:
            return self._inject(behavior, point, node, matches[0], SOURCE_SERVICE, self.scene.node_of(matches[0]))
        if matches:
            return Ambiguous(behavior, point, node, name, candidates=tuple(matches))
        return Unresolved(behavior, point, node, name)

    def resolve(self, roots: Union[NodeId, Iterable[NodeId]]) -> ResolutionReport:
        """Resolve the subtrees under *roots* (one node or several).

        The ancestor search of each behavior may reach above the roots
        unless ``config.clip_hierarchy_to_roots`` is set.

        Raises:
            SceneGraphError: If a root is not a node of the scene.
        """
        roots = [roots] if isinstance(roots, int) else list(roots)
        for r in roots:
            self.scene.name(r)

        scan = self.find_objects(roots)
        boundary = set(self.scene.walk(roots)) if self.config.clip_hierarchy_to_roots else None

        report = ResolutionReport(configuration_errors=list(scan.configuration_errors))
        for behavior in scan.injectables:
            node = self.scene.node_of(behavior)
            for point in injection_points(behavior):
                if not point.public:
                    continue
                outcome = self._resolve_point(behavior, point, node, scan.services, boundary)
                log_outcome(self._logger, outcome, log_successes=self.config.log_successes)
                report.outcomes.append(outcome)
        return report

    def resolve_scene(self) -> ResolutionReport:
        """Resolve every node of the scene."""
        return self.resolve(self.scene.roots())


def resolve_scene(scene: Scene, *, config: Optional[ResolverConfig] = None, logger: Optional[logging.Logger] = None) -> ResolutionReport:
    return DependencyResolver(scene, config=config, logger=logger).resolve_scene()


def resolve_subset(scene: Scene, node: Union[NodeId, Iterable[NodeId]], *, config: Optional[ResolverConfig] = None, logger: Optional[logging.Logger] = None) -> ResolutionReport:
    return DependencyResolver(scene, config=config, logger=logger).resolve(node)
