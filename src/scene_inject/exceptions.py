"""Exception hierarchy for scene-inject.

All library exceptions inherit from :class:`SceneInjectError`. Resolution
problems are never raised out of a resolution pass; the corresponding
exception instances are carried by the outcomes of a
:class:`~scene_inject.report.ResolutionReport` and are only raised on demand
via :meth:`~scene_inject.report.ResolutionReport.raise_for_errors`.
"""

from typing import Any, Iterable, Sequence


def _fmt(t: Any) -> str:
    return getattr(t, "__name__", str(t))


class SceneInjectError(Exception):
    """Base exception for all scene-inject errors."""

    pass


class SceneGraphError(SceneInjectError):
    """Raised for invalid scene graph operations (unknown node, cycles, double attach)."""

    def __init__(self, msg: str):
        super().__init__(msg)


class ConfigurationError(SceneInjectError):
    """Raised for configuration problems.

    Also used to describe an injection point the resolver cannot reach
    (e.g. a non-public member); in that case it is recorded, not raised.
    """

    def __init__(self, msg: str):
        super().__init__(msg)


class UnresolvedDependencyError(SceneInjectError):
    """Describes an injection point for which no ancestor or service matched.

    Attributes:
        behavior: The behavior owning the injection point.
        member: Name of the injection point.
        declared_type: The type the injected value must satisfy.
        node_name: Name of the node the behavior is attached to.
    """

    def __init__(self, behavior: Any, member: str, declared_type: Any, node_name: str):
        super().__init__(
            f"Failed to resolve dependency for member. Member: {member}, "
            f"Behavior: {type(behavior).__name__}, Node: '{node_name}'. "
            f"Failed to find a dependency that matches {_fmt(declared_type)}."
        )
        self.behavior = behavior
        self.member = member
        self.declared_type = declared_type
        self.node_name = node_name


class AmbiguousServiceError(SceneInjectError):
    """Describes an injection point matched by more than one service.

    Attributes:
        behavior: The behavior owning the injection point.
        member: Name of the injection point.
        declared_type: The type the injected value must satisfy.
        candidates: Every service that satisfied ``declared_type``.
    """

    def __init__(self, behavior: Any, member: str, declared_type: Any, node_name: str, candidates: Sequence[Any]):
        names = ", ".join(type(c).__name__ for c in candidates)
        super().__init__(
            f"Ambiguous services for member. Member: {member}, "
            f"Behavior: {type(behavior).__name__}, Node: '{node_name}'. "
            f"{len(candidates)} services match {_fmt(declared_type)}: {names}."
        )
        self.behavior = behavior
        self.member = member
        self.declared_type = declared_type
        self.node_name = node_name
        self.candidates = tuple(candidates)


class InjectionAssignmentError(SceneInjectError):
    """Raised by an injection point when a value cannot be assigned to it.

    Attributes:
        member: Name of the injection point.
        declared_type: The type the injected value must satisfy.
        value: The value that could not be assigned.
        cause: The underlying exception, if the assignment itself failed.
    """

    def __init__(self, member: str, declared_type: Any, value: Any, cause: Exception | None = None):
        if cause is None:
            detail = f"{type(value).__name__} is not compatible with {_fmt(declared_type)}"
        else:
            detail = f"{cause.__class__.__name__}: {cause}"
        super().__init__(f"Failed to inject {type(value).__name__} at member '{member}'; cause: {detail}")
        self.member = member
        self.declared_type = declared_type
        self.value = value
        self.cause = cause


class InvalidInjectionError(SceneInjectError):
    """Raised on demand when a resolution pass left problems behind.

    Attributes:
        errors: List of human-readable error descriptions.
    """

    def __init__(self, errors: Iterable[str]):
        errors = list(errors)
        super().__init__("Invalid injections:\n" + "\n".join(f"- {e}" for e in errors))
        self.errors = errors
