"""Structured results of a resolution pass.

A pass produces one outcome per reachable injection point plus the
configuration problems found while scanning. :func:`log_outcome` renders an
outcome as a log line so the report and the log stay in step.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple

from .analysis import InjectionPoint
from .constants import DIAGNOSTIC_OBJECT
from .exceptions import (
    AmbiguousServiceError,
    ConfigurationError,
    InjectionAssignmentError,
    InvalidInjectionError,
    UnresolvedDependencyError,
)


def _fmt(t: Any) -> str:
    return getattr(t, "__name__", str(t))


@dataclass(frozen=True)
class Outcome:
    behavior: Any
    point: InjectionPoint
    node: int
    node_name: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def error(self) -> Optional[Exception]:
        return None


@dataclass(frozen=True)
class Injected(Outcome):
    value: Any = None
    source: str = ""
    provider_node: Optional[int] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Unresolved(Outcome):
    @property
    def error(self) -> UnresolvedDependencyError:
        return UnresolvedDependencyError(self.behavior, self.point.name, self.point.declared_type, self.node_name)


@dataclass(frozen=True)
class Ambiguous(Outcome):
    candidates: Tuple[Any, ...] = ()

    @property
    def error(self) -> AmbiguousServiceError:
        return AmbiguousServiceError(
            self.behavior, self.point.name, self.point.declared_type, self.node_name, self.candidates
        )


@dataclass(frozen=True)
class AssignmentFailed(Outcome):
    value: Any = None
    cause: Optional[InjectionAssignmentError] = None

    @property
    def error(self) -> Optional[InjectionAssignmentError]:
        return self.cause


@dataclass(frozen=True)
class ConfigurationProblem:
    """A behavior whose injection points the resolver cannot use."""
    behavior: Any
    node: int
    node_name: str
    error: ConfigurationError
    point: Optional[InjectionPoint] = None


@dataclass
class ResolutionReport:
    outcomes: List[Outcome] = field(default_factory=list)
    configuration_errors: List[ConfigurationProblem] = field(default_factory=list)

    def __iter__(self) -> Iterator[Outcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def injected(self) -> List[Injected]:
        return [o for o in self.outcomes if isinstance(o, Injected)]

    @property
    def unresolved(self) -> List[Unresolved]:
        return [o for o in self.outcomes if isinstance(o, Unresolved)]

    @property
    def ambiguous(self) -> List[Ambiguous]:
        return [o for o in self.outcomes if isinstance(o, Ambiguous)]

    @property
    def failed(self) -> List[AssignmentFailed]:
        return [o for o in self.outcomes if isinstance(o, AssignmentFailed)]

    @property
    def ok(self) -> bool:
        return not self.configuration_errors and all(o.ok for o in self.outcomes)

    def for_behavior(self, behavior: Any) -> List[Outcome]:
        return [o for o in self.outcomes if o.behavior is behavior]

    def raise_for_errors(self) -> None:
        """Raise :class:`InvalidInjectionError` if anything went wrong."""
        errors = [str(p.error) for p in self.configuration_errors]
        errors += [str(o.error) for o in self.outcomes if not o.ok]
        if errors:
            raise InvalidInjectionError(errors)


def log_configuration_problem(logger: logging.Logger, problem: ConfigurationProblem) -> None:
    logger.error(str(problem.error), extra={DIAGNOSTIC_OBJECT: problem.behavior})


def log_outcome(logger: logging.Logger, outcome: Outcome, *, log_successes: bool = True) -> None:
    extra = {DIAGNOSTIC_OBJECT: outcome.behavior}
    if isinstance(outcome, Injected):
        if outcome.point.is_collection:
            what = f"{len(outcome.value)} x {_fmt(outcome.point.declared_type)}"
        else:
            what = type(outcome.value).__name__
        logger.log(
            logging.INFO if log_successes else logging.DEBUG,
            "Injecting %s into %s at %s %s on node '%s' (from %s).",
            what, type(outcome.behavior).__name__, outcome.point.category, outcome.point.name,
            outcome.node_name, outcome.source,
            extra=extra,
        )
        return
    logger.error(str(outcome.error), extra=extra)
