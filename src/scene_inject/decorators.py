# scene_inject/decorators.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .constants import INJECT_META, INJECTABLE_FLAG, INJECTION_POINTS, SERVICE_FLAG


class InjectFrom(Enum):
    """Where a dependency is expected to come from.

    Both strategies are always attempted (ancestors first, then services);
    the value is carried for diagnostics and documentation.
    """

    ABOVE = "hierarchy"
    ANYWHERE = "global"


@dataclass(frozen=True)
class Inject:
    """Marks a field as an injection point.

    Used as ``Annotated`` metadata::

        class Wheel:
            car: Annotated[Car, Inject()]
            road: Annotated[Road, Inject(InjectFrom.ANYWHERE)]
    """

    scope: InjectFrom = InjectFrom.ABOVE


def inject(fn=None, *, scope: InjectFrom = InjectFrom.ABOVE):
    """Mark a property getter as an injection point.

    Place it beneath ``@property``; the getter's return annotation is the
    declared type and the property's setter receives the injected value.
    Accepts ``@inject``, ``@inject()`` and ``@inject(InjectFrom.ANYWHERE)``.
    """
    if isinstance(fn, InjectFrom):
        scope, fn = fn, None

    def dec(f):
        setattr(f, INJECT_META, Inject(scope))
        return f
    return dec(fn) if fn is not None else dec


def service(cls):
    """Mark a class as a globally discoverable service (inherited by subclasses)."""
    setattr(cls, SERVICE_FLAG, True)
    return cls


def injectable(cls):
    """Mark a class as participating in hierarchy scanning.

    The class's injection-point table is built here and stamped on the
    class. If the table cannot be built yet (forward references to names
    defined later, or a misdeclared member) it is left to the scan, which
    builds it lazily and reports any problem.
    """
    from .analysis import build_injection_points

    setattr(cls, INJECTABLE_FLAG, True)
    try:
        points = build_injection_points(cls)
    except Exception:
        return cls
    setattr(cls, INJECTION_POINTS, points)
    return cls


class Injectable:
    """Marker base class for behaviors that take part in hierarchy scanning."""

    pass


setattr(Injectable, INJECTABLE_FLAG, True)


def is_service(obj) -> bool:
    cls = obj if isinstance(obj, type) else type(obj)
    return bool(getattr(cls, SERVICE_FLAG, False))


def is_injectable_marked(obj) -> bool:
    cls = obj if isinstance(obj, type) else type(obj)
    return bool(getattr(cls, INJECTABLE_FLAG, False))


__all__ = [
    "InjectFrom", "Inject",
    "inject", "service", "injectable", "Injectable",
    "is_service", "is_injectable_marked",
]
