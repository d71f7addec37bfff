"""Injection-point introspection.

Turns the ``Annotated[T, Inject(...)]`` fields and ``@inject`` properties of a
class into a uniform tuple of :class:`InjectionPoint` descriptors, and decides
whether a candidate type satisfies a declared type.
"""

import collections.abc
import inspect
import re
import sys
import types
from dataclasses import dataclass
from typing import Annotated, Any, Generic, List, Optional, Protocol, Tuple, Union, get_args, get_origin, get_type_hints

from .constants import INJECT_META, INJECTION_POINTS
from .decorators import Inject, InjectFrom
from .exceptions import ConfigurationError, InjectionAssignmentError

FIELD = "field"
PROPERTY = "property"

_COLLECTION_ORIGINS = (list, List, tuple, Tuple, collections.abc.Sequence)
_UNION_ORIGINS = (Union, types.UnionType)
_INJECT_IN_SOURCE = re.compile(r"\bInject\s*\(")


@dataclass(frozen=True)
class InjectionPoint:
    """A member of a behavior class that requires a resolved value.

    Attributes:
        name: Attribute name on the owning class (diagnostic only).
        declared_type: The type an injected value must satisfy. For
            collection members this is the element type.
        scope: Declared origin of the dependency.
        category: ``"field"`` or ``"property"``; never affects resolution.
        public: ``False`` for underscore-prefixed members, which the
            resolver cannot reach.
        is_collection: Whether the member receives every matching service.
        container: ``list`` or ``tuple`` for collection members.
    """
    name: str
    declared_type: Any
    scope: InjectFrom = InjectFrom.ABOVE
    category: str = FIELD
    public: bool = True
    is_collection: bool = False
    container: Optional[type] = None

    def accepts(self, candidate: Any) -> bool:
        return satisfies(candidate, self.declared_type)

    def set_value(self, owner: Any, value: Any) -> None:
        """Assign *value* to this member on *owner*.

        Raises:
            InjectionAssignmentError: If *value* does not satisfy the
                declared type or the assignment itself fails (e.g. a
                property without a setter).
        """
        items = value if self.is_collection else (value,)
        for item in items:
            if not self.accepts(item):
                raise InjectionAssignmentError(self.name, self.declared_type, item)
        try:
            setattr(owner, self.name, value)
        except Exception as e:
            raise InjectionAssignmentError(self.name, self.declared_type, value, cause=e) from e


def _check_optional(ann: Any) -> Any:
    if get_origin(ann) in _UNION_ORIGINS:
        args = [a for a in get_args(ann) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return ann


def _extract_inject(ann: Any) -> Tuple[Any, Optional[Inject]]:
    ann = _check_optional(ann)
    if get_origin(ann) is not Annotated:
        return ann, None
    args = get_args(ann)
    base = args[0] if args else Any
    for m in args[1:]:
        if isinstance(m, Inject):
            return base, m
    return base, None


def _split_collection(ann: Any) -> Tuple[Any, Optional[type]]:
    origin = get_origin(ann)
    if origin not in _COLLECTION_ORIGINS:
        return ann, None
    args = get_args(ann)
    if origin in (tuple, Tuple) and not (len(args) == 2 and args[1] is Ellipsis):
        return ann, None
    elem = args[0] if args else Any
    return _check_optional(elem), (tuple if origin in (tuple, Tuple) else list)


def _make_point(name: str, ann: Any, marker: Inject, category: str) -> InjectionPoint:
    base = _check_optional(ann)
    elem, container = _split_collection(base)
    return InjectionPoint(
        name=name,
        declared_type=elem,
        scope=marker.scope,
        category=category,
        public=not name.startswith("_"),
        is_collection=container is not None,
        container=container,
    )


def _field_points(cls: type) -> List[InjectionPoint]:
    points: List[InjectionPoint] = []
    for name, ann in get_type_hints(cls, include_extras=True).items():
        base, marker = _extract_inject(ann)
        if marker is not None:
            points.append(_make_point(name, base, marker, FIELD))
    return points


def _property_points(cls: type) -> List[InjectionPoint]:
    props = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property):
                props[name] = attr
            else:
                props.pop(name, None)

    points: List[InjectionPoint] = []
    for name, prop in props.items():
        marker = getattr(prop.fget, INJECT_META, None)
        if marker is None:
            continue
        ann = get_type_hints(prop.fget).get("return")
        if ann is None:
            raise ConfigurationError(
                f"Injectable property '{name}' of {cls.__name__} has no return annotation; "
                f"cannot determine the type to inject"
            )
        points.append(_make_point(name, ann, marker, PROPERTY))
    return points


def _raw_annotations(klass: type) -> dict:
    try:
        return dict(inspect.get_annotations(klass))
    except Exception:
        if sys.version_info < (3, 14):
            return {}
        # lazily evaluated annotations referring to undefined names
        import annotationlib
        return dict(annotationlib.get_annotations(klass, format=annotationlib.Format.STRING))


def _carries_inject(ann: Any) -> bool:
    if isinstance(ann, str):
        return _INJECT_IN_SOURCE.search(ann) is not None
    if get_origin(ann) is Annotated and any(isinstance(m, Inject) for m in get_args(ann)[1:]):
        return True
    return any(_carries_inject(a) for a in get_args(ann))


def has_markers(cls: type) -> bool:
    """Whether *cls* declares any injection point, without evaluating its annotations."""
    for klass in cls.__mro__:
        for attr in vars(klass).values():
            if isinstance(attr, property) and getattr(attr.fget, INJECT_META, None) is not None:
                return True
        if any(_carries_inject(a) for a in _raw_annotations(klass).values()):
            return True
    return False


def build_injection_points(cls: type) -> Tuple[InjectionPoint, ...]:
    """Introspect *cls* and return its injection points, fields first.

    Raises:
        Exception: Whatever evaluating an annotation raises (``NameError``,
            ``AttributeError``, ``SyntaxError``, ...).
        ConfigurationError: If an ``@inject`` property has no return annotation.
    """
    return tuple(_field_points(cls) + _property_points(cls))


def injection_points(obj: Any) -> Tuple[InjectionPoint, ...]:
    """Return the injection points of *obj* (a class or an instance).

    Uses the table stamped by :func:`~scene_inject.decorators.injectable`
    when present on the class itself, otherwise introspects.

    Raises:
        ConfigurationError: If the class's injection points cannot be built.
    """
    cls = obj if isinstance(obj, type) else type(obj)
    stamped = cls.__dict__.get(INJECTION_POINTS)
    if stamped is not None:
        return stamped
    if not has_markers(cls):
        return ()
    try:
        return build_injection_points(cls)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Cannot evaluate injection annotations of {cls.__name__}: {e.__class__.__name__}: {e}"
        ) from e


def _protocol_members(proto: type) -> List[str]:
    names: List[str] = []
    for base in proto.__mro__:
        if base in (object, Protocol, Generic):
            continue
        for n in list(vars(base)) + list(getattr(base, "__annotations__", {})):
            if not n.startswith("_") and n not in names:
                names.append(n)
    return names


def _implements_protocol(obj: Any, proto: type) -> bool:
    return all(hasattr(obj, n) for n in _protocol_members(proto))


def is_assignable(cls: type, declared: Any) -> bool:
    """Whether instances of *cls* satisfy *declared*.

    Nominal subclassing first (ABCs and runtime-checkable protocols
    included), then a structural check for protocols ``issubclass`` refuses.
    """
    if declared is Any:
        return True
    if get_origin(declared) in _UNION_ORIGINS:
        return any(is_assignable(cls, a) for a in get_args(declared))
    if not inspect.isclass(declared):
        return False
    try:
        return issubclass(cls, declared)
    except TypeError:
        if getattr(declared, "_is_protocol", False):
            return _implements_protocol(cls, declared)
        return False


def satisfies(candidate: Any, declared: Any) -> bool:
    """Whether the instance *candidate* satisfies *declared*.

    Like :func:`is_assignable` but checks the instance, so protocol data
    members set in ``__init__`` count.
    """
    if declared is Any:
        return True
    if get_origin(declared) in _UNION_ORIGINS:
        return any(satisfies(candidate, a) for a in get_args(declared))
    if not inspect.isclass(declared):
        return False
    try:
        return isinstance(candidate, declared)
    except TypeError:
        if getattr(declared, "_is_protocol", False):
            return _implements_protocol(candidate, declared)
        return False
