from typing import TYPE_CHECKING, Annotated, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import pytest

from scene_inject import Inject, InjectFrom, inject, injectable, injection_points
from scene_inject.analysis import FIELD, PROPERTY, InjectionPoint, has_markers, is_assignable, satisfies
from scene_inject.constants import INJECTION_POINTS
from scene_inject.exceptions import ConfigurationError, InjectionAssignmentError

if TYPE_CHECKING:
    from decimal import Decimal


class Engine: ...
class TurboEngine(Engine): ...
class Wheel: ...


class Car:
    engine: Annotated[Engine, Inject()] = None
    spare: Annotated[Optional[Wheel], Inject(InjectFrom.ANYWHERE)] = None
    color: str = "red"
    plain: Engine = None

    def __init__(self):
        self._wheel = None

    @property
    @inject
    def wheel(self) -> Wheel:
        return self._wheel

    @wheel.setter
    def wheel(self, value):
        self._wheel = value

    @property
    def not_injected(self) -> Wheel:
        return None


class SportsCar(Car):
    turbo: Annotated[TurboEngine, Inject()] = None


class Garage:
    cars: Annotated[List[Car], Inject(InjectFrom.ANYWHERE)] = None
    wheels: Annotated[Tuple[Wheel, ...], Inject()] = None
    engines: Annotated[Sequence[Engine], Inject()] = None


class Secretive:
    _hidden: Annotated[Engine, Inject()] = None
    __very_hidden: Annotated[Engine, Inject()] = None


def test_fields_then_properties_with_metadata():
    points = injection_points(Car)
    assert [p.name for p in points] == ["engine", "spare", "wheel"]

    engine, spare, wheel = points
    assert engine.declared_type is Engine
    assert engine.scope is InjectFrom.ABOVE
    assert engine.category == FIELD

    assert spare.declared_type is Wheel
    assert spare.scope is InjectFrom.ANYWHERE

    assert wheel.declared_type is Wheel
    assert wheel.category == PROPERTY
    assert all(p.public and not p.is_collection for p in points)


def test_instances_and_classes_give_the_same_points():
    assert injection_points(Car()) == injection_points(Car)


def test_inherited_points_come_before_subclass_points():
    names = [p.name for p in injection_points(SportsCar)]
    assert names == ["engine", "spare", "turbo", "wheel"]


def test_property_overridden_by_plain_attribute_is_dropped():
    class Van(Car):
        wheel = None

    assert [p.name for p in injection_points(Van)] == ["engine", "spare"]


def test_collection_members():
    cars, wheels, engines = injection_points(Garage)
    assert cars.is_collection and cars.container is list and cars.declared_type is Car
    assert wheels.is_collection and wheels.container is tuple and wheels.declared_type is Wheel
    assert engines.is_collection and engines.container is list


def test_underscore_members_are_not_public():
    points = injection_points(Secretive)
    assert [p.public for p in points] == [False, False]
    assert points[1].name == "_Secretive__very_hidden"


def test_class_without_markers_has_no_points():
    assert injection_points(Wheel) == ()
    assert injection_points(object()) == ()


def test_property_without_return_annotation_is_a_configuration_error():
    class Broken:
        @property
        @inject
        def engine(self):
            return None

    with pytest.raises(ConfigurationError, match="no return annotation"):
        injection_points(Broken)


def test_inject_decorator_forms():
    class Forms:
        @property
        @inject()
        def a(self) -> Engine: ...

        @property
        @inject(InjectFrom.ANYWHERE)
        def b(self) -> Engine: ...

        @property
        @inject(scope=InjectFrom.ANYWHERE)
        def c(self) -> Engine: ...

    a, b, c = injection_points(Forms)
    assert a.scope is InjectFrom.ABOVE
    assert b.scope is InjectFrom.ANYWHERE
    assert c.scope is InjectFrom.ANYWHERE


def test_injectable_stamps_the_point_table():
    @injectable
    class Stamped:
        engine: Annotated[Engine, Inject()] = None

    assert Stamped.__dict__[INJECTION_POINTS] == (InjectionPoint("engine", Engine),)
    assert injection_points(Stamped) is Stamped.__dict__[INJECTION_POINTS]


@injectable
class EarlyReference:
    later: Annotated["DefinedLater", Inject()] = None


class DefinedLater: ...


def test_injectable_with_forward_reference_is_built_lazily():
    assert INJECTION_POINTS not in EarlyReference.__dict__
    (point,) = injection_points(EarlyReference)
    assert point.declared_type is DefinedLater


class Dangling:
    missing: Annotated["NoSuchType", Inject()] = None


def test_unresolvable_annotation_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="Dangling"):
        injection_points(Dangling)


@runtime_checkable
class Drivable(Protocol):
    def drive(self): ...


class Steerable(Protocol):
    def steer(self): ...


class Kart:
    def drive(self): ...
    def steer(self): ...


@pytest.mark.parametrize(
    "cls,declared,expected",
    [
        (TurboEngine, Engine, True),
        (Engine, TurboEngine, False),
        (Wheel, Engine, False),
        (Kart, Drivable, True),
        (Wheel, Drivable, False),
        (Kart, Steerable, True),
        (Wheel, Steerable, False),
        (Wheel, Engine | Wheel, True),
        (Wheel, "Engine", False),
    ],
)
def test_is_assignable(cls, declared, expected):
    assert is_assignable(cls, declared) is expected


def test_set_value_assigns_field_and_property():
    car = Car()
    engine, _, wheel = injection_points(Car)
    e, w = TurboEngine(), Wheel()
    engine.set_value(car, e)
    wheel.set_value(car, w)
    assert car.engine is e
    assert car._wheel is w


def test_set_value_rejects_incompatible_value():
    engine = injection_points(Car)[0]
    car = Car()
    with pytest.raises(InjectionAssignmentError, match="not compatible with Engine") as exc:
        engine.set_value(car, Wheel())
    assert exc.value.cause is None
    assert car.engine is None


def test_set_value_wraps_setter_failures():
    class ReadOnly:
        @property
        @inject
        def engine(self) -> Engine:
            return None

    (point,) = injection_points(ReadOnly)
    with pytest.raises(InjectionAssignmentError) as exc:
        point.set_value(ReadOnly(), Engine())
    assert isinstance(exc.value.cause, AttributeError)


def test_set_value_checks_every_collection_element():
    cars = injection_points(Garage)[0]
    garage = Garage()
    with pytest.raises(InjectionAssignmentError):
        cars.set_value(garage, [Car(), Wheel()])
    cars.set_value(garage, [Car()])
    assert len(garage.cars) == 1


class Priced:
    price: "Decimal"
    label: str = ""


class OptionalOutside:
    engine: Optional[Annotated[Engine, Inject(InjectFrom.ANYWHERE)]] = None


class BadAttribute:
    engine: "Annotated[Engine.no_such_attr, Inject()]" = None


class BadSyntax:
    engine: "Annotated[Engine, Inject(]" = None


def test_unmarked_class_with_type_checking_hints_is_skipped():
    assert has_markers(Priced) is False
    assert injection_points(Priced) == ()


def test_markers_are_detected_without_evaluating_annotations():
    assert has_markers(Car)
    assert has_markers(SportsCar)
    assert has_markers(BadAttribute)
    assert has_markers(Dangling)


def test_marker_inside_optional_is_an_injection_point():
    (point,) = injection_points(OptionalOutside)
    assert point.name == "engine"
    assert point.declared_type is Engine
    assert point.scope is InjectFrom.ANYWHERE


@pytest.mark.parametrize("cls,cause", [(BadAttribute, "AttributeError"), (BadSyntax, "SyntaxError")])
def test_any_annotation_failure_becomes_a_configuration_error(cls, cause):
    with pytest.raises(ConfigurationError, match=cause):
        injection_points(cls)


def test_injectable_leaves_misdeclared_classes_to_the_scan():
    @injectable
    class NoReturnType:
        @property
        @inject
        def engine(self):
            return None

    assert INJECTION_POINTS not in NoReturnType.__dict__
    with pytest.raises(ConfigurationError, match="no return annotation"):
        injection_points(NoReturnType)


class Named(Protocol):
    name: str


@runtime_checkable
class Labelled(Protocol):
    label: str


class Person:
    def __init__(self, name: str):
        self.name = name
        self.label = name.upper()


def test_satisfies_checks_protocol_data_members_on_the_instance():
    ann = Person("Ann")
    assert satisfies(ann, Named)
    assert satisfies(ann, Labelled)
    assert not satisfies(Wheel(), Named)
    assert not satisfies(Wheel(), Labelled)
    assert satisfies(TurboEngine(), Engine)
    assert not satisfies(Wheel(), Engine)
    assert satisfies(Wheel(), Engine | Wheel)


def test_accepts_uses_the_instance():
    class Greeter:
        who: Annotated[Named, Inject()] = None

    (point,) = injection_points(Greeter)
    assert point.accepts(Person("Bo"))
    assert not point.accepts(Engine())
