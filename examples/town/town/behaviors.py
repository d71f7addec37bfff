from typing import Annotated, List, Optional

from scene_inject import Inject, InjectFrom, Injectable, inject, service


@service
class Player:
    """The one player in the scene; found from anywhere."""

    def __init__(self, name: str = "Hero"):
        self.name = name


@service
class Pedestrian:
    def __init__(self, name: str):
        self.name = name


class Street:
    """Sits above the NPCs and vehicles that live on it."""

    def __init__(self, name: str):
        self.name = name


class NPC(Injectable):
    player: Annotated[Player, Inject(InjectFrom.ANYWHERE)] = None
    street: Annotated[Optional[Street], Inject()] = None

    def greet(self) -> str:
        # Only valid once resolution has completed.
        return f"Hello {self.player.name}, welcome to {self.street.name}!"


class Vehicle(Injectable):
    pedestrians: Annotated[List[Pedestrian], Inject(InjectFrom.ANYWHERE)] = None

    def __init__(self):
        self._street = None

    @property
    @inject
    def street(self) -> Street:
        return self._street

    @street.setter
    def street(self, value: Street):
        self._street = value

    def honk(self) -> str:
        names = ", ".join(p.name for p in self.pedestrians)
        return f"Beep beep on {self.street.name}! Watch out {names}."
