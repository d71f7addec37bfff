"""Builds a small town scene and resolves it.

Run with ``python -m town.main`` from ``examples/town``. Set
``TOWN_DI_LOG_SUCCESSES=0`` to hide the per-injection log lines.
"""

import logging

from scene_inject import DependencyResolver, ResolverConfig, Scene

from .behaviors import NPC, Pedestrian, Player, Street, Vehicle


def build_scene():
    scene = Scene()
    app = scene.add_node("Application")
    scene.attach(scene.add_node("Player", parent=app), Player("Alex"))

    main_street = scene.add_node("Main Street", parent=app)
    scene.attach(main_street, Street("Main Street"))
    npc = NPC()
    scene.attach(scene.add_node("Baker", parent=main_street), npc)
    car = Vehicle()
    scene.attach(scene.add_node("Car", parent=main_street), car)

    crowd = scene.add_node("Crowd", parent=app)
    for name in ("Ann", "Bob"):
        scene.attach(scene.add_node(name, parent=crowd), Pedestrian(name))
    return scene, npc, car


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    scene, npc, car = build_scene()

    report = DependencyResolver(scene, config=ResolverConfig.from_env(prefix="TOWN_DI_")).resolve_scene()
    if not report.ok:
        return 1

    print(npc.greet())
    print(car.honk())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
