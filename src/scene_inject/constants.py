"""Constants used throughout scene-inject.

This module defines the internal attribute names stamped onto decorated
classes and property getters, the library logger, and the origin labels
recorded on successful injections.
"""

import logging

LOGGER_NAME: str = "scene_inject"
"""Default logger name for scene-inject."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for resolution diagnostics."""

INJECT_META: str = "_scene_inject"
"""Attribute name storing the :class:`Inject` marker on a property getter."""

SERVICE_FLAG: str = "_scene_service"
"""Attribute name flagging a class as a globally discoverable service."""

INJECTABLE_FLAG: str = "_scene_injectable"
"""Attribute name flagging a class as participating in hierarchy scanning."""

INJECTION_POINTS: str = "_scene_injection_points"
"""Attribute name storing the precomputed injection-point table of a class."""

SOURCE_HIERARCHY: str = "hierarchy"
"""Origin label: the value was found on an ancestor node."""

SOURCE_SERVICE: str = "service"
"""Origin label: the value was found among the scanned services."""

DIAGNOSTIC_OBJECT: str = "scene_object"
"""``extra`` key under which log records carry the associated behavior."""
