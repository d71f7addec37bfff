"""Resolver configuration.

:class:`ResolverConfig` is an immutable set of switches for a
:class:`~scene_inject.resolver.DependencyResolver`. It can be built in code,
from a flat mapping, or from prefixed environment variables.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    v = str(raw).strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigurationError(f"Invalid boolean for '{key}': {raw!r}")


@dataclass(frozen=True)
class ResolverConfig:
    """Switches controlling a resolution pass.

    Attributes:
        require_injectable_marker: Only scan behaviors whose class is marked
            with :func:`~scene_inject.decorators.injectable` or derives from
            :class:`~scene_inject.decorators.Injectable`.
        clip_hierarchy_to_roots: Stop the ancestor search at the roots of
            the pass instead of walking to the top of the scene.
        log_successes: Log successful injections at INFO (otherwise DEBUG).
    """
    require_injectable_marker: bool = False
    clip_hierarchy_to_roots: bool = False
    log_successes: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ResolverConfig":
        """Build a config from flat keys, case-insensitive.

        Raises:
            ConfigurationError: On unknown keys or unparseable values.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, raw in data.items():
            name = key.lower()
            if name not in known:
                raise ConfigurationError(f"Unknown resolver option: '{key}'")
            kwargs[name] = _parse_bool(key, raw)
        return cls(**kwargs)

    @classmethod
    def from_env(cls, prefix: str = "SCENE_INJECT_", environ: Optional[Mapping[str, str]] = None) -> "ResolverConfig":
        """Build a config from ``<prefix><OPTION>`` environment variables.

        Example:
            >>> ResolverConfig.from_env(environ={"SCENE_INJECT_LOG_SUCCESSES": "0"}).log_successes
            False
        """
        env = os.environ if environ is None else environ
        data = {}
        for f in fields(cls):
            raw = env.get(prefix + f.name.upper())
            if raw is not None:
                data[f.name] = raw
        return cls.from_mapping(data)
