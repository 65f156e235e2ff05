from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

ENV_CONFIG_FILE = "EMITTER_CONFIG_FILE"

_UNBOUNDED = {"", "none", "null", "inf", "infinity", "unbounded"}


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey values into a bool.

    Accepts: True/False, 1/0, "true"/"false", "yes"/"no", "on"/"off" (case-insensitive).
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off", ""}:
            return False
        raise ValueError(f"Not a boolean value: {value!r}")
    return bool(value)


def _as_limit(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, str):
        if value.strip().lower() in _UNBOUNDED:
            return None
        return int(value.strip())
    if isinstance(value, float):
        if value == float("inf"):
            return None
        if not value.is_integer():
            raise ValueError(f"max_listeners must be a whole number, got {value!r}")
    return int(value)


def _as_names(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return [str(name) for name in value]


@dataclass
class EmitterConfig:
    """Construction options for :class:`emitterkit.emitter.EventEmitter`."""

    event_names: List[str] = field(default_factory=list)
    max_listeners: Optional[int] = None
    enforce_limit: bool = False
    collect_errors: bool = False
    strict_emit: bool = False

    def validate(self) -> None:
        """Normalize field types; raise ValueError on an invalid limit."""
        self.event_names = _as_names(self.event_names)
        self.max_listeners = _as_limit(self.max_listeners)
        if self.max_listeners is not None and self.max_listeners < 1:
            raise ValueError(f"max_listeners must be positive, got {self.max_listeners}")
        self.enforce_limit = _as_bool(self.enforce_limit)
        self.collect_errors = _as_bool(self.collect_errors)
        self.strict_emit = _as_bool(self.strict_emit)

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmitterConfig":
        allowed = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - allowed)
        if unknown:
            logger.warning("Ignoring unknown emitter config keys: %s", ", ".join(unknown))
        obj = cls(**{k: v for k, v in data.items() if k in allowed})
        obj.validate()
        return obj

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Collect overrides from ``EMITTER_*`` environment variables."""
        env = os.environ if env is None else env
        mapping = {
            "EMITTER_EVENT_NAMES": ("event_names", _as_names),
            "EMITTER_MAX_LISTENERS": ("max_listeners", _as_limit),
            "EMITTER_ENFORCE_LIMIT": ("enforce_limit", _as_bool),
            "EMITTER_COLLECT_ERRORS": ("collect_errors", _as_bool),
            "EMITTER_STRICT_EMIT": ("strict_emit", _as_bool),
        }
        out: Dict[str, Any] = {}
        for env_key, (field_name, caster) in mapping.items():
            if env_key not in env:
                continue
            try:
                out[field_name] = caster(env[env_key])
            except ValueError as exc:
                raise ValueError(f"Invalid value for {env_key}={env[env_key]!r}: {exc}") from exc
        return out

    @classmethod
    def from_yaml_file(cls, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.debug("Emitter config file not found: %s", path)
            return {}
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Emitter config in {path} must be a mapping, got {type(raw).__name__}")
        logger.info("Loaded emitter config from %s", path)
        return raw


def _load_defaults() -> Dict[str, Any]:
    data = resource_files("emitterkit.config").joinpath("emitter.yaml").read_text(encoding="utf-8")
    logger.debug("Loaded embedded emitter config resource")
    return yaml.safe_load(data) or {}


def load_emitter_config(
    path: Optional[Path | str] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> EmitterConfig:
    """Load emitter configuration.

    Order of precedence (lowest to highest): embedded defaults < YAML file < env.
    The YAML file is ``path`` when given, else the file named by
    ``EMITTER_CONFIG_FILE`` if that variable is set.
    """
    env = os.environ if env is None else env
    data = _load_defaults()

    if path is None and env.get(ENV_CONFIG_FILE):
        path = env[ENV_CONFIG_FILE]
    if path is not None:
        data.update(EmitterConfig.from_yaml_file(Path(path).expanduser()))

    data.update(EmitterConfig.from_env(env))
    config = EmitterConfig.from_dict(data)
    logger.debug("Emitter config resolved: %s", config)
    return config


__all__ = ["EmitterConfig", "load_emitter_config", "ENV_CONFIG_FILE"]
