from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jsonschema import Draft7Validator
from platformdirs import user_config_dir

from .core.geometry import Size
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "roguely"
ENV_CONFIG_FILE = "ROGUELY_CONFIG"
_PKG_DATA = "roguely.data"


def _as_int_or_str(value: str) -> Union[int, str]:
    try:
        return int(value)
    except ValueError:
        return value


# env var -> (field, caster)
_ENV_MAPPING = {
    "ROGUELY_MAP_NAME": ("map_name", str),
    "ROGUELY_MAP_WIDTH": ("map_width", int),
    "ROGUELY_MAP_HEIGHT": ("map_height", int),
    "ROGUELY_SMOOTHING_PASSES": ("smoothing_passes", int),
    "ROGUELY_FLOOR_THRESHOLD": ("floor_threshold", int),
    "ROGUELY_VIEW_PORT_WIDTH": ("view_port_width", int),
    "ROGUELY_VIEW_PORT_HEIGHT": ("view_port_height", int),
    "ROGUELY_SEED": ("seed", _as_int_or_str),
    "ROGUELY_LOG_LEVEL": ("log_level", str.upper),
}


@dataclass
class Settings:
    """Simulation settings.

    Sources, lowest to highest precedence:
    - dataclass defaults
    - the packaged roguely/data/default.yaml
    - the user config file (ROGUELY_CONFIG, else <user_config_dir>/roguely/config.yaml)
    - an explicit path passed to ``load_settings``
    - ROGUELY_* environment variables

    Every YAML document is validated against the bundled settings.schema.json.
    """

    map_name: str = "main"
    map_width: int = 125
    map_height: int = 125
    smoothing_passes: int = 10
    floor_threshold: int = 48
    view_port_width: int = 40
    view_port_height: int = 24
    seed: Optional[Union[int, str]] = None
    log_level: str = "INFO"

    @property
    def view_port(self) -> Size:
        return Size(self.view_port_width, self.view_port_height)

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        validate_settings(data)
        allowed = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in allowed})


def _schema() -> Dict[str, Any]:
    text = resources.files(_PKG_DATA).joinpath("settings.schema.json").read_text(encoding="utf-8")
    return json.loads(text)


def validate_settings(data: Mapping[str, Any], source: str = "<dict>") -> None:
    validator = Draft7Validator(_schema())
    errors = sorted(validator.iter_errors(dict(data)), key=lambda e: list(e.path))
    if errors:
        details = "; ".join(f"{'/'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errors)
        raise ConfigError(f"Invalid settings in {source}: {details}")


def read_yaml(text: str, source: str) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {source}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{source} must contain a mapping, got {type(raw).__name__}")
    validate_settings(raw, source)
    return raw


def default_user_config_path() -> Path:
    override = os.getenv(ENV_CONFIG_FILE)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME, appauthor=False)) / "config.yaml"


def from_env(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if env is None else env
    out: Dict[str, Any] = {}
    for env_key, (field_name, caster) in _ENV_MAPPING.items():
        value = env.get(env_key)
        if value is None or value == "":
            continue
        try:
            out[field_name] = caster(value)
        except ValueError as exc:
            raise ConfigError(f"Invalid value for {env_key}={value!r}: {exc}") from exc
    return out


def load_settings(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
    use_user_config: bool = True,
) -> Settings:
    """Merge every settings source into a validated Settings instance."""
    data: Dict[str, Any] = {}

    packaged = resources.files(_PKG_DATA).joinpath("default.yaml").read_text(encoding="utf-8")
    data.update(read_yaml(packaged, "default.yaml"))

    if use_user_config:
        user_path = default_user_config_path()
        if user_path.is_file():
            data.update(read_yaml(user_path.read_text(encoding="utf-8"), str(user_path)))
            logger.debug("Loaded user settings from %s", user_path)

    if path is not None:
        explicit = Path(path)
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        data.update(read_yaml(explicit.read_text(encoding="utf-8"), str(explicit)))
        logger.debug("Loaded settings from %s", explicit)

    data.update(from_env(env))
    settings = Settings.from_dict(data)
    logger.info(
        "Settings: map %dx%d, %d passes, view port %dx%d",
        settings.map_width,
        settings.map_height,
        settings.smoothing_passes,
        settings.view_port_width,
        settings.view_port_height,
    )
    return settings
