import logging
import os
from dataclasses import dataclass, replace
from typing import Callable, Mapping, Optional, TypeVar

from errors import ConfigError
from preset_registry import DEFAULT_PRESET, EstimatorOptions, get_preset
from thresholds import Thresholds


ENV_PREFIX = "PRESENCE_GATE_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

T = TypeVar("T")


@dataclass(frozen=True)
class AppConfig:
    preset: str
    thresholds: Thresholds
    estimator: EstimatorOptions
    auto_capture: bool = True
    camera_index: int = 0
    log_level: str = "INFO"


def get_env(name: str, default: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    source = os.environ if environ is None else environ
    return source.get(f"{ENV_PREFIX}{name}", default)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _read(name: str, parse: Callable[[str], T], environ: Optional[Mapping[str, str]]) -> Optional[T]:
    raw = get_env(name, environ=environ)
    if raw is None or not raw.strip():
        return None
    try:
        return parse(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from exc


def load_config(preset: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the session configuration from a named preset plus environment overrides.

    An explicit ``preset`` argument wins over ``PRESENCE_GATE_PRESET``. Threshold
    overrides replace the preset's values; the result is validated before use.
    """
    name = preset or get_env("PRESET", DEFAULT_PRESET, environ=environ) or DEFAULT_PRESET
    entry = get_preset(name)

    overrides = {}
    confidence = _read("CONFIDENCE_THRESHOLD", float, environ)
    if confidence is not None:
        overrides["confidence_threshold"] = confidence
    consecutive = _read("REQUIRED_CONSECUTIVE", int, environ)
    if consecutive is not None:
        overrides["required_consecutive"] = consecutive
    rearm = _read("REARM_SECONDS", float, environ)
    if rearm is not None:
        overrides["rearm_seconds"] = rearm
    thresholds = replace(entry.thresholds, **overrides).validate()

    auto_capture = _read("AUTO_CAPTURE", _parse_bool, environ)
    camera_index = _read("CAMERA_INDEX", int, environ)
    log_level = (get_env("LOG_LEVEL", environ=environ) or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Invalid value for {ENV_PREFIX}LOG_LEVEL: {log_level!r}")

    return AppConfig(
        preset=entry.name,
        thresholds=thresholds,
        estimator=entry.estimator,
        auto_capture=True if auto_capture is None else auto_capture,
        camera_index=0 if camera_index is None else camera_index,
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
