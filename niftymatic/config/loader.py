"""
YAML configuration loader.

This helper locates, reads, merges, and validates the configuration before
returning a :class:`niftymatic.config.schema.ConfigSchema` instance.

Merge precedence (later sources override earlier ones)
1. The packaged default shipped inside the wheel.
2. The system-wide file ``/etc/niftymatic/niftymatic.yaml`` (or the path in
   ``$NIFTYMATIC_CONFIG``). Optional.
3. An explicit path argument (``--config`` on the CLI). Must exist.
4. Environment variables ``NIFTYMATIC_<SECTION>_<KEY>``, for example
   ``NIFTYMATIC_DOCKER_IMAGE=renbem/niftymic:v0.9``. Empty values are ignored.

All resolution logic is concentrated here so the rest of *niftymatic*
treats configuration as an already-validated, immutable object.
"""

from __future__ import annotations

import os
from importlib.resources import as_file, files
from pathlib import Path
from typing import Mapping, Optional

import structlog
import yaml
from pydantic import ValidationError

from niftymatic.utils.errors import ConfigurationInvalid

from .schema import ConfigSchema

log = structlog.get_logger()

ENV_PREFIX = "NIFTYMATIC_"
SYSTEM_CONFIG = Path("/etc/niftymatic/niftymatic.yaml")

# --------------------------------------------------------------------------- #
# Wheel-internal fallback                                                     #
# --------------------------------------------------------------------------- #
try:
    _DEFAULT_CONFIG = files("niftymatic.resources") / "default_config.yaml"
except ModuleNotFoundError:
    _DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "resources" / "default_config.yaml"

# --------------------------------------------------------------------------- #
# Helper functions                                                            #
# --------------------------------------------------------------------------- #


def _load_yaml(path: Path) -> dict:
    """Read a YAML mapping from *path*.

    Args:
        path: Location of the YAML document.

    Returns:
        Parsed mapping, or an empty dict if the file is empty.

    Raises:
        ConfigurationInvalid: When the file cannot be read or parsed, or its
            top level is not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationInvalid(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationInvalid(f"{path} must contain a mapping at the top level")
    return data


def _merge(base: dict, override: Mapping) -> dict:
    """Return *base* updated recursively with *override*."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides(environ: Mapping[str, str], sections: set[str]) -> dict:
    """Collect ``NIFTYMATIC_<SECTION>_<KEY>`` values into a nested dict.

    Only variables whose section is already known from the defaults are
    considered, so unrelated ``NIFTYMATIC_*`` variables (such as
    ``NIFTYMATIC_LOG_DIR``) are left alone.
    """
    overrides: dict[str, dict[str, str]] = {}
    for name, value in environ.items():
        if not name.startswith(ENV_PREFIX) or not value:
            continue
        section, _, key = name[len(ENV_PREFIX):].lower().partition("_")
        if section not in sections or not key:
            continue
        overrides.setdefault(section, {})[key] = value
    return overrides


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def load_config(
    config_path: Optional[str | Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    system_path: Optional[str | Path] = None,
) -> ConfigSchema:
    """Return a fully validated :class:`ConfigSchema`.

    Args:
        config_path: Explicit YAML file. ``None`` skips this layer.
        environ: Environment mapping used for overrides. Defaults to
            :data:`os.environ`.
        system_path: Override for the system-wide file location. Defaults
            to ``$NIFTYMATIC_CONFIG`` or :data:`SYSTEM_CONFIG`.

    Returns:
        A frozen :class:`ConfigSchema`.

    Raises:
        ConfigurationInvalid: When the explicit file is missing, any YAML is
            unreadable, or the merged document fails validation.
    """
    environ = os.environ if environ is None else environ

    with as_file(_DEFAULT_CONFIG) as p:
        merged = _load_yaml(p)

    system = Path(system_path or environ.get(f"{ENV_PREFIX}CONFIG") or SYSTEM_CONFIG)
    if system.is_file():
        log.debug("config.system", path=str(system))
        merged = _merge(merged, _load_yaml(system))

    if config_path is not None:
        explicit = Path(config_path).expanduser()
        if not explicit.is_file():
            raise ConfigurationInvalid(f"Configuration file not found: {explicit}")
        log.debug("config.explicit", path=str(explicit))
        merged = _merge(merged, _load_yaml(explicit))

    merged = _merge(merged, _env_overrides(environ, set(merged)))

    try:
        return ConfigSchema(**merged)
    except ValidationError as exc:
        raise ConfigurationInvalid(f"Invalid configuration – {exc}") from exc
