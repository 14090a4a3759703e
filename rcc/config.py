"""rcc Configuration — project-level .rccrc.yml support.

Loads configuration from .rccrc.yml (or .rccrc.yaml, .rccrc.json) found in
the current directory or any parent. Command-line flags override it.

Example .rccrc.yml:
    target: aarch64
    platform: macos
    werror: true
    cc: clang
    error_format: json
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml

from rcc.codegen import TARGETS
from rcc.errors import ConfigError
from rcc.targets import PLATFORMS

logger = logging.getLogger(__name__)

ERROR_FORMATS = ("text", "json")


@dataclass
class CompilerConfig:
    """Project-level compiler configuration."""
    # None = the host's own target/platform
    target: Optional[str] = None
    platform: Optional[str] = None
    # Treat warnings as errors
    werror: bool = False
    # C compiler driver used by --link
    cc: str = "cc"
    # Diagnostics: "text" or "json"
    error_format: str = "text"

    def merged(self, **overrides: Any) -> "CompilerConfig":
        """Copy with every non-None override applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CompilerConfig(**values)


# ---------------------------------------------------------------------------
# Config file names (in priority order)
# ---------------------------------------------------------------------------

_CONFIG_FILES = [
    ".rccrc.yml",
    ".rccrc.yaml",
    ".rccrc.json",
]


def find_config(start_dir: str = ".") -> Optional[str]:
    """Find the nearest config file by walking up from start_dir."""
    current = os.path.abspath(start_dir)
    while True:
        for name in _CONFIG_FILES:
            path = os.path.join(current, name)
            if os.path.isfile(path):
                return path
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Optional[str] = None, start_dir: str = ".") -> CompilerConfig:
    """Load configuration from a file.

    If no path is given, searches for a config file starting from start_dir.
    If no config file is found, returns defaults.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return CompilerConfig()

    logger.debug("loading config from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e.strerror}") from e

    try:
        if path.endswith(".json"):
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    return _dict_to_config(data, path)


def _dict_to_config(data: Dict[str, Any], path: str = "<config>") -> CompilerConfig:
    """Convert a parsed dict to CompilerConfig."""
    config = CompilerConfig()

    if "target" in data:
        config.target = _choice(data["target"], TARGETS, "target", path)
    if "platform" in data:
        config.platform = _choice(data["platform"], PLATFORMS, "platform", path)
    if "werror" in data:
        if not isinstance(data["werror"], bool):
            raise ConfigError(f"{path}: 'werror' must be true or false")
        config.werror = data["werror"]
    if "cc" in data:
        config.cc = str(data["cc"])
    if "error_format" in data:
        config.error_format = _choice(data["error_format"], ERROR_FORMATS, "error_format", path)

    known = {f.name for f in fields(CompilerConfig)}
    for key in data:
        if key not in known:
            logger.debug("%s: ignoring unknown key '%s'", path, key)

    return config


def _choice(value: Any, allowed: tuple[str, ...], key: str, path: str) -> str:
    value = str(value)
    if value not in allowed:
        raise ConfigError(f"{path}: '{key}' must be one of {', '.join(allowed)}, not '{value}'")
    return value
