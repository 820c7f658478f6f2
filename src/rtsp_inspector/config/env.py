"""Environment variable reader with dependency injection support.

EnvReader reads typed values from an environment mapping. Tests inject a
plain dict instead of patching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "RTSP_INSPECTOR_"

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


class EnvReader:
    """Environment variable reader with type conversion and validation.

    Variable names passed to the getters are relative to the reader's prefix.
    Unparseable values are logged and replaced by the default.

    Example:
        reader = EnvReader(env={"RTSP_INSPECTOR_TIMEOUT": "2.5"})
        reader.get_float("TIMEOUT")  # 2.5
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        """Initialize the environment reader.

        Args:
            env: Mapping to read instead of os.environ.
            prefix: Prefix prepended to every variable name.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ
        self.prefix = prefix

    def name(self, var: str) -> str:
        """Return the full environment variable name for var."""
        return f"{self.prefix}{var}"

    def _raw(self, var: str) -> str | None:
        value = self._env.get(self.name(var))
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string, or default if unset or blank."""
        value = self._raw(var)
        return default if value is None else value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer, or default if unset or invalid."""
        value = self._raw(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", self.name(var), value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Get a float, or default if unset or invalid."""
        value = self._raw(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", self.name(var), value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean.

        Recognizes "true/1/yes/on" and "false/0/no/off" (case-insensitive).
        Anything else is logged and yields default.
        """
        value = self._raw(var)
        if value is None:
            return default
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        logger.warning("Invalid boolean value for %s: %s", self.name(var), value)
        return default

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a path with tilde expansion, or default if unset."""
        value = self._raw(var)
        if value is None:
            return default
        return Path(value).expanduser()
