"""Connection configuration.

Reads ``key:value`` config files and validates the connection settings
needed to open a session against the backing store.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("host", "port", "namespace", "username", "password")
DEFAULT_DIALECT = "sqlite"

# Older config files name the host "ip"
KEY_ALIASES = {"ip": "host"}

_WHITESPACE = re.compile(r"\s+")


class ConfigError(Exception):
    """Raised when connection settings are missing or invalid."""

    pass


def load_config(path: str | Path) -> dict[str, str]:
    """Read connection details from a config file.

    Every line has all whitespace removed and is split on the first colon.
    Lines without a colon are skipped. Later keys overwrite earlier ones.

    Args:
        path: Path to the config file

    Returns:
        Mapping of config keys to values

    Raises:
        OSError: If the file cannot be opened
    """
    config: dict[str, str] = {}

    with open(path, encoding="utf-8") as reader:
        for line in reader:
            stripped = _WHITESPACE.sub("", line)
            if not stripped:
                continue

            parts = stripped.split(":", 1)
            if len(parts) < 2:
                logger.warning(f"Ignoring line: {line.rstrip()}")
                continue

            key, value = parts
            config[key] = value

    return config


@dataclass(frozen=True)
class ConnectionSettings:
    """Validated connection details for the backing store."""

    host: str
    port: int
    namespace: str
    username: str
    password: str
    dialect: str = DEFAULT_DIALECT

    @classmethod
    def from_mapping(cls, mapping: dict[str, str]) -> "ConnectionSettings":
        """Build settings from a loaded config mapping.

        Raises:
            ConfigError: If a required key is missing or port is not an integer
        """
        values = dict(mapping)
        for alias, key in KEY_ALIASES.items():
            if alias in values and key not in values:
                values[key] = values[alias]

        missing = [key for key in REQUIRED_KEYS if key not in values]
        if missing:
            raise ConfigError(f"Missing config keys: {', '.join(missing)}")

        try:
            port = int(values["port"])
        except ValueError as e:
            raise ConfigError(f"Invalid port: {values['port']!r}") from e

        return cls(
            host=values["host"],
            port=port,
            namespace=values["namespace"],
            username=values["username"],
            password=values["password"],
            dialect=values.get("dialect") or DEFAULT_DIALECT,
        )

    def __repr__(self):
        return (
            f"ConnectionSettings(dialect={self.dialect}, host={self.host}, "
            f"port={self.port}, namespace={self.namespace}, "
            f"username={self.username})"
        )


def load_settings(path: str | Path) -> ConnectionSettings:
    """Load and validate connection settings from a config file.

    Raises:
        ConfigError: If the file cannot be read or decoded, or settings are invalid
    """
    try:
        mapping = load_config(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read config file {path}: {e}")
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    return ConnectionSettings.from_mapping(mapping)
