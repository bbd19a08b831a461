# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/config.py

"""
FairOS Client Configuration

Reads an optional toml file:
  ~/.config/fairos/client.toml

    [server]
    url = "http://localhost:9090/v1"
    timeout = 60
    pool_idle_timeout = 6000
    max_idle_per_host = 20

Environment overrides, applied last:
  FAIROS_URL, FAIROS_TIMEOUT
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from fairos.transport import DEFAULT_URL, IDLE_TIMEOUT, MAX_IDLE_PER_HOST


DEFAULT_CONFIG = Path.home() / ".config" / "fairos" / "client.toml"


@dataclass
class ClientConfig:
    """Connection settings for a FairOS server."""
    url: str = DEFAULT_URL
    timeout: float = 60.0
    pool_idle_timeout: float = IDLE_TIMEOUT
    max_idle_per_host: int = MAX_IDLE_PER_HOST

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "timeout": self.timeout,
            "pool_idle_timeout": self.pool_idle_timeout,
            "max_idle_per_host": self.max_idle_per_host,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClientConfig":
        return cls(
            url=data.get("url", DEFAULT_URL),
            timeout=float(data.get("timeout", 60.0)),
            pool_idle_timeout=float(data.get("pool_idle_timeout", IDLE_TIMEOUT)),
            max_idle_per_host=int(data.get("max_idle_per_host", MAX_IDLE_PER_HOST)),
        )

    def validate(self) -> tuple[list[str], list[str]]:
        """
        Validate configuration, return (errors, warnings).
        Empty errors list means config is usable.
        """
        errors = []
        warnings = []

        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(f"url '{self.url}' is not an http(s) URL")
        elif not parsed.path.rstrip("/").endswith("/v1"):
            warnings.append(f"url '{self.url}' does not end with the API version (/v1)")

        if self.timeout <= 0:
            errors.append("timeout must be positive")
        if self.max_idle_per_host < 0:
            errors.append("max_idle_per_host must not be negative")

        if parsed.scheme == "http" and parsed.hostname not in ("localhost", "127.0.0.1"):
            warnings.append("passwords are sent unencrypted to a non-local http server")

        return errors, warnings


def _apply_env(config: ClientConfig) -> ClientConfig:
    if os.environ.get("FAIROS_URL"):
        config.url = os.environ["FAIROS_URL"]
    if os.environ.get("FAIROS_TIMEOUT"):
        try:
            config.timeout = float(os.environ["FAIROS_TIMEOUT"])
        except ValueError:
            raise ValueError(
                f"Invalid FAIROS_TIMEOUT: {os.environ['FAIROS_TIMEOUT']!r}"
            ) from None
    return config


def load_config(config_path: Path = None) -> ClientConfig:
    """Load config from client.toml plus environment. Returns ClientConfig.

    Args:
        config_path: Path to client.toml. Default: ~/.config/fairos/client.toml
            The default file is optional; an explicit path must exist.

    Returns:
        ClientConfig object

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValueError: If the config file or environment is invalid
    """
    config_file = Path(config_path) if config_path else DEFAULT_CONFIG

    data = {}
    if config_file.exists():
        with open(config_file, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid config file {config_file}: {e}") from e
    elif config_path:
        raise FileNotFoundError(f"Config file not found: {config_file}")

    return _apply_env(ClientConfig.from_dict(data.get("server", {})))
