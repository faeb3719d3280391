import os
import math
from urllib.parse import urlparse
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_URL = "http://srv.msk01.gigacorp.local/_stats"


class ConfigError(ValueError):
    """Invalid probe configuration"""


@dataclass
class ProbeConfig:
    """Configuration for the stats probe"""
    url: str = DEFAULT_URL
    interval: float = 15.0  # seconds between ticks
    failure_threshold: int = 3  # consecutive failures before the unavailable diagnostic
    request_timeout: Optional[float] = None  # None keeps the transport default
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    user_agent: str = "StatProbe/1.0"

    def __post_init__(self):
        parsed = urlparse(self.url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"url must be an absolute http(s) URL, got {self.url!r}")
        if not math.isfinite(self.interval) or self.interval <= 0:
            raise ConfigError(f"interval must be a positive finite number, got {self.interval}")
        if self.failure_threshold < 1:
            raise ConfigError(f"failure_threshold must be at least 1, got {self.failure_threshold}")
        if self.request_timeout is not None and (
                not math.isfinite(self.request_timeout) or self.request_timeout <= 0):
            raise ConfigError(f"request_timeout must be a positive finite number, got {self.request_timeout}")
        self.log_level = self.log_level.upper()
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProbeConfig":
        """Build a config from STATPROBE_* environment variables"""
        env = os.environ if environ is None else environ

        def number(name: str, convert, default):
            raw = env.get(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return convert(raw)
            except ValueError as e:
                raise ConfigError(f"{name}={raw!r} is not a valid number") from e

        return cls(
            url=env.get("STATPROBE_URL", DEFAULT_URL),
            interval=number("STATPROBE_INTERVAL", float, 15.0),
            failure_threshold=number("STATPROBE_FAILURE_THRESHOLD", int, 3),
            request_timeout=number("STATPROBE_REQUEST_TIMEOUT", float, None),
            log_level=env.get("STATPROBE_LOG_LEVEL", "INFO"),
            log_dir=env.get("STATPROBE_LOG_DIR") or None,
        )
