#!/usr/bin/env python3
"""
Chronotheus Proxy Configuration Management

Configuration is read once at startup and passed explicitly to the app.
Resolution order when no path is given:
    1. CHRONOTHEUS_CONFIG environment variable (a .env file is honoured)
    2. ./config.yaml
    3. /etc/chronotheus/config.yaml
    4. Built-in defaults
"""

import logging
import os
from pathlib import Path
from typing import List, NamedTuple, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, model_validator

logger = logging.getLogger("chronotheus.server")

DAY_SECONDS = 24 * 3600

DEFAULT_TIMEFRAMES = ["current", "7days", "14days", "21days", "28days"]
DEFAULT_OFFSETS = [0, 7 * DAY_SECONDS, 14 * DAY_SECONDS, 21 * DAY_SECONDS, 28 * DAY_SECONDS]


class Window(NamedTuple):
    """One (offset, timeframe name) pair."""
    offset: int
    timeframe: str


class ProxyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"
    upstream_url: str = "http://localhost:9090"
    # Parallel lists, one entry per window
    timeframes: List[str] = DEFAULT_TIMEFRAMES
    offsets: List[int] = DEFAULT_OFFSETS
    # Deadline for the whole per-request fan-out, seconds
    request_timeout: float = 30.0
    # Reject timeframe selectors that name no known window
    strict_timeframes: bool = False

    @model_validator(mode="after")
    def _check_windows(self) -> "ProxyConfig":
        if not self.timeframes:
            raise ValueError("at least one timeframe must be configured")
        if len(self.timeframes) != len(self.offsets):
            raise ValueError(
                f"timeframes ({len(self.timeframes)}) and offsets ({len(self.offsets)}) must have equal length"
            )
        if len(set(self.timeframes)) != len(self.timeframes):
            raise ValueError("timeframe names must be unique")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        return self

    def windows(self) -> List[Window]:
        """Return the configured windows in order."""
        return [Window(offset, timeframe) for offset, timeframe in zip(self.offsets, self.timeframes)]


def load_config_from(path: str) -> ProxyConfig:
    """Load proxy configuration from YAML file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return ProxyConfig(**data)


def load_config(config_path: Optional[str] = None) -> ProxyConfig:
    """
    Load configuration, falling back through the well-known locations.

    An explicitly given path must load; errors propagate. Candidate
    locations are skipped with a warning when they fail to parse.
    """
    if config_path:
        logger.info(f"Loading configuration from: {config_path}")
        return load_config_from(config_path)

    load_dotenv()
    candidates = [
        os.environ.get("CHRONOTHEUS_CONFIG"),
        "./config.yaml",
        "/etc/chronotheus/config.yaml",
    ]

    for candidate in candidates:
        if not candidate:
            continue
        path = Path(candidate)
        if not path.exists():
            continue
        try:
            logger.info(f"Loading configuration from: {path}")
            return load_config_from(str(path))
        except Exception as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            continue

    logger.info("Using default configuration")
    return ProxyConfig()
