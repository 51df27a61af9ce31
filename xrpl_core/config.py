"""
TOML-based configuration for xrpl_core consumers.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from xrpl_core.config import load_config
    cfg = load_config("xrpl_core.toml")
    key = PrivateKey.random(cfg.keys.algorithm())
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from xrpl_core.algorithms import KeyAlgorithm

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


@dataclass
class KeysConfig:
    """Key generation settings."""
    default_algorithm: str = "ed25519"   # "ed25519" or "secp256k1"

    def algorithm(self) -> KeyAlgorithm:
        return KeyAlgorithm.from_name(self.default_algorithm)


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class CoreConfig:
    """Top-level configuration container."""
    keys: KeysConfig = field(default_factory=KeysConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def load_config(path: str | None = None) -> CoreConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        XRPL_CORE_KEY_ALGORITHM -> keys.default_algorithm
        XRPL_CORE_LOG_LEVEL     -> logging.level
        XRPL_CORE_LOG_FMT       -> logging.format
        XRPL_CORE_LOG_FILE      -> logging.file

    The key algorithm is checked eagerly, so a typo fails here with
    ``UnsupportedAlgorithm`` rather than at first key generation.
    """
    cfg = CoreConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("keys", cfg.keys),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("XRPL_CORE_KEY_ALGORITHM"):
        cfg.keys.default_algorithm = v.lower()
    if v := os.environ.get("XRPL_CORE_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("XRPL_CORE_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("XRPL_CORE_LOG_FILE"):
        cfg.logging.file = v

    cfg.keys.algorithm()
    return cfg
