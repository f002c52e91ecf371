# -*- coding: utf-8 -*-
"""
Configuration Module - Configurable defaults for cloudimg.

Provides a CatalogConfig dataclass with default values for store
locations, the provider transport and request timeouts. Loads from
~/.cloudimg/config.json if it exists, otherwise uses defaults.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

# Standard library
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".cloudimg"
_CONFIG_FILE = _CONFIG_DIR / "config.json"


@dataclass
class CatalogConfig:
    """Global cloudimg configuration with defaults.

    Attributes
    ----------
    kv_store_path : Optional[str]
        Key-value store database file. None resolves to
        ``<catalog dir>/store.db``.
    index_path : Optional[str]
        Relational index database file. None resolves to
        ``<catalog dir>/index.db``.
    provider_transport : str
        ``"rest"`` for direct driver calls, ``"gateway"`` for the RPC
        gateway.
    provider_url : str
        Root URL of the driver REST API.
    gateway_config_path : Optional[str]
        YAML gateway configuration (gateway transport only).
    request_timeout : float
        Provider request timeout in seconds.
    log_level : str
        Logging level name used by the CLI.
    """

    kv_store_path: Optional[str] = None
    index_path: Optional[str] = None
    provider_transport: str = "rest"
    provider_url: str = "http://localhost:1024/spider"
    gateway_config_path: Optional[str] = None
    request_timeout: float = 10.0
    log_level: str = "INFO"

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to JSON file."""
        path = path or _CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(self), f, indent=2)


def load_config(path: Optional[Path] = None) -> CatalogConfig:
    """Load configuration from file, or return defaults.

    Parameters
    ----------
    path : Optional[Path]
        Config file path. Defaults to ~/.cloudimg/config.json.

    Returns
    -------
    CatalogConfig
        Loaded or default configuration.
    """
    path = path or _CONFIG_FILE
    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return CatalogConfig(**{
                k: v for k, v in data.items()
                if k in CatalogConfig.__dataclass_fields__
            })
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Failed to load config from %s: %s", path, e)

    return CatalogConfig()
