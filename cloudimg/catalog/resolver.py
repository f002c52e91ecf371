# -*- coding: utf-8 -*-
"""
Catalog Path Resolver - Locate the catalog stores and transport.

Resolves the catalog directory using a priority chain:
1. CLOUDIMG_HOME environment variable (highest priority)
2. ~/.cloudimg (default fallback)

Store files default to ``store.db`` and ``index.db`` inside that
directory unless the configuration names them explicitly.

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
import os
from pathlib import Path
from typing import Tuple


_ENV_HOME = "CLOUDIMG_HOME"
_ENV_TRANSPORT = "CLOUDIMG_PROVIDER_TRANSPORT"
_CONFIG_DIR = ".cloudimg"
_DEFAULT_STORE = "store.db"
_DEFAULT_INDEX = "index.db"


def resolve_catalog_dir() -> Path:
    """Resolve the catalog directory.

    Returns
    -------
    Path
    """
    env_path = os.environ.get(_ENV_HOME)
    if env_path:
        return Path(env_path)
    return Path.home() / _CONFIG_DIR


def resolve_store_paths(config) -> Tuple[Path, Path]:
    """Resolve the key-value store and relational index files.

    Parameters
    ----------
    config : CatalogConfig

    Returns
    -------
    Tuple[Path, Path]
        ``(kv_store_path, index_path)``.
    """
    catalog_dir = resolve_catalog_dir()
    kv_path = Path(config.kv_store_path) if config.kv_store_path \
        else catalog_dir / _DEFAULT_STORE
    index_path = Path(config.index_path) if config.index_path \
        else catalog_dir / _DEFAULT_INDEX
    return kv_path, index_path


def resolve_transport(config) -> str:
    """Provider transport, ``CLOUDIMG_PROVIDER_TRANSPORT`` taking priority."""
    return os.environ.get(_ENV_TRANSPORT) or config.provider_transport
