# -*- coding: utf-8 -*-
"""
Catalog Context - Wire the catalog components from configuration.

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
import dataclasses
import logging

logger = logging.getLogger(__name__)

# cloudimg internal
from cloudimg.catalog.database import ImageIndex
from cloudimg.catalog.kvstore import KeyValueStore, SqliteKeyValueStore
from cloudimg.catalog.provider import ProviderClient, create_provider_client
from cloudimg.catalog.registry import ImageRegistry
from cloudimg.catalog.repository import image_repository
from cloudimg.catalog.resolver import resolve_store_paths, resolve_transport
from cloudimg.catalog.synchronizer import ImageSyncWorker
from cloudimg.core.config import CatalogConfig


class CatalogContext:
    """The stores, provider client, registry and sync worker of a catalog.

    Parameters
    ----------
    store : KeyValueStore
    index : ImageIndex
    provider : ProviderClient
    """

    def __init__(
        self,
        store: KeyValueStore,
        index: ImageIndex,
        provider: ProviderClient,
    ) -> None:
        self.store = store
        self.index = index
        self.provider = provider
        self.registry = ImageRegistry(image_repository(store), index, provider)
        self.sync_worker = ImageSyncWorker(self.registry, provider)

    def close(self) -> None:
        self.store.close()
        self.index.close()

    def __enter__(self) -> 'CatalogContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


def open_catalog(config: CatalogConfig) -> CatalogContext:
    """Open the stores and provider client named by ``config``.

    Raises
    ------
    ValueError
        If the provider transport is unknown or misconfigured.
    """
    config = dataclasses.replace(
        config, provider_transport=resolve_transport(config)
    )
    provider = create_provider_client(config)
    kv_path, index_path = resolve_store_paths(config)
    logger.debug("Opening catalog stores %s and %s", kv_path, index_path)
    return CatalogContext(
        SqliteKeyValueStore(kv_path), ImageIndex(index_path), provider
    )
