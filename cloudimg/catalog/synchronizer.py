# -*- coding: utf-8 -*-
"""
Image Sync Worker - Mirror provider image lists into the catalog.

Provides a runnable worker that lists the images visible through each
connection target, converts them and registers the ones the catalog
does not hold yet. Re-running a sync never duplicates entries.

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
import logging

logger = logging.getLogger(__name__)

# cloudimg internal
from cloudimg.catalog.conversion import convert_provider_image
from cloudimg.catalog.errors import CatalogError, ExistenceCheckFailed
from cloudimg.catalog.models import SyncSummary, TargetSyncResult
from cloudimg.catalog.naming import check_name, normalize_image_name
from cloudimg.catalog.provider import ProviderClient
from cloudimg.catalog.registry import ImageRegistry


def sync_image_id(connection_name: str, image_name: str) -> str:
    """Catalog id of an image discovered through ``connection_name``."""
    return connection_name + "-" + normalize_image_name(image_name)


class ImageSyncWorker:
    """Runnable worker that synchronizes provider images into the catalog.

    Connection targets are processed one after another.

    Parameters
    ----------
    registry : ImageRegistry
        Registry the discovered images are filed into.
    provider : ProviderClient
        Driver client used to list targets and images.
    """

    def __init__(
        self,
        registry: ImageRegistry,
        provider: ProviderClient,
    ) -> None:
        self._registry = registry
        self._provider = provider

    def sync_target(self, connection_name: str, namespace: str) -> int:
        """Register the images of one connection target.

        Images already in the catalog, and images whose existence cannot
        be checked, are skipped. Any other failure aborts the target.

        Parameters
        ----------
        connection_name : str
            Connection target to list images from.
        namespace : str
            Namespace to file the images into.

        Returns
        -------
        int
            Number of images newly registered.

        Raises
        ------
        ValidationError
            If the namespace is malformed.
        ExternalProviderError
            If the image list cannot be fetched.
        InvalidProviderRecord
            If a listed image has no identifier.
        CatalogError
            If registering an image fails.
        """
        check_name(namespace)
        logger.info("Syncing images of %s into %s", connection_name, namespace)
        provider_images = self._provider.list_images(connection_name)

        image_count = 0
        for provider_image in provider_images:
            record = convert_provider_image(provider_image)
            image_id = sync_image_id(connection_name, record.name)

            try:
                exists = self._registry.image_exists(namespace, image_id)
            except ExistenceCheckFailed as e:
                logger.info("Cannot check the existence of %s; skipped (%s)",
                            image_id, e)
                continue
            if exists:
                logger.info("The image %s already exists; skipped", image_id)
                continue

            record.name = image_id
            record.connection_name = connection_name
            record.is_auto_generated = True
            self._registry.register_with_record(namespace, record)
            image_count += 1

        logger.info("Registered %d new images from %s",
                    image_count, connection_name)
        return image_count

    def sync_all(self, namespace: str) -> SyncSummary:
        """Register the images of every connection target.

        A failing target is recorded in the summary and contributes no
        images; the remaining targets are still processed.

        Parameters
        ----------
        namespace : str

        Returns
        -------
        SyncSummary
            One result per connection target.

        Raises
        ------
        ValidationError
            If the namespace is malformed.
        ExternalProviderError
            If the connection targets cannot be listed.
        """
        check_name(namespace)
        targets = self._provider.list_connection_targets()

        results = []
        for target in targets:
            name = target.config_name
            try:
                count = self.sync_target(name, namespace)
            except CatalogError as e:
                logger.warning("Sync of %s failed: %s", name, e)
                results.append(TargetSyncResult(name, 0, str(e)))
                continue
            results.append(TargetSyncResult(name, count))

        summary = SyncSummary(results)
        logger.info("%r", summary)
        return summary

