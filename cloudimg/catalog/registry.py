# -*- coding: utf-8 -*-
"""
Image Registry - Create, read, update and search catalog images.

The registry writes every record to two stores: the key-value store,
which is authoritative, and the relational index, which serves
searches. A key-value failure fails the operation. An index failure is
logged and otherwise ignored, leaving the index behind the key-value
store until the record is written again.

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
import copy
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

# cloudimg internal
from cloudimg.catalog.conversion import convert_provider_image
from cloudimg.catalog.database import ImageIndex
from cloudimg.catalog.errors import (
    AlreadyExists,
    NotFound,
    PersistenceError,
    ValidationError,
)
from cloudimg.catalog.merge import check_immutable_fields, merge_image_records
from cloudimg.catalog.models import CanonicalImageRecord, RegistrationRequest
from cloudimg.catalog.naming import (
    check_name,
    normalize_image_name,
    validate_registration_request,
)
from cloudimg.catalog.provider import ProviderClient
from cloudimg.catalog.repository import ResourceRepository


class ImageRegistry:
    """Dual-store registry of catalog images.

    Parameters
    ----------
    repository : ResourceRepository[CanonicalImageRecord]
        Typed access to the key-value store.
    index : ImageIndex
        Relational index used for searches.
    provider : Optional[ProviderClient]
        Driver client used by ``register_with_request``.
    """

    def __init__(
        self,
        repository: ResourceRepository[CanonicalImageRecord],
        index: ImageIndex,
        provider: Optional[ProviderClient] = None,
    ) -> None:
        self._repository = repository
        self._index = index
        self._provider = provider

    def register_with_request(
        self,
        namespace: str,
        request: RegistrationRequest,
    ) -> CanonicalImageRecord:
        """Register a provider image under a caller-chosen name.

        Looks the image up through the provider driver, converts it and
        files it under ``request.name``. A non-empty ``request.description``
        replaces the description reported by the provider.

        Parameters
        ----------
        namespace : str
        request : RegistrationRequest

        Returns
        -------
        CanonicalImageRecord
            The stored record.

        Raises
        ------
        ValidationError
            On a malformed namespace or request.
        AlreadyExists
        ExistenceCheckFailed
        ExternalProviderError
            If the lookup fails.
        InvalidProviderRecord
            If the provider returned a record without an identifier.
        PersistenceError
            If the key-value write fails.
        """
        check_name(namespace)
        validate_registration_request(request)
        self._ensure_absent(namespace, request.name)

        if self._provider is None:
            raise ValidationError(
                "Registration by request needs a provider client"
            )
        provider_image = self._provider.get_image(
            request.connection_name, request.csp_image_id
        )
        record = convert_provider_image(provider_image)
        record.namespace = namespace
        record.connection_name = request.connection_name
        record.id = request.name
        record.name = request.name
        if request.description:
            record.description = request.description
        record.associated_object_list = []

        self._create(record)
        return record

    def register_with_record(
        self,
        namespace: str,
        record: CanonicalImageRecord,
    ) -> CanonicalImageRecord:
        """Register an already populated record under its own name.

        The id is set to the record's name. No provider lookup is made.
        The argument is not modified.

        Returns
        -------
        CanonicalImageRecord
            The stored record.

        Raises
        ------
        ValidationError
        AlreadyExists
        ExistenceCheckFailed
        PersistenceError
        """
        check_name(namespace)
        check_name(record.name)
        self._ensure_absent(namespace, record.name)

        content = copy.deepcopy(record)
        content.namespace = namespace
        content.id = content.name
        content.associated_object_list = []

        self._create(content)
        return content

    def get_image(self, namespace: str, image_id: str) -> CanonicalImageRecord:
        """Fetch an image from the key-value store.

        Raises
        ------
        ValidationError
        NotFound
        PersistenceError
        """
        check_name(namespace)
        return self._repository.get(namespace, image_id)

    def image_exists(self, namespace: str, image_id: str) -> bool:
        """Raises ``ExistenceCheckFailed`` if the store cannot be read."""
        return self._repository.exists(namespace, image_id)

    def list_images(self, namespace: str) -> List[CanonicalImageRecord]:
        """List every image of a namespace from the key-value store."""
        check_name(namespace)
        return self._repository.list(namespace)

    def update_image(
        self,
        namespace: str,
        image_id: str,
        partial: CanonicalImageRecord,
    ) -> CanonicalImageRecord:
        """Apply a sparse update to a stored image.

        Parameters
        ----------
        namespace : str
        image_id : str
        partial : CanonicalImageRecord
            Fields to change; default-valued fields are left alone.

        Returns
        -------
        CanonicalImageRecord
            The updated record.

        Raises
        ------
        ValidationError
        ImmutableFieldViolation
            If ``partial`` sets ``namespace`` or ``id``.
        ExistenceCheckFailed
        NotFound
        PersistenceError
        """
        check_name(namespace)
        check_immutable_fields(partial)

        if not self._repository.exists(namespace, image_id):
            raise NotFound(f"The image {image_id!r} does not exist.")
        existing = self._repository.get(namespace, image_id)
        updated = merge_image_records(existing, partial)

        self._repository.put(namespace, updated.id, updated)
        logger.info("Updated image %s/%s", namespace, updated.id)

        try:
            if not self._index.update(updated):
                logger.warning(
                    "Image %s/%s has no index row to update",
                    namespace, updated.id,
                )
        except PersistenceError as e:
            logger.error("Index update failed for %s/%s: %s",
                         namespace, updated.id, e)
        return updated

    def search(self, namespace: str, *keywords: str) -> List[CanonicalImageRecord]:
        """Find images whose name contains every normalized keyword.

        Raises
        ------
        ValidationError
        PersistenceError
        """
        check_name(namespace)
        normalized = [normalize_image_name(k) for k in keywords]
        return self._index.search(namespace, normalized)

    def _ensure_absent(self, namespace: str, image_id: str) -> None:
        if self._repository.exists(namespace, image_id):
            raise AlreadyExists(f"The image {image_id!r} already exists.")

    def _create(self, record: CanonicalImageRecord) -> None:
        """Write a new record to the key-value store, then the index."""
        written = self._repository.put_if_absent(
            record.namespace, record.id, record
        )
        if not written:
            raise AlreadyExists(f"The image {record.id!r} already exists.")
        logger.info("Registered image %s/%s", record.namespace, record.id)

        try:
            self._index.insert(record)
        except PersistenceError as e:
            logger.error("Index insert failed for %s/%s: %s",
                         record.namespace, record.id, e)
